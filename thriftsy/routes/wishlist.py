from flask import Blueprint, request, jsonify
from thriftsy.services.wishlist_service import WishlistService
from thriftsy.schemas import WishlistSchema
from thriftsy.utils.decorators import login_required
from thriftsy.utils.validators import validate_schema

wishlist_bp = Blueprint("wishlist", __name__)


@wishlist_bp.route("", methods=["GET"])
@login_required
def get_wishlist(current_user):
    return jsonify(WishlistService.list_product_ids(current_user.id)), 200


@wishlist_bp.route("", methods=["POST"])
@login_required
@validate_schema(WishlistSchema)
def add_to_wishlist(current_user):
    added = WishlistService.add(current_user.id, request.validated_data["product_id"])
    return jsonify({"ok": True, "added": added}), 201 if added else 200


@wishlist_bp.route("/<int:product_id>", methods=["DELETE"])
@login_required
def remove_from_wishlist(product_id, current_user):
    removed = WishlistService.remove(current_user.id, product_id)
    return jsonify({"ok": True, "removed": removed}), 200
