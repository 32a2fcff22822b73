from flask import Blueprint, request, jsonify
from thriftsy.services.product_service import ProductService
from thriftsy.schemas import ProductStatusSchema
from thriftsy.enums import UserRole
from thriftsy.utils.decorators import role_required
from thriftsy.utils.validators import validate_schema

product_admin_bp = Blueprint("products", __name__)


@product_admin_bp.route("", methods=["GET"])
@role_required(UserRole.ADMIN)
def get_products(current_user):
    """Get all products, any status"""
    products = ProductService.list_products(status=request.args.get("status"))
    return jsonify([p.to_dict() for p in products]), 200


@product_admin_bp.route("/<int:product_id>", methods=["PUT"])
@role_required(UserRole.ADMIN)
@validate_schema(ProductStatusSchema)
def update_product_status(product_id, current_user):
    """Override a product's status"""
    product = ProductService.set_status(product_id, request.validated_data["status"])
    return jsonify(product.to_dict()), 200


@product_admin_bp.route("/<int:product_id>", methods=["DELETE"])
@role_required(UserRole.ADMIN)
def delete_product(product_id, current_user):
    ProductService.delete_product(product_id, current_user)
    return jsonify({"ok": True}), 200
