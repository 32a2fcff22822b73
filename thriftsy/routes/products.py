from flask import Blueprint, current_app, request, jsonify
from thriftsy.services.product_service import ProductService
from thriftsy.schemas import ProductSchema, ProductUpdateSchema
from thriftsy.utils.decorators import login_required
from thriftsy.utils.validators import validate_schema, parse_bool_arg
from thriftsy.utils.uploads import save_files, delete_files

product_bp = Blueprint("products", __name__)


def _uploaded_images():
    return save_files(
        request.files.getlist("images"), limit=current_app.config["MAX_PRODUCT_IMAGES"]
    )


@product_bp.route("", methods=["GET"])
def list_products():
    """List products, newest first"""
    products = ProductService.list_products(
        verified_only=parse_bool_arg("verified"),
        seller_id=request.args.get("seller_id", type=int),
        status=request.args.get("status"),
        search=request.args.get("search"),
        category_id=request.args.get("category_id", type=int),
    )
    return jsonify([p.to_dict() for p in products]), 200


@product_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id):
    product = ProductService.get_product(product_id)
    return jsonify(product.to_dict()), 200


@product_bp.route("", methods=["POST"])
@login_required
@validate_schema(ProductSchema)
def create_product(current_user):
    images = _uploaded_images()
    try:
        product = ProductService.create_product(current_user.id, request.validated_data, images)
    except Exception:
        delete_files(images)
        raise
    return jsonify({"id": product.id, "product": product.to_dict()}), 201


@product_bp.route("/<int:product_id>", methods=["PUT"])
@login_required
@validate_schema(ProductUpdateSchema)
def update_product(product_id, current_user):
    # ownership first so a refused request stores no files
    ProductService.get_owned_product(product_id, current_user.id)

    images = _uploaded_images()
    try:
        product = ProductService.update_product(
            product_id, current_user.id, request.validated_data, images
        )
    except Exception:
        delete_files(images)
        raise
    return jsonify(product.to_dict()), 200


@product_bp.route("/<int:product_id>", methods=["DELETE"])
@login_required
def delete_product(product_id, current_user):
    ProductService.delete_product(product_id, current_user)
    return jsonify({"ok": True}), 200
