from flask import Blueprint, jsonify
from thriftsy.services.product_service import ProductService

category_bp = Blueprint("categories", __name__)


@category_bp.route("", methods=["GET"])
def list_categories():
    """List categories ordered by name"""
    categories = ProductService.list_categories()
    return jsonify([c.to_dict() for c in categories]), 200
