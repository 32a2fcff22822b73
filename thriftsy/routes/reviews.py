from flask import Blueprint, request, jsonify
from thriftsy.services.review_service import ReviewService
from thriftsy.schemas import ReviewSchema
from thriftsy.utils.decorators import login_required
from thriftsy.utils.validators import validate_schema

review_bp = Blueprint("reviews", __name__)


@review_bp.route("/product/<int:product_id>", methods=["GET"])
def product_reviews(product_id):
    return jsonify(ReviewService.list_for_product(product_id)), 200


@review_bp.route("", methods=["POST"])
@login_required
@validate_schema(ReviewSchema)
def submit_review(current_user):
    data = request.validated_data
    review, created = ReviewService.submit(
        current_user.id, data["product_id"], data["rating"], data.get("comment")
    )
    return jsonify(review.to_dict()), 201 if created else 200
