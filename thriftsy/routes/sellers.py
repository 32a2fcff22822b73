from flask import Blueprint, current_app, request, jsonify
from thriftsy.services.seller_service import SellerService
from thriftsy.schemas import VerificationApplySchema, FeedbackSchema
from thriftsy.utils.decorators import login_required
from thriftsy.utils.validators import validate_schema
from thriftsy.utils.uploads import save_files, delete_files, DOCUMENT_EXTENSIONS

seller_bp = Blueprint("sellers", __name__)


@seller_bp.route("/verify/apply", methods=["POST"])
@login_required
@validate_schema(VerificationApplySchema)
def apply_for_verification(current_user):
    """Submit (or resubmit) a verification request with supporting documents"""
    SellerService.ensure_can_apply(current_user.id)

    documents = save_files(
        request.files.getlist("documents"),
        limit=current_app.config["MAX_VERIFICATION_DOCUMENTS"],
        allowed_extensions=DOCUMENT_EXTENSIONS,
    )
    try:
        application, created = SellerService.apply(
            current_user.id, request.validated_data.get("shop_name"), documents
        )
    except Exception:
        delete_files(documents)
        raise
    return jsonify(application.to_dict()), 201 if created else 200


@seller_bp.route("/<int:user_id>/status", methods=["GET"])
def verification_status(user_id):
    return jsonify(SellerService.get_status(user_id)), 200


@seller_bp.route("/feedback", methods=["POST"])
@login_required
@validate_schema(FeedbackSchema)
def submit_feedback(current_user):
    data = request.validated_data
    feedback = SellerService.submit_feedback(
        current_user.id,
        data["order_id"],
        as_described=data["as_described"],
        rating=data.get("rating"),
        comment=data.get("comment"),
        seller_id=data.get("seller_id"),
    )
    return jsonify(feedback.to_dict()), 201


@seller_bp.route("/<int:seller_id>/feedback", methods=["GET"])
def list_feedback(seller_id):
    feedback = SellerService.list_feedback(seller_id)
    return jsonify([f.to_dict() for f in feedback]), 200


@seller_bp.route("/<int:seller_id>/feedback/summary", methods=["GET"])
def feedback_summary(seller_id):
    return jsonify(SellerService.feedback_summary(seller_id)), 200
