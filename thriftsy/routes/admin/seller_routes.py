from flask import Blueprint, request, jsonify
from thriftsy.services.seller_service import SellerService
from thriftsy.schemas import VerificationDecisionSchema
from thriftsy.enums import UserRole
from thriftsy.utils.decorators import role_required
from thriftsy.utils.validators import validate_schema

seller_admin_bp = Blueprint("sellers", __name__)


@seller_admin_bp.route("/pending", methods=["GET"])
@role_required(UserRole.ADMIN)
def pending_applications(current_user):
    return jsonify(SellerService.list_pending()), 200


@seller_admin_bp.route("/<int:user_id>/approve", methods=["PUT"])
@role_required(UserRole.ADMIN)
@validate_schema(VerificationDecisionSchema)
def approve(user_id, current_user):
    data = request.validated_data
    user = SellerService.approve(
        user_id, current_user.id, notes=data.get("notes"), tier=data.get("tier")
    )
    return jsonify(user.to_dict()), 200


@seller_admin_bp.route("/<int:user_id>/reject", methods=["PUT"])
@role_required(UserRole.ADMIN)
@validate_schema(VerificationDecisionSchema)
def reject(user_id, current_user):
    user = SellerService.reject(user_id, current_user.id, notes=request.validated_data.get("notes"))
    return jsonify(user.to_dict()), 200
