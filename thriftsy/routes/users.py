from flask import Blueprint, request, jsonify
from thriftsy.services.auth_service import AuthService
from thriftsy.schemas import ProfileUpdateSchema, ChangePasswordSchema
from thriftsy.utils.decorators import login_required
from thriftsy.utils.validators import validate_schema

user_bp = Blueprint("users", __name__)


@user_bp.route("/me", methods=["GET"])
@login_required
def get_me(current_user):
    return jsonify({"user": current_user.to_dict()}), 200


@user_bp.route("/me", methods=["PUT"])
@login_required
@validate_schema(ProfileUpdateSchema)
def update_me(current_user):
    user = AuthService.update_profile(current_user.id, **request.validated_data)
    return jsonify({"user": user.to_dict()}), 200


@user_bp.route("/change-password", methods=["POST"])
@login_required
@validate_schema(ChangePasswordSchema)
def change_password(current_user):
    data = request.validated_data
    AuthService.change_password(current_user.id, data["current_password"], data["new_password"])
    return jsonify({"message": "Password updated successfully"}), 200
