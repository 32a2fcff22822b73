from flask import Blueprint, request, jsonify
from thriftsy.services.auth_service import AuthService
from thriftsy.schemas import RoleUpdateSchema
from thriftsy.enums import UserRole
from thriftsy.utils.decorators import role_required
from thriftsy.utils.validators import validate_schema

user_admin_bp = Blueprint("users", __name__)


@user_admin_bp.route("", methods=["GET"])
@role_required(UserRole.ADMIN)
def get_users(current_user):
    """Get all users"""
    return jsonify([u.to_dict() for u in AuthService.list_users()]), 200


@user_admin_bp.route("/<int:user_id>", methods=["PUT"])
@role_required(UserRole.ADMIN)
@validate_schema(RoleUpdateSchema)
def update_user_role(user_id, current_user):
    """Change a user's role"""
    user = AuthService.set_role(user_id, request.validated_data["role"])
    return jsonify(user.to_dict()), 200
