from flask import Blueprint, request, jsonify
from thriftsy.services.auth_service import AuthService
from thriftsy.schemas import SignupSchema, SigninSchema
from thriftsy.utils.validators import validate_schema

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/signup", methods=["POST"])
@validate_schema(SignupSchema)
def signup():
    """Register new user"""
    result = AuthService.signup(**request.validated_data)
    return jsonify({"message": "Account created successfully", **result}), 201


@auth_bp.route("/signin", methods=["POST"])
@validate_schema(SigninSchema)
def signin():
    """User login"""
    result = AuthService.signin(**request.validated_data)
    return jsonify({"message": "Login successful", **result}), 200
