from functools import wraps
from flask import jsonify
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from thriftsy.extensions import db
from thriftsy.models.user import User


def current_user_id(optional=False):
    """User id from the request token, or None for an anonymous optional call"""
    verify_jwt_in_request(optional=optional)
    identity = get_jwt_identity()
    return int(identity) if identity is not None else None


def role_required(*roles):
    """Decorator loading the token's user and checking its role.

    With no roles any authenticated user passes.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = db.session.get(User, current_user_id())

            if not user:
                return jsonify({'error': 'User not found'}), 401

            if roles and user.role not in roles:
                return jsonify({'error': 'Insufficient permissions'}), 403

            # Pass user to route handler
            kwargs['current_user'] = user
            return fn(*args, **kwargs)
        return wrapper
    return decorator


login_required = role_required()
