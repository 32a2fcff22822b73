from flask import jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from thriftsy.exceptions import ServiceError


def register_error_handlers(app):
    """Register error handlers"""

    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        app.logger.warning(f"Integrity error: {error.orig}")
        return jsonify({"error": "Database integrity error"}), 409

    @app.errorhandler(SQLAlchemyError)
    def handle_sqlalchemy_error(error):
        app.logger.error(f"Database error: {error}")
        return jsonify({"error": "Database error"}), 500

    @app.errorhandler(JWTExtendedException)
    def handle_jwt_error(error):
        return jsonify({"error": str(error) or "Unauthorized"}), 401

    @app.errorhandler(PyJWTError)
    def handle_pyjwt_error(error):
        return jsonify({"error": "Invalid token"}), 401

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_exception(error):
        app.logger.exception(f"Unhandled exception: {error}")
        return jsonify({"error": "An unexpected error occurred"}), 500
