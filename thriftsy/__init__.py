import os

from flask import Flask, jsonify, send_from_directory
from .extensions import db, migrate, jwt
from .config import Config
from thriftsy.utils.error_handlers import register_error_handlers
from thriftsy.routes import register_blueprints
from thriftsy.notify.hub import hub
from thriftsy import models  # noqa: F401  (register tables)


def create_app(config_class=Config):

    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    register_blueprints(app)
    register_error_handlers(app)

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({"error": "Invalid token"}), 401

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return jsonify({"error": "Missing authorization token"}), 401

    @app.route("/health")
    def health():
        return {"status": "healthy", "streams": hub.connection_count()}, 200

    @app.route("/uploads/<path:filename>")
    def uploaded_file(filename):
        return send_from_directory(app.config["UPLOAD_FOLDER"], filename)

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    if app.config.get("NOTIFY_HEARTBEAT_ENABLED"):
        hub.start_heartbeat(app.config["NOTIFY_HEARTBEAT_SECONDS"])

    return app
