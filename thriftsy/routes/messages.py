from flask import Blueprint, request, jsonify
from thriftsy.services.message_service import MessageService
from thriftsy.schemas import MessageReplySchema
from thriftsy.utils.decorators import login_required
from thriftsy.utils.validators import validate_schema

message_bp = Blueprint("messages", __name__)


@message_bp.route("", methods=["GET"])
@login_required
def list_messages(current_user):
    """Messages sent or received by the caller"""
    messages = MessageService.list_for_user(current_user.id)
    return jsonify([m.to_dict() for m in messages]), 200


@message_bp.route("/reply", methods=["POST"])
@login_required
@validate_schema(MessageReplySchema)
def reply(current_user):
    data = request.validated_data
    message = MessageService.send_message(
        current_user.id, data["product_id"], data["to_user_id"], data["content"]
    )
    return jsonify(message.to_dict()), 201
