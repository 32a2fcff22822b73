import logging

from flask import Blueprint, Response, current_app, request, jsonify, stream_with_context
from thriftsy.services.notification_service import NotificationService
from thriftsy.schemas import MarkReadSchema
from thriftsy.notify.hub import hub, format_event, PING_FRAME
from thriftsy.utils.decorators import current_user_id, login_required
from thriftsy.utils.validators import validate_schema

logger = logging.getLogger(__name__)

notification_bp = Blueprint("notifications", __name__)

BOOTSTRAP_SIZE = 10


@notification_bp.route("", methods=["GET"])
@login_required
def list_notifications(current_user):
    notifications = NotificationService.list_for_user(current_user.id)
    return jsonify([n.to_dict() for n in notifications]), 200


@notification_bp.route("/mark-read", methods=["POST"])
@login_required
@validate_schema(MarkReadSchema)
def mark_read(current_user):
    updated = NotificationService.mark_read(current_user.id, request.validated_data["ids"])
    return jsonify({"ok": True, "updated": updated}), 200


def _event_stream(subscription, bootstrap, heartbeat):
    try:
        yield bootstrap
        while not subscription.closed:
            frame = subscription.next_frame(timeout=heartbeat)
            yield frame if frame is not None else PING_FRAME
    finally:
        hub.unsubscribe(subscription)
        logger.debug(f"Notification stream closed: user={subscription.user_id}")


@notification_bp.route("/stream", methods=["GET"])
def stream():
    """Server-sent events for the token's user.

    EventSource cannot set headers, so the token usually arrives as
    ``?token=``. The first frame replays the newest notifications. The
    stream subscribes before that query, so a notification committed in
    between arrives as a live frame even if the bootstrap also holds it.
    """
    user_id = current_user_id()
    subscription = hub.subscribe(user_id)
    try:
        recent = NotificationService.list_for_user(user_id, limit=BOOTSTRAP_SIZE)
        bootstrap = format_event("bootstrap", [n.to_dict() for n in recent])
    except Exception:
        hub.unsubscribe(subscription)
        raise
    heartbeat = current_app.config["NOTIFY_HEARTBEAT_SECONDS"]

    response = Response(
        stream_with_context(_event_stream(subscription, bootstrap, heartbeat)),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
    # the generator never runs if the client drops before the first read
    response.call_on_close(lambda: hub.unsubscribe(subscription))
    return response
