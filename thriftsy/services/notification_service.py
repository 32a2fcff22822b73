import logging
from datetime import datetime, timezone

from sqlalchemy import event
from sqlalchemy.orm import Session

from thriftsy.extensions import db
from thriftsy.models.notification import Notification
from thriftsy.notify.hub import hub

logger = logging.getLogger(__name__)

PENDING_PUSHES = "pending_notification_pushes"


@event.listens_for(Session, "after_commit")
def _push_pending(session):
    pending = session.info.pop(PENDING_PUSHES, None)
    for user_id, data in pending or ():
        hub.send(user_id, "notification", data)


@event.listens_for(Session, "after_rollback")
def _discard_pending(session):
    dropped = session.info.pop(PENDING_PUSHES, None)
    if dropped:
        logger.debug(f"Discarded {len(dropped)} notification pushes after rollback")


class NotificationService:
    @staticmethod
    def notify(user_id: int, kind: str, payload: dict, commit: bool = True) -> Notification:
        """Persist a notification and push it to the user's open streams.

        The push only happens once the row is committed. With
        ``commit=False`` the caller owns the transaction and the push is
        deferred to its commit; a rollback drops it.
        """
        notification = Notification(
            user_id=user_id,
            type=getattr(kind, "value", kind),
            payload=payload,
        )
        db.session.add(notification)
        db.session.flush()

        db.session.info.setdefault(PENDING_PUSHES, []).append(
            (user_id, notification.to_dict())
        )
        if commit:
            db.session.commit()
        return notification

    @staticmethod
    def list_for_user(user_id: int, limit: int = 50):
        return (
            Notification.query.filter_by(user_id=user_id)
            .order_by(Notification.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def mark_read(user_id: int, ids) -> int:
        ids = [int(i) for i in ids or [] if i]
        if not ids:
            return 0
        updated = (
            Notification.query.filter(
                Notification.user_id == user_id,
                Notification.id.in_(ids),
                Notification.read_at.is_(None),
            )
            .update(
                {Notification.read_at: datetime.now(timezone.utc)},
                synchronize_session=False,
            )
        )
        db.session.commit()
        return updated

    @staticmethod
    def unread_count(user_id: int) -> int:
        return Notification.query.filter_by(user_id=user_id, read_at=None).count()
