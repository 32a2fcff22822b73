from sqlalchemy import or_

from thriftsy.models.notification import Message
from thriftsy.models.user import User
from thriftsy.services.product_service import ProductService
from thriftsy.services.notification_service import NotificationService
from thriftsy.extensions import db
from thriftsy.enums import NotificationType
from thriftsy.exceptions import NotFoundError, ValidationError

PREVIEW_LENGTH = 120


class MessageService:
    @staticmethod
    def send_message(sender_id: int, product_id: int, recipient_id: int, content: str) -> Message:
        """Store a message about a product and notify the recipient"""
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content required")

        product = ProductService.get_product(product_id)
        if not db.session.get(User, recipient_id):
            raise NotFoundError("Recipient not found")

        try:
            message = Message(
                product_id=product.id,
                sender_id=sender_id,
                recipient_id=recipient_id,
                content=content,
            )
            db.session.add(message)
            NotificationService.notify(
                recipient_id,
                NotificationType.MESSAGE,
                {
                    "productId": product.id,
                    "title": product.title,
                    "fromUserId": sender_id,
                    "preview": content[:PREVIEW_LENGTH],
                },
                commit=False,
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return message

    @staticmethod
    def list_for_user(user_id: int, limit: int = 200):
        """Inbox and sent messages, newest first"""
        return (
            Message.query.filter(
                or_(Message.recipient_id == user_id, Message.sender_id == user_id)
            )
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
            .all()
        )
