import logging
from datetime import datetime, timezone

from sqlalchemy import func, case
from sqlalchemy.exc import IntegrityError

from thriftsy.models.seller import SellerVerification, SellerFeedback
from thriftsy.models.order import Order, OrderItem
from thriftsy.models.product import Product
from thriftsy.models.user import User
from thriftsy.services.notification_service import NotificationService
from thriftsy.extensions import db
from thriftsy.enums import NotificationType, VerificationStatus
from thriftsy.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from thriftsy.utils.mailer import send_mail

logger = logging.getLogger(__name__)


class SellerService:
    # --- verification ---

    @staticmethod
    def ensure_can_apply(user_id: int):
        """Existing application, if any; raises once the seller is approved"""
        application = SellerVerification.query.filter_by(user_id=user_id).first()
        if application and application.status == VerificationStatus.APPROVED:
            raise ValidationError("Already verified")
        return application

    @staticmethod
    def apply(user_id: int, shop_name: str = None, document_urls=None):
        """Create or resubmit a verification application.

        Returns ``(application, created)``.
        """
        application = SellerService.ensure_can_apply(user_id)

        created = application is None
        if created:
            application = SellerVerification(user_id=user_id)
            db.session.add(application)

        try:
            application.shop_name = shop_name
            application.documents = list(document_urls or [])
            application.status = VerificationStatus.PENDING
            application.notes = None
            application.decided_by = None
            application.decided_at = None
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Seller verification {'submitted' if created else 'resubmitted'}: user={user_id}")
        return application, created

    @staticmethod
    def get_status(user_id: int) -> dict:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        application = user.verification
        return {
            "user_id": user.id,
            "is_verified_seller": bool(user.is_verified_seller),
            "seller_tier": user.seller_tier,
            "application": application.to_dict() if application else None,
        }

    @staticmethod
    def list_pending():
        rows = (
            db.session.query(SellerVerification, User)
            .join(User, SellerVerification.user_id == User.id)
            .filter(SellerVerification.status == VerificationStatus.PENDING)
            .order_by(SellerVerification.created_at.asc(), SellerVerification.id.asc())
            .all()
        )
        result = []
        for application, user in rows:
            data = application.to_dict()
            data.update(
                application_id=application.id,
                name=user.name,
                email=user.email,
                is_verified_seller=bool(user.is_verified_seller),
            )
            result.append(data)
        return result

    @staticmethod
    def _decide(user_id, admin_id, status, notes):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        application = user.verification
        if not application:
            raise NotFoundError("No verification application for this user")

        application.status = status
        application.notes = notes
        application.decided_by = admin_id
        application.decided_at = datetime.now(timezone.utc)
        return user, application

    @staticmethod
    def _tell_applicant(user, status, notes):
        NotificationService.notify(
            user.id,
            NotificationType.SELLER_VERIFICATION,
            {"status": status.value, "notes": notes},
            commit=False,
        )
        db.session.commit()
        try:
            send_mail(
                user.email,
                f"Seller verification {status.value}",
                f"Hi {user.name},\n\nYour seller verification was {status.value}."
                + (f"\n\nNotes: {notes}" if notes else ""),
            )
        except Exception as e:
            logger.warning(f"Verification email to {user.email} failed: {e}")

    @staticmethod
    def approve(user_id: int, admin_id: int, notes: str = None, tier: str = None) -> User:
        user, _ = SellerService._decide(user_id, admin_id, VerificationStatus.APPROVED, notes)
        user.is_verified_seller = True
        user.seller_tier = tier
        SellerService._tell_applicant(user, VerificationStatus.APPROVED, notes)
        return user

    @staticmethod
    def reject(user_id: int, admin_id: int, notes: str = None) -> User:
        user, _ = SellerService._decide(user_id, admin_id, VerificationStatus.REJECTED, notes)
        user.is_verified_seller = False
        SellerService._tell_applicant(user, VerificationStatus.REJECTED, notes)
        return user

    # --- feedback ---

    @staticmethod
    def sellers_for_order(order_id: int):
        rows = (
            db.session.query(Product.user_id)
            .join(OrderItem, OrderItem.product_id == Product.id)
            .filter(OrderItem.order_id == order_id, Product.user_id.isnot(None))
            .distinct()
            .all()
        )
        return sorted(row[0] for row in rows)

    @staticmethod
    def submit_feedback(buyer_id: int, order_id: int, as_described=True, rating=None,
                        comment=None, seller_id=None) -> SellerFeedback:
        order = db.session.get(Order, order_id)
        if not order or order.user_id != buyer_id:
            raise ForbiddenError("Forbidden")

        sellers = SellerService.sellers_for_order(order_id)
        if len(sellers) == 1:
            seller_id = sellers[0]
        elif not sellers:
            raise ValidationError("Unable to resolve seller")
        elif not seller_id:
            raise ValidationError("Multiple sellers in order; specify sellerId")
        elif seller_id not in sellers:
            raise ValidationError("Seller is not part of this order")

        if rating is not None:
            rating = max(1, min(5, int(rating)))

        exists = SellerFeedback.query.filter_by(
            order_id=order_id, buyer_id=buyer_id, seller_id=seller_id
        ).first()
        if exists:
            raise ConflictError("Feedback already submitted")

        feedback = SellerFeedback(
            order_id=order_id,
            seller_id=seller_id,
            buyer_id=buyer_id,
            as_described=bool(as_described),
            rating=rating,
            comment=comment or None,
        )
        db.session.add(feedback)
        try:
            db.session.commit()
        except IntegrityError:
            # concurrent duplicate hit the unique constraint
            db.session.rollback()
            raise ConflictError("Feedback already submitted")
        return feedback

    @staticmethod
    def feedback_summary(seller_id: int) -> dict:
        total, positives, avg_rating = (
            db.session.query(
                func.count(SellerFeedback.id),
                func.sum(case((SellerFeedback.as_described.is_(True), 1), else_=0)),
                func.avg(SellerFeedback.rating),
            )
            .filter(SellerFeedback.seller_id == seller_id)
            .one()
        )
        total = int(total or 0)
        positives = int(positives or 0)
        recent = (
            SellerFeedback.query.filter(
                SellerFeedback.seller_id == seller_id,
                SellerFeedback.comment.isnot(None),
            )
            .order_by(SellerFeedback.id.desc())
            .limit(5)
            .all()
        )
        return {
            "seller_id": seller_id,
            "total": total,
            "positives": positives,
            "percentage": round(positives * 100 / total) if total else 0,
            "avgRating": float(avg_rating) if avg_rating is not None else None,
            "recent": [
                {
                    "comment": f.comment,
                    "as_described": f.as_described,
                    "rating": f.rating,
                    "created_at": f.created_at.isoformat(),
                }
                for f in recent
            ],
        }

    @staticmethod
    def list_feedback(seller_id: int, limit: int = 50):
        return (
            SellerFeedback.query.filter_by(seller_id=seller_id)
            .order_by(SellerFeedback.id.desc())
            .limit(limit)
            .all()
        )
