from thriftsy.models.base import BaseModel, TimestampMixin, enum_type
from thriftsy.extensions import db
from thriftsy.enums import VerificationStatus


class SellerVerification(BaseModel, TimestampMixin):
    __tablename__ = "seller_verifications"

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    shop_name = db.Column(db.String(150))
    documents = db.Column(db.JSON)
    status = db.Column(
        enum_type(VerificationStatus, "verification_statuses"),
        nullable=False,
        default=VerificationStatus.PENDING,
        index=True,
    )
    notes = db.Column(db.Text)
    decided_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"))
    decided_at = db.Column(db.DateTime)


class SellerFeedback(BaseModel):
    __tablename__ = "seller_feedback"
    __table_args__ = (
        db.UniqueConstraint(
            "order_id", "buyer_id", "seller_id", name="uq_feedback_order_buyer_seller"
        ),
    )

    order_id = db.Column(
        db.Integer, db.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    seller_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    buyer_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    as_described = db.Column(db.Boolean, nullable=False, default=True)
    rating = db.Column(db.SmallInteger)
    comment = db.Column(db.Text)
