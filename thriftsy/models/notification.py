from thriftsy.models.base import BaseModel
from thriftsy.extensions import db


class Notification(BaseModel):
    __tablename__ = "notifications"

    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = db.Column(db.String(50), nullable=False)
    payload = db.Column(db.JSON)
    read_at = db.Column(db.DateTime, nullable=True)

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


class Message(BaseModel):
    __tablename__ = "messages"

    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    recipient_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = db.Column(db.Text, nullable=False)
    read_at = db.Column(db.DateTime, nullable=True)

    product = db.relationship("Product")

    def to_dict(self):
        data = super().to_dict()
        data["product_title"] = self.product.title if self.product else None
        return data
