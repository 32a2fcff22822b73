from thriftsy.models.base import BaseModel
from thriftsy.extensions import db


class Review(BaseModel):
    __tablename__ = "reviews"
    __table_args__ = (
        db.UniqueConstraint("product_id", "user_id", name="uq_review_product_user"),
    )

    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    rating = db.Column(db.SmallInteger, nullable=False)
    comment = db.Column(db.Text)

    author = db.relationship("User")

    def to_dict(self):
        data = super().to_dict()
        data["user_name"] = self.author.name if self.author else None
        return data
