from thriftsy.models.base import BaseModel, TimestampMixin, enum_type
from thriftsy.extensions import db
from thriftsy.enums import UserRole
import bcrypt


class User(BaseModel, TimestampMixin):
    __tablename__ = "users"

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(191), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(20))
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(enum_type(UserRole, "user_roles"), nullable=False, default=UserRole.USER)
    is_verified_seller = db.Column(db.Boolean, nullable=False, default=False)
    seller_tier = db.Column(db.String(50))

    # Relationships
    products = db.relationship("Product", backref="seller", lazy="dynamic")
    orders = db.relationship("Order", backref="buyer", lazy="dynamic")
    verification = db.relationship(
        "SellerVerification",
        backref="user",
        uselist=False,
        foreign_keys="SellerVerification.user_id",
        cascade="all, delete-orphan",
    )

    def set_password(self, password: str):
        self.password_hash = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt()
        ).decode("utf-8")

    def check_password(self, password: str) -> bool:
        return bcrypt.checkpw(
            password.encode("utf-8"), self.password_hash.encode("utf-8")
        )

    def has_role(self, role) -> bool:
        return self.role == role

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self, include_sensitive=False):
        data = super().to_dict()
        if not include_sensitive:
            data.pop("password_hash", None)
        return data
