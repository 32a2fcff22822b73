from decimal import Decimal

from thriftsy.models.base import BaseModel, TimestampMixin, enum_type
from thriftsy.extensions import db
from thriftsy.enums import OrderStatus, PaymentStatus


class Order(BaseModel, TimestampMixin):
    __tablename__ = "orders"

    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    subtotal = db.Column(db.Numeric(12, 2), nullable=False)
    tax = db.Column(db.Numeric(12, 2), nullable=False)
    shipping = db.Column(db.Numeric(12, 2), nullable=False)
    total = db.Column(db.Numeric(12, 2), nullable=False)
    payment_method = db.Column(db.String(50))
    payment_status = db.Column(
        enum_type(PaymentStatus, "payment_statuses"),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    status = db.Column(
        enum_type(OrderStatus, "order_statuses"),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )
    shipping_address = db.Column(db.JSON)

    # Relationships
    items = db.relationship(
        "OrderItem",
        backref="order",
        lazy="dynamic",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    audit_entries = db.relationship(
        "OrderAuditLog",
        backref="order",
        lazy="dynamic",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def items_subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    def can_cancel(self) -> bool:
        return self.status == OrderStatus.PENDING

    def product_ids(self):
        return [item.product_id for item in self.items if item.product_id]

    def to_dict(self, include_items=True, items=None):
        data = super().to_dict()
        if include_items:
            rows = self.items if items is None else items
            data["items"] = [item.to_dict() for item in rows]
        return data


class OrderItem(BaseModel):
    __tablename__ = "order_items"

    order_id = db.Column(
        db.Integer,
        db.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Snapshot of the product at checkout; survives product edits and deletes
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    product = db.relationship("Product")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self):
        data = super().to_dict()
        data.pop("created_at", None)
        return data


class OrderAuditLog(BaseModel):
    __tablename__ = "order_audit_log"

    order_id = db.Column(
        db.Integer,
        db.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    actor_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"))
    field = db.Column(db.String(50), nullable=False)
    old_value = db.Column(db.String(50))
    new_value = db.Column(db.String(50))
