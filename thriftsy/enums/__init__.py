from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class ProductStatus(str, Enum):
    UNSOLD = "unsold"
    ORDER_RECEIVED = "order_received"
    SOLD = "sold"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CANCELLED = "cancelled"
    SOLD = "sold"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class VerificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    MESSAGE = "message"
    ORDER = "order"
    ORDER_STATUS = "order_status"
    SELLER_VERIFICATION = "seller_verification"


def values(enum_cls):
    """List of the raw values of an enum, for schema validators"""
    return [member.value for member in enum_cls]
