from .user import User
from .category import Category
from .product import Product, ProductImage
from .order import Order, OrderItem, OrderAuditLog
from .notification import Notification, Message
from .wishlist import WishlistItem
from .seller import SellerVerification, SellerFeedback
from .review import Review

__all__ = [
    "User",
    "Category",
    "Product",
    "ProductImage",
    "Order",
    "OrderItem",
    "OrderAuditLog",
    "Notification",
    "Message",
    "WishlistItem",
    "SellerVerification",
    "SellerFeedback",
    "Review",
]
