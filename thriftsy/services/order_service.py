import logging
from collections import defaultdict

from thriftsy.models.order import Order, OrderItem, OrderAuditLog
from thriftsy.models.product import Product
from thriftsy.services.product_service import ProductService
from thriftsy.services.notification_service import NotificationService
from thriftsy.extensions import db
from thriftsy.enums import OrderStatus, PaymentStatus, NotificationType
from thriftsy.exceptions import ForbiddenError, NotFoundError, ValidationError
from thriftsy.utils import order_utils

logger = logging.getLogger(__name__)


class OrderService:
    @staticmethod
    def create_order(buyer_id, items, totals, payment_method=None, shipping_address=None,
                     payment_status=PaymentStatus.PENDING.value) -> Order:
        """Create an order and its line items in one transaction.

        Every referenced product is moved unsold -> order_received with a
        guarded update; if any product is already taken the whole order
        rolls back with ConflictError.
        """
        if not items:
            raise ValidationError("Order must have at least one item")

        items = order_utils._normalize_items(items)
        checked_totals = order_utils._verify_totals(items, totals)

        try:
            products = order_utils._products_for_items(items)

            order = order_utils._create_order(
                buyer_id,
                checked_totals,
                payment_method,
                payment_status,
                shipping_address,
            )

            for product_id in products:
                ProductService.reserve(product_id)

            order_utils._create_order_items(order, items)

            by_seller = defaultdict(list)
            for product in products.values():
                if product.user_id:
                    by_seller[product.user_id].append(product)
            for seller_id, sold in by_seller.items():
                NotificationService.notify(
                    seller_id,
                    NotificationType.ORDER,
                    {
                        "orderId": order.id,
                        "productIds": [p.id for p in sold],
                        "titles": [p.title for p in sold],
                    },
                    commit=False,
                )

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Order {order.id} created: buyer={buyer_id}, items={len(items)}")
        return order

    @staticmethod
    def get_order(order_id: int) -> Order:
        order = db.session.get(Order, order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    def get_order_for_buyer(order_id: int, buyer_id: int) -> Order:
        order = OrderService.get_order(order_id)
        if order.user_id != buyer_id:
            raise ForbiddenError("Not your order")
        return order

    @staticmethod
    def list_orders_for_buyer(buyer_id: int):
        return (
            Order.query.filter_by(user_id=buyer_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    @staticmethod
    def list_orders_for_seller(seller_id: int):
        """Orders containing the seller's products, each limited to those items"""
        seller_items = (
            db.session.query(OrderItem)
            .join(Product, OrderItem.product_id == Product.id)
            .filter(Product.user_id == seller_id)
            .order_by(OrderItem.id)
            .all()
        )
        by_order = defaultdict(list)
        for item in seller_items:
            by_order[item.order_id].append(item)
        if not by_order:
            return []

        orders = (
            Order.query.filter(Order.id.in_(list(by_order)))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
        return [order.to_dict(items=by_order[order.id]) for order in orders]

    @staticmethod
    def list_all_orders(status=None):
        query = Order.query
        if status:
            try:
                query = query.filter(Order.status == OrderStatus(status))
            except ValueError:
                raise ValidationError(f"Unknown order status: {status}")
        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    @staticmethod
    def _record_change(order, actor_id, field, old, new):
        db.session.add(
            OrderAuditLog(
                order_id=order.id,
                actor_id=actor_id,
                field=field,
                old_value=getattr(old, "value", old),
                new_value=getattr(new, "value", new),
            )
        )

    @staticmethod
    def _apply_status(order, new_status, actor_id) -> bool:
        if new_status == order.status:
            return False
        if order.status == OrderStatus.CANCELLED:
            raise ValidationError("A cancelled order cannot be reopened")

        OrderService._record_change(order, actor_id, "status", order.status, new_status)
        order.status = new_status

        if new_status == OrderStatus.CANCELLED:
            released = ProductService.release_for_order(order)
            logger.info(f"Order {order.id} cancelled, released {released} products")
        elif new_status == OrderStatus.SOLD:
            ProductService.mark_sold_for_order(order)
        return True

    @staticmethod
    def _apply_payment_status(order, new_status, actor_id) -> bool:
        if new_status == order.payment_status:
            return False
        OrderService._record_change(
            order, actor_id, "payment_status", order.payment_status, new_status
        )
        order.payment_status = new_status
        return True

    @staticmethod
    def _notify_buyer(order):
        if not order.user_id:
            return
        NotificationService.notify(
            order.user_id,
            NotificationType.ORDER_STATUS,
            {
                "orderId": order.id,
                "status": order.status.value,
                "paymentStatus": order.payment_status.value,
            },
            commit=False,
        )

    @staticmethod
    def update_order(order_id: int, actor_id: int, status=None, payment_status=None) -> Order:
        """Admin update of status and/or payment status, audited per changed field"""
        try:
            new_status = OrderStatus(status) if status is not None else None
            new_payment = PaymentStatus(payment_status) if payment_status is not None else None
        except ValueError as e:
            raise ValidationError(str(e))

        try:
            order = Order.query.filter_by(id=order_id).with_for_update().first()
            if not order:
                raise NotFoundError("Order not found")

            changed = False
            if new_status is not None:
                changed |= OrderService._apply_status(order, new_status, actor_id)
            if new_payment is not None:
                changed |= OrderService._apply_payment_status(order, new_payment, actor_id)

            if changed:
                OrderService._notify_buyer(order)
            db.session.commit()
            return order

        except Exception:
            db.session.rollback()
            raise

    @staticmethod
    def cancel_order(order_id: int, buyer_id: int) -> Order:
        """Buyer cancels their own pending order"""
        try:
            order = Order.query.filter_by(id=order_id).with_for_update().first()
            if not order:
                raise NotFoundError("Order not found")
            if order.user_id != buyer_id:
                raise ForbiddenError("Not your order")
            if not order.can_cancel():
                raise ValidationError("Order cannot be cancelled")

            OrderService._apply_status(order, OrderStatus.CANCELLED, buyer_id)
            db.session.commit()
            return order

        except Exception:
            db.session.rollback()
            raise

    @staticmethod
    def get_audit_log(order_id: int):
        OrderService.get_order(order_id)
        return (
            OrderAuditLog.query.filter_by(order_id=order_id)
            .order_by(OrderAuditLog.id.desc())
            .all()
        )
