from decimal import Decimal

from thriftsy.extensions import db
from thriftsy.models.order import Order, OrderItem
from thriftsy.models.product import Product
from thriftsy.enums import OrderStatus, PaymentStatus
from thriftsy.exceptions import NotFoundError, ValidationError
from thriftsy.utils.helpers import money


def _normalize_items(items_data):
    items = []
    seen = set()
    for item in items_data:
        product_id = item.get("product_id")
        if product_id is not None:
            if product_id in seen:
                raise ValidationError(f"Product {product_id} listed more than once")
            seen.add(product_id)
        items.append(
            {
                "product_id": product_id,
                "title": item["title"],
                "price": money(item["price"]),
                "quantity": int(item.get("quantity") or 1),
            }
        )
    return items


def _verify_totals(items, totals):
    subtotal = money(totals["subtotal"])
    tax = money(totals.get("tax") or 0)
    shipping = money(totals.get("shipping") or 0)
    total = money(totals["total"])

    expected = sum((i["price"] * i["quantity"] for i in items), Decimal("0"))
    if subtotal != expected:
        raise ValidationError(f"Subtotal {subtotal} does not match items total {expected}")
    if total != subtotal + tax + shipping:
        raise ValidationError(f"Total {total} does not equal subtotal + tax + shipping")
    return subtotal, tax, shipping, total


def _products_for_items(items):
    """Load referenced products; every referenced id must exist and match its price"""
    products = {}
    for item in items:
        product_id = item["product_id"]
        if product_id is None:
            continue
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        if money(product.price) != item["price"]:
            raise ValidationError(f"Price of {product.title} has changed")
        products[product_id] = product
    return products


def _create_order(buyer_id, totals, payment_method, payment_status, shipping_address):
    subtotal, tax, shipping, total = totals
    order = Order(
        user_id=buyer_id,
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=total,
        payment_method=payment_method,
        payment_status=PaymentStatus(payment_status),
        status=OrderStatus.PENDING,
        shipping_address=shipping_address or {},
    )

    db.session.add(order)
    db.session.flush()

    return order


def _create_order_items(order, items):
    created_items = []
    for item in items:
        order_item = OrderItem(
            order_id=order.id,
            product_id=item["product_id"],
            title=item["title"],
            price=item["price"],
            quantity=item["quantity"],
        )
        db.session.add(order_item)
        created_items.append(order_item)

    db.session.flush()
    return created_items
