from collections import defaultdict
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, case, or_

from thriftsy.models.order import Order, OrderItem
from thriftsy.models.product import Product
from thriftsy.models.user import User
from thriftsy.extensions import db
from thriftsy.enums import OrderStatus, PaymentStatus

SERIES_DAYS = 30
TOP_PRODUCTS = 5


def _counts_as_sale():
    return or_(Order.payment_status == PaymentStatus.PAID, Order.status == OrderStatus.SOLD)


class AnalyticsService:
    @staticmethod
    def summary() -> dict:
        sales = (
            db.session.query(func.coalesce(func.sum(Order.total), 0))
            .filter(_counts_as_sale())
            .scalar()
        )
        return {
            "users": User.query.count(),
            "products": Product.query.count(),
            "orders": Order.query.count(),
            "sales": float(sales or 0),
        }

    @staticmethod
    def sales(now: datetime = None) -> dict:
        now = now or datetime.now(timezone.utc)
        today = now.date()

        total_orders, paid_orders, pending_payments = (
            db.session.query(
                func.count(Order.id),
                func.sum(case((Order.payment_status == PaymentStatus.PAID, 1), else_=0)),
                func.sum(case((Order.payment_status == PaymentStatus.PENDING, 1), else_=0)),
            ).one()
        )
        total_sales = (
            db.session.query(func.coalesce(func.sum(Order.total), 0))
            .filter(_counts_as_sale())
            .scalar()
        )

        start = datetime.combine(today - timedelta(days=SERIES_DAYS - 1), datetime.min.time())
        recent = (
            db.session.query(Order.created_at, Order.total)
            .filter(_counts_as_sale(), Order.created_at >= start)
            .all()
        )
        by_day = defaultdict(float)
        for created_at, total in recent:
            by_day[created_at.date()] += float(total)
        series = [
            {"date": day.isoformat(), "sales": round(value, 2)}
            for day, value in sorted(by_day.items())
        ]

        revenue = func.coalesce(func.sum(OrderItem.price * OrderItem.quantity), 0)
        top_rows = (
            db.session.query(
                OrderItem.product_id,
                OrderItem.title,
                revenue.label("revenue"),
                func.sum(OrderItem.quantity).label("qty"),
            )
            .join(Order, Order.id == OrderItem.order_id)
            .filter(_counts_as_sale())
            .group_by(OrderItem.product_id, OrderItem.title)
            .order_by(revenue.desc())
            .limit(TOP_PRODUCTS)
            .all()
        )

        return dict(
            totalSales=float(total_sales or 0),
            salesToday=by_day.get(today, 0.0),
            totalOrders=int(total_orders or 0),
            paidOrders=int(paid_orders or 0),
            pendingPayments=int(pending_payments or 0),
            salesLast30Days=series,
            topProducts=[
                {
                    "product_id": row.product_id,
                    "title": row.title,
                    "revenue": float(row.revenue or 0),
                    "qty": int(row.qty or 0),
                }
                for row in top_rows
            ],
        )
