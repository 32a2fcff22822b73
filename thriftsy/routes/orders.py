from flask import Blueprint, request, jsonify
from thriftsy.services.order_service import OrderService
from thriftsy.schemas import OrderCreateSchema, OrderUpdateSchema
from thriftsy.enums import UserRole
from thriftsy.utils.decorators import current_user_id, login_required, role_required
from thriftsy.utils.validators import validate_schema

order_bp = Blueprint("orders", __name__)


@order_bp.route("", methods=["POST"])
@validate_schema(OrderCreateSchema)
def create_order():
    """Place an order; guests may check out without a token"""
    data = request.validated_data
    order = OrderService.create_order(
        current_user_id(optional=True),
        data["items"],
        {
            "subtotal": data["subtotal"],
            "tax": data["tax"],
            "shipping": data["shipping"],
            "total": data["total"],
        },
        payment_method=data.get("payment_method"),
        shipping_address=data.get("shipping_address"),
        payment_status=data["payment_status"],
    )
    return jsonify({"id": order.id}), 201


@order_bp.route("/mine", methods=["GET"])
@login_required
def my_orders(current_user):
    orders = OrderService.list_orders_for_buyer(current_user.id)
    return jsonify([o.to_dict() for o in orders]), 200


@order_bp.route("/sold", methods=["GET"])
@login_required
def sold_orders(current_user):
    """Orders containing the caller's products"""
    return jsonify(OrderService.list_orders_for_seller(current_user.id)), 200


@order_bp.route("/<int:order_id>", methods=["GET"])
@login_required
def get_order(order_id, current_user):
    if current_user.is_admin:
        order = OrderService.get_order(order_id)
    else:
        order = OrderService.get_order_for_buyer(order_id, current_user.id)
    return jsonify(order.to_dict()), 200


@order_bp.route("/<int:order_id>/cancel", methods=["PUT"])
@login_required
def cancel_order(order_id, current_user):
    order = OrderService.cancel_order(order_id, current_user.id)
    return jsonify(order.to_dict()), 200


@order_bp.route("/<int:order_id>", methods=["PUT"])
@role_required(UserRole.ADMIN)
@validate_schema(OrderUpdateSchema)
def update_order(order_id, current_user):
    data = request.validated_data
    order = OrderService.update_order(
        order_id,
        current_user.id,
        status=data.get("status"),
        payment_status=data.get("payment_status"),
    )
    return jsonify(order.to_dict()), 200
