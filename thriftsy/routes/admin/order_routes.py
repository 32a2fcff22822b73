from flask import Blueprint, request, jsonify
from thriftsy.services.order_service import OrderService
from thriftsy.schemas import OrderUpdateSchema
from thriftsy.enums import UserRole
from thriftsy.utils.decorators import role_required
from thriftsy.utils.validators import validate_schema

order_admin_bp = Blueprint("orders", __name__)


@order_admin_bp.route("", methods=["GET"])
@role_required(UserRole.ADMIN)
def get_orders(current_user):
    """Get all orders"""
    orders = OrderService.list_all_orders(status=request.args.get("status"))
    return jsonify([o.to_dict() for o in orders]), 200


@order_admin_bp.route("/<int:order_id>", methods=["PUT"])
@role_required(UserRole.ADMIN)
@validate_schema(OrderUpdateSchema)
def update_order(order_id, current_user):
    """Update order status and/or payment status"""
    data = request.validated_data
    order = OrderService.update_order(
        order_id,
        current_user.id,
        status=data.get("status"),
        payment_status=data.get("payment_status"),
    )
    return jsonify(order.to_dict()), 200


@order_admin_bp.route("/<int:order_id>/audit", methods=["GET"])
@role_required(UserRole.ADMIN)
def get_order_audit(order_id, current_user):
    entries = OrderService.get_audit_log(order_id)
    return jsonify([e.to_dict() for e in entries]), 200
