from flask import Blueprint, jsonify
from thriftsy.services.analytics_service import AnalyticsService
from thriftsy.enums import UserRole
from thriftsy.utils.decorators import role_required

dashboard_admin_bp = Blueprint("dashboard", __name__)


@dashboard_admin_bp.route("/summary", methods=["GET"])
@role_required(UserRole.ADMIN)
def summary(current_user):
    return jsonify(AnalyticsService.summary()), 200


@dashboard_admin_bp.route("/analytics/sales", methods=["GET"])
@role_required(UserRole.ADMIN)
def sales(current_user):
    """Sales totals, 30-day series and top products"""
    return jsonify(AnalyticsService.sales()), 200
