from flask import Blueprint, jsonify
from lendify.services.dashboard_service import DashboardService
from lendify.utils.decorators import admin_required

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.get("/summary")
@admin_required
def summary():
    return jsonify({"success": True, "data": DashboardService.summary()})
