from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from library_api.services.access_policy import AccessPolicy
from library_api.services.analytics_service import AnalyticsService
from library_api.utils.auth import current_caller

analytics_bp = Blueprint("analytics", __name__)


def _scope():
    return AccessPolicy.analytics_scope(
        current_caller(),
        username=(request.args.get("username") or "").strip() or None,
        role=(request.args.get("role") or "").strip().lower() or None,
    )


@analytics_bp.get("/most-borrowed")
@jwt_required()
def most_borrowed():
    return jsonify(AnalyticsService.most_borrowed(_scope(), limit=request.args.get("limit")))


@analytics_bp.get("/monthly-trends")
@jwt_required()
def monthly_trends():
    return jsonify(AnalyticsService.monthly_trend(_scope()))


@analytics_bp.get("/category-distribution")
@jwt_required()
def category_distribution():
    return jsonify(AnalyticsService.category_distribution(_scope()))
