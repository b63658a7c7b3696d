"""Dashboard analytics routes."""
from __future__ import annotations

from typing import Any

from flask import request
from flask_login import login_required

from claimflow.models import ADMIN_ROLES
from claimflow.services import analytics, insights
from claimflow.utils.helpers import date_range_from_request, json_response, role_required

from . import analytics_bp


@analytics_bp.route("/overview", methods=["GET"])
@login_required
@role_required(*ADMIN_ROLES)
def overview() -> Any:
    return json_response(analytics.claims_overview(date_range_from_request()))


@analytics_bp.route("/time-series", methods=["GET"])
@login_required
@role_required(*ADMIN_ROLES)
def time_series() -> Any:
    granularity = (request.args.get("granularity") or "day").lower()
    series = analytics.claims_time_series(date_range_from_request(), granularity)
    return json_response({"granularity": granularity, "series": series})


@analytics_bp.route("/employees", methods=["GET"])
@login_required
@role_required(*ADMIN_ROLES)
def employees() -> Any:
    return json_response({"employees": analytics.employee_statistics(date_range_from_request())})


@analytics_bp.route("/admins", methods=["GET"])
@login_required
@role_required(*ADMIN_ROLES)
def admins() -> Any:
    return json_response({"admins": analytics.admin_performance(date_range_from_request())})


@analytics_bp.route("/users/<int:user_id>", methods=["GET"])
@login_required
@role_required(*ADMIN_ROLES)
def user_stats(user_id: int) -> Any:
    return json_response(analytics.user_detailed_stats(user_id, date_range_from_request()))


@analytics_bp.route("/claims", methods=["GET"])
@login_required
@role_required(*ADMIN_ROLES)
def claims_detailed() -> Any:
    status_filter = request.args.get("statusFilter", "all")
    rows = analytics.all_claims_detailed(date_range_from_request(), status_filter)
    return json_response({"claims": rows})


@analytics_bp.route("/insights", methods=["POST"])
@login_required
@role_required(*ADMIN_ROLES)
def generate_insights() -> Any:
    """Ask the text-generation service for a narrative over the current stats."""
    return json_response(insights.generate_insights(date_range_from_request()))
