"""User directory routes."""
from __future__ import annotations

from typing import Any

from flask import request

from claimflow.services import user_service
from claimflow.utils.helpers import json_response

from . import users_bp


@users_bp.route("", methods=["GET"])
def list_users() -> Any:
    """List users, optionally restricted to one role (``?role=L1_ADMIN``)."""
    role = request.args.get("role")
    users = user_service.users_with_role(role) if role else user_service.list_users()
    return json_response({"users": [user.to_dict() for user in users]})


@users_bp.route("/<int:user_id>", methods=["GET"])
def user_detail(user_id: int) -> Any:
    return json_response({"user": user_service.get_user(user_id).to_dict()})
