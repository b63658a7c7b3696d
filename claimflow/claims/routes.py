"""Employee claim routes."""
from __future__ import annotations

from typing import Any

from flask import request
from flask_login import current_user, login_required

from claimflow.errors import PermissionDeniedError
from claimflow.forms import ClaimForm, validated
from claimflow.models import UserRole
from claimflow.services import claim_service
from claimflow.utils.helpers import json_response, role_required

from . import claims_bp


@claims_bp.route("", methods=["GET"])
@login_required
def list_claims() -> Any:
    """Claims newest first. Employees see their own; admins may filter with ``?status=``."""
    status = request.args.get("status")
    if current_user.role is UserRole.USER:
        claims = claim_service.claims_for_user(current_user.id)
    elif status:
        claims = claim_service.claims_with_status(status)
    else:
        claims = claim_service.list_claims()
    return json_response({"claims": [claim.to_dict() for claim in claims]})


@claims_bp.route("/mine", methods=["GET"])
@login_required
def my_claims() -> Any:
    claims = claim_service.claims_for_user(current_user.id)
    return json_response({"claims": [claim.to_dict() for claim in claims]})


@claims_bp.route("/<int:claim_id>", methods=["GET"])
@login_required
def claim_detail(claim_id: int) -> Any:
    claim = claim_service.get_claim(claim_id)
    if current_user.role is UserRole.USER and claim.user_id != current_user.id:
        raise PermissionDeniedError("You can only view your own claims.")
    return json_response({"claim": claim.to_dict()})


@claims_bp.route("", methods=["POST"])
@login_required
@role_required(UserRole.USER)
def submit_claim() -> Any:
    """Submit a new claim for the acting employee."""
    form = validated(ClaimForm)
    claim_id = claim_service.create_claim(
        user_id=current_user.id,
        user_name=current_user.name,
        title=form.title.data,
        amount=form.amount.data,
        description=form.description.data or "",
        claim_date=form.date.data,
    )
    claim = claim_service.get_claim(claim_id)
    return json_response({"message": "Claim submitted.", "claim": claim.to_dict()}, status=201)
