"""Admin approval routes."""
from __future__ import annotations

from typing import Any

from flask_login import current_user, login_required

from claimflow.forms import DecisionForm, validated
from claimflow.models import ADMIN_ROLES
from claimflow.services import claim_service
from claimflow.utils.helpers import json_response, role_required

from . import approvals_bp


@approvals_bp.route("/pending", methods=["GET"])
@login_required
@role_required(*ADMIN_ROLES)
def pending_approvals() -> Any:
    """Return claims waiting on the acting admin's level."""
    claims = claim_service.claims_pending_for(current_user)
    return json_response({"claims": [claim.to_dict() for claim in claims]})


def _decide(claim_id: int, decide) -> Any:
    form = validated(DecisionForm)
    new_status = decide(claim_id, form.remarks.data or "", current_user)
    claim = claim_service.get_claim(claim_id)
    return json_response(
        {
            "message": f"Claim {claim_id} is now {new_status.value}.",
            "status": new_status.value,
            "claim": claim.to_dict(),
        }
    )


@approvals_bp.route("/<int:claim_id>/approve", methods=["POST"])
@login_required
@role_required(*ADMIN_ROLES)
def approve_claim(claim_id: int) -> Any:
    return _decide(claim_id, claim_service.approve_claim)


@approvals_bp.route("/<int:claim_id>/reject", methods=["POST"])
@login_required
@role_required(*ADMIN_ROLES)
def reject_claim(claim_id: int) -> Any:
    return _decide(claim_id, claim_service.reject_claim)
