"""Claim store queries and the submit / approve / reject operations."""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from claimflow import db
from claimflow.errors import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from claimflow.models import Claim, ClaimLogEntry, ClaimStatus, LogAction, User
from claimflow.services import approval_engine
from claimflow.utils.dates import parse_iso_date, utcnow

logger = logging.getLogger(__name__)

SUBMIT_REMARKS = "Claim submitted for review"


# Queries --------------------------------------------------------------------


def _newest_first(query):
    return query.order_by(Claim.created_at.desc(), Claim.id.desc())


def list_claims() -> List[Claim]:
    return _newest_first(Claim.query).all()


def claims_for_user(user_id: int) -> List[Claim]:
    return _newest_first(Claim.query.filter_by(user_id=user_id)).all()


def parse_status(value) -> ClaimStatus:
    if isinstance(value, ClaimStatus):
        return value
    try:
        return ClaimStatus[str(value).strip().upper()]
    except KeyError:
        raise ValidationError(f"Unknown claim status '{value}'.") from None


def claims_with_status(status) -> List[Claim]:
    return _newest_first(Claim.query.filter_by(status=parse_status(status))).all()


def claims_pending_for(actor: User) -> List[Claim]:
    """Claims currently waiting on ``actor``'s approval level."""
    status = approval_engine.pending_status(actor.role)
    if status is None:
        return []
    return claims_with_status(status)


def get_claim(claim_id: int) -> Claim:
    claim = db.session.get(Claim, claim_id)
    if claim is None:
        raise NotFoundError(f"Claim {claim_id} not found.")
    return claim


# Mutations ------------------------------------------------------------------


def parse_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Invalid amount.") from None
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be greater than zero.")
    return amount.quantize(Decimal("0.01"))


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field}' is required.")
    return value.strip()


def create_claim(user_id: int, user_name: str, title: str, amount, description: str, claim_date) -> int:
    """Insert a SUBMITTED claim with its submission entry and return its id."""
    if db.session.get(User, user_id) is None:
        raise NotFoundError(f"User {user_id} not found.")

    user_name = _require_text(user_name, "user_name")
    claim = Claim(
        user_id=user_id,
        user_name=user_name,
        title=_require_text(title, "title"),
        amount=parse_amount(amount),
        description=str(description or "").strip(),
        date=parse_iso_date(claim_date),
        status=ClaimStatus.SUBMITTED,
    )
    now = utcnow()
    claim.created_at = now
    claim.logs.append(
        ClaimLogEntry(
            stage=approval_engine.SUBMISSION_STAGE,
            action=LogAction.SUBMIT,
            remarks=SUBMIT_REMARKS,
            timestamp=now,
            actor=user_name,
            actor_user_id=user_id,
        )
    )

    try:
        db.session.add(claim)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    logger.info(f"Claim {claim.id} submitted by {user_name} for {claim.amount}")
    return claim.id


def _check_actor(claim: Claim, actor: Optional[User]) -> None:
    if actor is None or not actor.role.is_admin:
        raise PermissionDeniedError("Only approval admins can act on claims.")
    expected = approval_engine.pending_role(claim.status)
    if actor.role is not expected:
        raise PermissionDeniedError(
            f"Claim {claim.id} is awaiting {expected.value}, not {actor.role.value}."
        )


def _transition(claim_id: int, remarks: str, actor: User, action: LogAction) -> ClaimStatus:
    claim = Claim.query.filter_by(id=claim_id).with_for_update().first()
    if claim is None:
        raise NotFoundError(f"Claim {claim_id} not found.")

    current = claim.status
    target = approval_engine.apply_action(current, action)
    if target is None:
        db.session.rollback()
        logger.warning(f"Refused {action.value} on claim {claim_id} in status {current.value}")
        raise InvalidTransitionError(f"Cannot {action.value.lower()} claim from status {current.value}.")
    try:
        _check_actor(claim, actor)
    except PermissionDeniedError:
        db.session.rollback()
        raise

    try:
        # Compare-and-swap on the status read above.
        swapped = (
            Claim.query.filter_by(id=claim.id, status=current)
            .update({Claim.status: target}, synchronize_session=False)
        )
        if swapped != 1:
            db.session.rollback()
            logger.warning(f"Claim {claim_id} changed status while {actor.name} was acting on it")
            raise InvalidTransitionError(f"Claim {claim_id} was modified concurrently.")

        claim.logs.append(
            ClaimLogEntry(
                stage=approval_engine.stage_name(actor.role),
                stage_role=actor.role.value,
                action=action,
                remarks=(remarks or "").strip(),
                timestamp=utcnow(),
                actor=actor.name,
                actor_user_id=actor.id,
            )
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    verb = "approved" if action is LogAction.APPROVE else "rejected"
    logger.info(f"Claim {claim_id} {verb} by {actor.name}: {current.value} -> {target.value}")
    return target


def approve_claim(claim_id: int, remarks: str, actor: User) -> ClaimStatus:
    """Advance the claim one level and record the approval. Returns the new status."""
    return _transition(claim_id, remarks, actor, LogAction.APPROVE)


def reject_claim(claim_id: int, remarks: str, actor: User) -> ClaimStatus:
    """Reject a claim that is still in flight. Terminal claims cannot be rejected."""
    return _transition(claim_id, remarks, actor, LogAction.REJECT)
