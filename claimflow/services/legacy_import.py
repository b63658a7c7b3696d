"""Import claims exported from the previous document store.

Exported records carry the owner's display name and a log whose entries only
name their actor. Owners are resolved by email when present, otherwise by
name; actors are linked to a user id only when exactly one user carries that
display name. Unlinked entries keep working through name matching in
:mod:`claimflow.services.attribution`.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from claimflow import db
from claimflow.errors import NotFoundError, ValidationError
from claimflow.models import Claim, ClaimLogEntry, LogAction, User
from claimflow.services import approval_engine
from claimflow.services.claim_service import parse_amount, parse_status
from claimflow.utils.dates import parse_iso_date, parse_iso_timestamp

logger = logging.getLogger(__name__)


RECORD_TEXT_FIELDS = ("userEmail", "userName", "title", "description", "status")
ENTRY_TEXT_FIELDS = ("stage", "action", "remarks", "actor")


def _check_shape(value, text_fields, what: str) -> Dict[str, Any]:
    """``value`` must be an object whose listed fields, when set, are strings."""
    if not isinstance(value, dict):
        raise ValidationError(f"Each {what} must be a JSON object.")
    for field in text_fields:
        if value.get(field) is not None and not isinstance(value[field], str):
            raise ValidationError(f"'{field}' of a {what} must be a string.")
    return value


def _user_named(name: str) -> Optional[User]:
    matches = User.query.filter_by(name=name).limit(2).all()
    return matches[0] if len(matches) == 1 else None


def _resolve_owner(record: Dict[str, Any]) -> User:
    email = record.get("userEmail")
    owner = User.query.filter_by(email=email.lower()).first() if email else None
    if owner is None and record.get("userName"):
        owner = _user_named(record["userName"])
    if owner is None:
        raise NotFoundError(f"No user matches claim owner '{record.get('userName') or email}'.")
    return owner


def _parse_action(value) -> LogAction:
    try:
        return LogAction[str(value).upper()]
    except KeyError:
        raise ValidationError(f"Unknown log action '{value}'.") from None


def _build_entry(raw: Dict[str, Any]) -> ClaimLogEntry:
    action = _parse_action(raw.get("action"))
    actor_name = raw.get("actor") or ""
    actor = _user_named(actor_name) if actor_name else None
    stage = raw.get("stage") or approval_engine.SUBMISSION_STAGE
    role = approval_engine.role_for_stage(stage) if action is not LogAction.SUBMIT else None
    return ClaimLogEntry(
        stage=stage,
        stage_role=role.value if role else None,
        action=action,
        remarks=raw.get("remarks") or "",
        timestamp=parse_iso_timestamp(raw.get("timestamp")),
        actor=actor_name,
        actor_user_id=actor.id if actor else None,
    )


def _build_claim(record: Dict[str, Any]) -> Claim:
    _check_shape(record, RECORD_TEXT_FIELDS, "claim record")
    logs = record.get("logs") or []
    if not isinstance(logs, list):
        raise ValidationError(f"Claim '{record.get('title')}' logs must be a list.")
    owner = _resolve_owner(record)
    entries = [_build_entry(_check_shape(raw, ENTRY_TEXT_FIELDS, "log entry")) for raw in logs]

    status = approval_engine.derive_status(entry.action for entry in entries)
    if status is None:
        raise ValidationError(f"Claim '{record.get('title')}' has an inconsistent approval log.")
    if record.get("status") and parse_status(record["status"]) is not status:
        raise ValidationError(
            f"Claim '{record.get('title')}' status {record['status']} does not match its log ({status.value})."
        )

    claim = Claim(
        user_id=owner.id,
        user_name=record.get("userName") or owner.name,
        title=record.get("title") or "",
        amount=parse_amount(record.get("amount")),
        description=record.get("description") or "",
        date=parse_iso_date(record.get("date")),
        status=status,
        created_at=parse_iso_timestamp(record.get("createdAt") or entries[0].timestamp.isoformat(), "createdAt"),
    )
    if not claim.title.strip():
        raise ValidationError("'title' is required.")
    claim.logs.extend(entries)
    return claim


def import_claims(records: Iterable[Dict[str, Any]]) -> int:
    """Validate and insert every record in one transaction; returns the count."""
    claims = [_build_claim(record) for record in records]
    try:
        db.session.add_all(claims)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info(f"Imported {len(claims)} claims")
    return len(claims)
