"""Resolve which admin acted on a claim and when."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from claimflow.models import Claim, ClaimLogEntry, LogAction, User


def is_by(entry: ClaimLogEntry, admin: User) -> bool:
    """Whether ``entry`` was recorded by ``admin``.

    Entries carrying an actor id are matched on it. Entries without one come
    from imported history and are matched on the display name.
    """
    if entry.actor_user_id is not None:
        return entry.actor_user_id == admin.id
    return entry.actor == admin.name


def entries_by(claim: Claim, admin: User) -> List[ClaimLogEntry]:
    return [entry for entry in claim.logs if is_by(entry, admin)]


def acted_on(claim: Claim, admin: User, action: Optional[LogAction] = None) -> bool:
    return any(action is None or entry.action is action for entry in entries_by(claim, admin))


def first_action(claim: Claim, admin: User) -> Optional[Tuple[LogAction, datetime]]:
    """The first ``(action, timestamp)`` ``admin`` recorded on ``claim``."""
    for entry in claim.logs:
        if is_by(entry, admin):
            return entry.action, entry.timestamp
    return None
