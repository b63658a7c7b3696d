"""Approval engine: the four-level claim state machine.

Everything here is pure. The claim service owns loading and persisting claims;
these helpers only decide what the next status is and how a stage is labelled.
"""
from __future__ import annotations

from typing import Iterable, Optional

from claimflow.models import ClaimStatus, LogAction, UserRole

SUBMISSION_STAGE = "Submission"

_TRANSITIONS = {
    ClaimStatus.SUBMITTED: ClaimStatus.APPROVED_L1,
    ClaimStatus.APPROVED_L1: ClaimStatus.APPROVED_L2,
    ClaimStatus.APPROVED_L2: ClaimStatus.APPROVED_L3,
    ClaimStatus.APPROVED_L3: ClaimStatus.DISBURSED,
}

_STAGE_NAMES = {
    UserRole.L1_ADMIN: "L1 - Accounts",
    UserRole.L2_ADMIN: "L2 - Finance",
    UserRole.L3_ADMIN: "L3 - CEO",
    UserRole.L4_ADMIN: "L4 - Final Disbursement",
}

# Role expected to act on a claim sitting in a given status.
_PENDING_ROLES = {
    ClaimStatus.SUBMITTED: UserRole.L1_ADMIN,
    ClaimStatus.APPROVED_L1: UserRole.L2_ADMIN,
    ClaimStatus.APPROVED_L2: UserRole.L3_ADMIN,
    ClaimStatus.APPROVED_L3: UserRole.L4_ADMIN,
}

TERMINAL_STATUSES = frozenset({ClaimStatus.DISBURSED, ClaimStatus.REJECTED})


def next_status(current: ClaimStatus) -> Optional[ClaimStatus]:
    """Status reached by approving ``current``; None when there is no next status."""
    return _TRANSITIONS.get(current)


def is_terminal(status: ClaimStatus) -> bool:
    return status in TERMINAL_STATUSES


def pending_role(status: ClaimStatus) -> Optional[UserRole]:
    return _PENDING_ROLES.get(status)


def pending_status(role: UserRole) -> Optional[ClaimStatus]:
    """Status a claim must be in to await ``role``."""
    for status, waiting_on in _PENDING_ROLES.items():
        if waiting_on is role:
            return status
    return None


def stage_name(role) -> str:
    """Human-readable stage label for an acting role.

    Accepts a ``UserRole`` or a raw role string; unknown roles fall back to
    the raw string.
    """
    if isinstance(role, UserRole):
        return _STAGE_NAMES.get(role, role.value)
    try:
        return _STAGE_NAMES[UserRole(role)]
    except (ValueError, KeyError):
        return str(role)


def role_for_stage(label: str) -> Optional[UserRole]:
    """Reverse of :func:`stage_name`, used when importing labelled history."""
    for role, name in _STAGE_NAMES.items():
        if name == label or role.value == label:
            return role
    return None


def apply_action(status: ClaimStatus, action: LogAction) -> Optional[ClaimStatus]:
    """One step of the transition table; None when the action is not allowed."""
    if is_terminal(status):
        return None
    if action is LogAction.APPROVE:
        return next_status(status)
    if action is LogAction.REJECT:
        return ClaimStatus.REJECTED
    return None


def derive_status(actions: Iterable[LogAction]) -> Optional[ClaimStatus]:
    """Fold a log's actions from SUBMITTED.

    The first action must be SUBMIT. Returns None if the sequence is not a
    legal history.
    """
    actions = list(actions)
    if not actions or actions[0] is not LogAction.SUBMIT:
        return None
    status = ClaimStatus.SUBMITTED
    for action in actions[1:]:
        status = apply_action(status, action)
        if status is None:
            return None
    return status
