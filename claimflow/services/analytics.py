"""Read-only claim statistics for the dashboards.

Every function reloads the claims in the requested date window and aggregates
them in memory. Amounts are summed as ``Decimal`` and converted to float only
when the result is serialized.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from claimflow.errors import ValidationError
from claimflow.models import Claim, ClaimStatus, LogAction, User, UserRole
from claimflow.services import approval_engine, attribution, user_service
from claimflow.utils.dates import ALL_TIME, DateRange, month_key, week_start

logger = logging.getLogger(__name__)

GRANULARITIES = ("day", "week", "month")
STATUS_FILTERS = ("all", "pending", "approved", "rejected")
RECENT_ACTIVITY_LIMIT = 10

# Statuses a claim can be in once it has reached an admin's stage.
_REACHED = {
    UserRole.L1_ADMIN: frozenset(ClaimStatus),
    UserRole.L2_ADMIN: frozenset(ClaimStatus) - {ClaimStatus.SUBMITTED, ClaimStatus.REJECTED},
    UserRole.L3_ADMIN: frozenset({ClaimStatus.APPROVED_L2, ClaimStatus.APPROVED_L3, ClaimStatus.DISBURSED}),
    UserRole.L4_ADMIN: frozenset({ClaimStatus.APPROVED_L3, ClaimStatus.DISBURSED}),
}

_TIMELINE_LEVELS = OrderedDict(
    [
        ("l1", UserRole.L1_ADMIN),
        ("l2", UserRole.L2_ADMIN),
        ("l3", UserRole.L3_ADMIN),
        ("l4", UserRole.L4_ADMIN),
    ]
)

ZERO = Decimal("0")


def _claims_in(date_range: DateRange, newest_first: bool = False) -> List[Claim]:
    query = Claim.query
    if date_range.start is not None:
        query = query.filter(Claim.date >= date_range.start)
    if date_range.end is not None:
        query = query.filter(Claim.date <= date_range.end)
    if newest_first:
        query = query.order_by(Claim.created_at.desc(), Claim.id.desc())
    else:
        query = query.order_by(Claim.created_at.asc(), Claim.id.asc())
    return query.all()


def _total(claims: Iterable[Claim]) -> Decimal:
    return sum((claim.amount for claim in claims), ZERO)


def _is_pending(claim: Claim) -> bool:
    return not approval_engine.is_terminal(claim.status)


def approval_rate(approved: int, rejected: int) -> float:
    """Approved share of decided claims as a percentage, one decimal place."""
    decided = approved + rejected
    if decided == 0:
        return 0.0
    return round(approved / decided * 100, 1)


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _bucketed(claims: Iterable[Claim], key_func, key_name: str) -> List[dict]:
    buckets: Dict[str, dict] = {}
    for claim in claims:
        key = key_func(claim.date)
        bucket = buckets.setdefault(key, {key_name: key, "count": 0, "amount": ZERO})
        bucket["count"] += 1
        bucket["amount"] += claim.amount
    return [
        {**bucket, "amount": float(bucket["amount"])}
        for _, bucket in sorted(buckets.items())
    ]


def monthly_breakdown(claims: Iterable[Claim]) -> List[dict]:
    return _bucketed(claims, month_key, "month")


def claims_overview(date_range: DateRange = ALL_TIME) -> dict:
    claims = _claims_in(date_range)
    total_amount = _total(claims)

    by_status: Dict[str, dict] = {}
    for claim in claims:
        entry = by_status.setdefault(claim.status.value, {"count": 0, "amount": ZERO})
        entry["count"] += 1
        entry["amount"] += claim.amount

    return {
        "total_claims": len(claims),
        "total_amount": float(total_amount),
        "average_amount": float(total_amount / len(claims)) if claims else 0.0,
        "by_status": {
            status: {"count": entry["count"], "amount": float(entry["amount"])}
            for status, entry in by_status.items()
        },
    }


def claims_time_series(date_range: DateRange = ALL_TIME, granularity: str = "day") -> List[dict]:
    """Claim counts and amounts per day, Sunday-aligned week or month."""
    granularity = (granularity or "day").lower()
    if granularity not in GRANULARITIES:
        raise ValidationError(f"Unknown granularity '{granularity}'.")

    if granularity == "day":
        key_func = lambda day: day.isoformat()  # noqa: E731
    elif granularity == "week":
        key_func = lambda day: week_start(day).isoformat()  # noqa: E731
    else:
        key_func = month_key
    return _bucketed(_claims_in(date_range), key_func, "date")


def employee_statistics(date_range: DateRange = ALL_TIME) -> List[dict]:
    per_user: Dict[int, dict] = {}
    for claim in _claims_in(date_range):
        stats = per_user.setdefault(
            claim.user_id,
            {
                "user_id": claim.user_id,
                "user_name": claim.user_name,
                "total_claims": 0,
                "total_amount": ZERO,
                "approved_claims": 0,
                "rejected_claims": 0,
                "pending_claims": 0,
            },
        )
        stats["total_claims"] += 1
        stats["total_amount"] += claim.amount
        if claim.status is ClaimStatus.DISBURSED:
            stats["approved_claims"] += 1
        elif claim.status is ClaimStatus.REJECTED:
            stats["rejected_claims"] += 1
        else:
            stats["pending_claims"] += 1

    ranked = sorted(per_user.values(), key=lambda stats: stats["total_amount"], reverse=True)
    return [{**stats, "total_amount": float(stats["total_amount"])} for stats in ranked]


def _admin_summary(admin: User, claims: List[Claim]) -> dict:
    approved = sum(1 for claim in claims if attribution.acted_on(claim, admin, LogAction.APPROVE))
    rejected = sum(1 for claim in claims if attribution.acted_on(claim, admin, LogAction.REJECT))
    waiting_status = approval_engine.pending_status(admin.role)
    reached = _REACHED.get(admin.role, frozenset())
    return {
        "user_id": admin.id,
        "name": admin.name,
        "level": admin.role.value,
        "level_name": admin.role.value.replace("_", " ", 1),
        "approved": approved,
        "rejected": rejected,
        "pending": sum(1 for claim in claims if claim.status is waiting_status),
        "total_processed": approved + rejected,
        "approval_rate": approval_rate(approved, rejected),
        "total_reached": sum(1 for claim in claims if claim.status in reached),
    }


def admin_performance(date_range: DateRange = ALL_TIME) -> List[dict]:
    claims = _claims_in(date_range)
    performance = [_admin_summary(admin, claims) for admin in user_service.list_admins()]
    return sorted(performance, key=lambda row: row["total_processed"], reverse=True)


def _claim_brief(claim: Claim) -> dict:
    return {
        "id": claim.id,
        "title": claim.title,
        "amount": float(claim.amount),
        "date": claim.date.isoformat(),
        "status": claim.status.value,
        "description": claim.description,
    }


def _employee_detail(user: User, claims: List[Claim]) -> dict:
    own = [claim for claim in claims if claim.user_id == user.id]
    return {
        "user": user.to_dict(),
        "total_claims": len(own),
        "total_amount": float(_total(own)),
        "approved_claims": sum(1 for claim in own if claim.status is ClaimStatus.DISBURSED),
        "rejected_claims": sum(1 for claim in own if claim.status is ClaimStatus.REJECTED),
        "pending_claims": sum(1 for claim in own if _is_pending(claim)),
        "claims": [_claim_brief(claim) for claim in own],
        "monthly_breakdown": monthly_breakdown(own),
    }


def _admin_detail(admin: User, claims: List[Claim]) -> dict:
    processed = [claim for claim in claims if attribution.entries_by(claim, admin)]
    approved = sum(1 for claim in processed if attribution.acted_on(claim, admin, LogAction.APPROVE))
    rejected = sum(1 for claim in processed if attribution.acted_on(claim, admin, LogAction.REJECT))

    recent = sorted(processed, key=lambda claim: (claim.created_at, claim.id), reverse=True)
    activity = []
    for claim in recent[:RECENT_ACTIVITY_LIMIT]:
        action, acted_at = attribution.first_action(claim, admin)
        activity.append(
            {
                "id": claim.id,
                "title": claim.title,
                "amount": float(claim.amount),
                "user_name": claim.user_name,
                "status": claim.status.value,
                "action": action.value,
                "date": acted_at.isoformat(),
            }
        )

    return {
        "user": admin.to_dict(),
        "total_processed": len(processed),
        "approved": approved,
        "rejected": rejected,
        "approval_rate": approval_rate(approved, rejected),
        "recent_activity": activity,
        "monthly_breakdown": monthly_breakdown(processed),
    }


def user_detailed_stats(user_id: int, date_range: DateRange = ALL_TIME) -> dict:
    """Activity summary for an employee (own claims) or an admin (claims acted on)."""
    user = user_service.get_user(user_id)
    claims = _claims_in(date_range)
    if user.role is UserRole.USER:
        return _employee_detail(user, claims)
    return _admin_detail(user, claims)


def _matches_filter(claim: Claim, status_filter: str) -> bool:
    if status_filter == "pending":
        return _is_pending(claim)
    if status_filter == "approved":
        return claim.status is ClaimStatus.DISBURSED
    if status_filter == "rejected":
        return claim.status is ClaimStatus.REJECTED
    return True


def claim_timeline(claim: Claim) -> dict:
    submitted = next((entry for entry in claim.logs if entry.action is LogAction.SUBMIT), None)
    timeline = {"submitted": _isoformat(submitted.timestamp if submitted else claim.created_at)}
    for key, role in _TIMELINE_LEVELS.items():
        entry = next((entry for entry in claim.logs if entry.stage_role == role.value), None)
        timeline[key] = _isoformat(entry.timestamp) if entry else None
    return timeline


def current_stage(claim: Claim) -> tuple:
    """``(current_stage, stage_status)`` for the claims table."""
    if claim.status is ClaimStatus.REJECTED:
        rejection = next((entry for entry in claim.logs if entry.action is LogAction.REJECT), None)
        return (rejection.stage if rejection else "Unknown"), "Rejected"
    if claim.status is ClaimStatus.DISBURSED:
        return UserRole.L4_ADMIN.value, "Completed"
    role = approval_engine.pending_role(claim.status)
    return (role.value if role else "Unknown"), "Pending"


def all_claims_detailed(date_range: DateRange = ALL_TIME, status_filter: Optional[str] = "all") -> List[dict]:
    status_filter = (status_filter or "all").lower()
    if status_filter not in STATUS_FILTERS:
        raise ValidationError(f"Unknown status filter '{status_filter}'.")

    rows = []
    for claim in _claims_in(date_range, newest_first=True):
        if not _matches_filter(claim, status_filter):
            continue
        stage, stage_status = current_stage(claim)
        rows.append(
            {
                **claim.to_dict(),
                "current_stage": stage,
                "stage_status": stage_status,
                "timeline": claim_timeline(claim),
            }
        )
    logger.debug(f"Detailed claims: {len(rows)} rows for filter '{status_filter}'")
    return rows
