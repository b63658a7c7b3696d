"""Demo data: one employee, one admin per approval level and five claims."""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from claimflow import db
from claimflow.models import Claim, ClaimLogEntry, ClaimStatus, LogAction, User, UserRole
from claimflow.services import approval_engine
from claimflow.services.claim_service import SUBMIT_REMARKS

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("Rahul Sharma", "rahul.sharma@company.com", UserRole.USER),
    ("Priya Patel", "priya.patel@company.com", UserRole.L1_ADMIN),
    ("Amit Kumar", "amit.kumar@company.com", UserRole.L2_ADMIN),
    ("Sneha Reddy", "sneha.reddy@company.com", UserRole.L3_ADMIN),
    ("Vikram Singh", "vikram.singh@company.com", UserRole.L4_ADMIN),
]

# (title, amount, description, days ago, [(level role, action, remarks), ...])
DEMO_CLAIMS = [
    (
        "MacBook Pro M3 - Development",
        "185000",
        "Latest MacBook Pro for development work",
        7,
        [
            (UserRole.L1_ADMIN, LogAction.APPROVE, "Approved - Valid business expense"),
            (UserRole.L2_ADMIN, LogAction.APPROVE, "Budget allocation confirmed"),
        ],
    ),
    (
        "Conference Travel - ReactConf 2026",
        "45000",
        "Flight tickets and accommodation for ReactConf",
        2,
        [],
    ),
    (
        "Client Dinner - Q4 Deal Closure",
        "8500",
        "Business dinner with client stakeholders",
        5,
        [(UserRole.L1_ADMIN, LogAction.APPROVE, "Valid entertainment expense")],
    ),
    (
        "Office Supplies - Stationery",
        "3200",
        "Pens, notebooks, and desk organizers",
        10,
        [(UserRole.L1_ADMIN, LogAction.REJECT, "No receipt attached. Please resubmit with invoice.")],
    ),
    (
        "Figma Professional License - Annual",
        "12000",
        "Annual subscription for design tool",
        15,
        [
            (UserRole.L1_ADMIN, LogAction.APPROVE, "Business tool subscription approved"),
            (UserRole.L2_ADMIN, LogAction.APPROVE, "License cost approved"),
            (UserRole.L3_ADMIN, LogAction.APPROVE, "Approved"),
            (UserRole.L4_ADMIN, LogAction.APPROVE, "Payment processed"),
        ],
    ),
]


def _build_claim(
    employee: User,
    admins: dict,
    spec: Tuple[str, str, str, int, List[tuple]],
    today: date,
) -> Claim:
    title, amount, description, days_ago, steps = spec
    claim_date = today - timedelta(days=days_ago)
    submitted_at = datetime.combine(claim_date, time(9, 0))

    claim = Claim(
        user_id=employee.id,
        user_name=employee.name,
        title=title,
        amount=Decimal(amount),
        description=description,
        date=claim_date,
        created_at=submitted_at,
    )
    claim.logs.append(
        ClaimLogEntry(
            stage=approval_engine.SUBMISSION_STAGE,
            action=LogAction.SUBMIT,
            remarks=SUBMIT_REMARKS,
            timestamp=submitted_at,
            actor=employee.name,
            actor_user_id=employee.id,
        )
    )

    status = ClaimStatus.SUBMITTED
    for offset, (role, action, remarks) in enumerate(steps, start=1):
        admin = admins[role]
        claim.logs.append(
            ClaimLogEntry(
                stage=approval_engine.stage_name(role),
                stage_role=role.value,
                action=action,
                remarks=remarks,
                timestamp=submitted_at + timedelta(days=offset),
                actor=admin.name,
                actor_user_id=admin.id,
            )
        )
        status = approval_engine.apply_action(status, action)
    claim.status = status
    return claim


def seed_demo_data(today: Optional[date] = None) -> str:
    """Insert the demo users and claims unless any user already exists."""
    if User.query.count() > 0:
        return "Data already seeded"

    today = today or date.today()
    users = [User(name=name, email=email, role=role) for name, email, role in DEMO_USERS]
    db.session.add_all(users)
    db.session.flush()

    employee = users[0]
    admins = {user.role: user for user in users if user.role.is_admin}
    claims = [_build_claim(employee, admins, spec, today) for spec in DEMO_CLAIMS]
    db.session.add_all(claims)
    db.session.commit()

    logger.info(f"Seeded {len(users)} users and {len(claims)} claims")
    return f"Successfully seeded {len(users)} users and {len(claims)} claims"
