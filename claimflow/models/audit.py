"""Claim audit trail model."""
from __future__ import annotations

import enum

from claimflow import db
from claimflow.utils.dates import utcnow


class LogAction(enum.Enum):
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class ClaimLogEntry(db.Model):
    """One append-only entry in a claim's approval trail.

    ``stage`` is the human label ("L1 - Accounts"); ``stage_role`` keeps the raw
    role token of the acting admin and is NULL for the submission entry.
    """

    __tablename__ = "claim_logs"

    id = db.Column(db.Integer, primary_key=True)
    claim_id = db.Column(db.Integer, db.ForeignKey("claims.id"), nullable=False, index=True)
    stage = db.Column(db.String(120), nullable=False)
    stage_role = db.Column(db.String(20), nullable=True)
    action = db.Column(db.Enum(LogAction, name="log_action"), nullable=False)
    remarks = db.Column(db.Text, nullable=False, default="")
    timestamp = db.Column(db.DateTime, default=utcnow, nullable=False)
    actor = db.Column(db.String(120), nullable=False)
    actor_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    claim = db.relationship("Claim", back_populates="logs")

    def to_dict(self) -> dict:
        return {
            "stage": self.stage,
            "stage_role": self.stage_role,
            "action": self.action.value if self.action else None,
            "remarks": self.remarks,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "actor": self.actor,
            "actor_user_id": self.actor_user_id,
        }

    def __repr__(self) -> str:
        return f"<ClaimLogEntry claim_id={self.claim_id} action={self.action.value if self.action else None}>"
