"""Claim model definitions."""
from __future__ import annotations

import enum

from claimflow import db
from claimflow.utils.dates import utcnow


class ClaimStatus(enum.Enum):
    SUBMITTED = "SUBMITTED"
    APPROVED_L1 = "APPROVED_L1"
    APPROVED_L2 = "APPROVED_L2"
    APPROVED_L3 = "APPROVED_L3"
    DISBURSED = "DISBURSED"
    REJECTED = "REJECTED"


class Claim(db.Model):
    __tablename__ = "claims"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    # Snapshot of the owner's name at submission time; never re-synced.
    user_name = db.Column(db.String(120), nullable=False)
    title = db.Column(db.String(150), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    date = db.Column(db.Date, nullable=False, index=True)
    status = db.Column(
        db.Enum(ClaimStatus, name="claim_status"),
        nullable=False,
        default=ClaimStatus.SUBMITTED,
        index=True,
    )
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship("User", back_populates="claims", lazy="joined")
    logs = db.relationship(
        "ClaimLogEntry",
        back_populates="claim",
        order_by="ClaimLogEntry.id",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_logs: bool = True) -> dict:
        payload = {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "title": self.title,
            "amount": float(self.amount) if self.amount is not None else None,
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
            "status": self.status.value if self.status else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_logs:
            payload["logs"] = [entry.to_dict() for entry in self.logs]
        return payload

    def __repr__(self) -> str:
        return f"<Claim id={self.id} status={self.status.value if self.status else None}>"
