"""User-related models."""
from __future__ import annotations

import enum

from flask_login import UserMixin

from claimflow import db


class UserRole(enum.Enum):
    USER = "USER"
    L1_ADMIN = "L1_ADMIN"
    L2_ADMIN = "L2_ADMIN"
    L3_ADMIN = "L3_ADMIN"
    L4_ADMIN = "L4_ADMIN"

    @property
    def is_admin(self) -> bool:
        return self is not UserRole.USER


ADMIN_ROLES = tuple(role for role in UserRole if role.is_admin)


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    role = db.Column(db.Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER, index=True)

    claims = db.relationship("Claim", back_populates="user", lazy="selectin")

    def get_id(self) -> str:
        return str(self.id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }

    def __repr__(self) -> str:
        return f"<User {self.email} role={self.role.value}>"
