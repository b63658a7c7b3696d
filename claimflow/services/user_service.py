"""User directory lookups."""
from __future__ import annotations

from typing import List

from claimflow import db
from claimflow.errors import NotFoundError, ValidationError
from claimflow.models import ADMIN_ROLES, User, UserRole


def list_users() -> List[User]:
    return User.query.order_by(User.id.asc()).all()


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found.")
    return user


def parse_role(value) -> UserRole:
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole[str(value).strip().upper()]
    except KeyError:
        raise ValidationError(f"Unknown role '{value}'.") from None


def users_with_role(role) -> List[User]:
    return User.query.filter_by(role=parse_role(role)).order_by(User.id.asc()).all()


def list_admins() -> List[User]:
    return User.query.filter(User.role.in_(ADMIN_ROLES)).order_by(User.id.asc()).all()
