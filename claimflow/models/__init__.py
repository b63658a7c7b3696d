"""Application data models exposed for easy imports."""
from claimflow import db  # noqa: F401
from .user import ADMIN_ROLES, User, UserRole  # noqa: F401
from .claim import Claim, ClaimStatus  # noqa: F401
from .audit import ClaimLogEntry, LogAction  # noqa: F401

__all__ = [
    "db",
    "ADMIN_ROLES",
    "User",
    "UserRole",
    "Claim",
    "ClaimStatus",
    "ClaimLogEntry",
    "LogAction",
]
