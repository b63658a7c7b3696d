"""Employee-facing claims blueprint."""
from flask import Blueprint

claims_bp = Blueprint("claims", __name__, url_prefix="/api/claims")

from . import routes  # noqa: E402,F401
