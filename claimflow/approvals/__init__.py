"""Admin approval blueprint."""
from flask import Blueprint

approvals_bp = Blueprint("approvals", __name__, url_prefix="/api/approvals")

from . import routes  # noqa: E402,F401
