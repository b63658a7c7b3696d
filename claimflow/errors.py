"""Domain errors surfaced to API callers."""
from __future__ import annotations


class ClaimFlowError(RuntimeError):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ClaimFlowError):
    """Raised when caller-supplied fields fail shape constraints."""

    status_code = 400


class PermissionDeniedError(ClaimFlowError):
    """Raised when the acting user may not perform the transition."""

    status_code = 403


class NotFoundError(ClaimFlowError):
    """Raised when a referenced claim or user does not exist."""

    status_code = 404


class InvalidTransitionError(ClaimFlowError):
    """Raised when a claim's current status has no transition for the action."""

    status_code = 409


class ExternalServiceError(ClaimFlowError):
    """Raised when the text-generation service fails or is not configured."""

    status_code = 502
