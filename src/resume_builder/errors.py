"""Exception taxonomy shared by the services, the REST layer and the client."""

from __future__ import annotations

__all__ = [
    "ExternalServiceError",
    "InsufficientCreditsError",
    "PaymentConfigurationError",
    "PaymentVerificationError",
    "ResumeBuilderError",
    "ResumeNotFoundError",
    "ResumeValidationError",
    "UnauthorizedError",
]


class ResumeBuilderError(Exception):
    """Base class for every error raised on purpose by this package."""


class ResumeNotFoundError(ResumeBuilderError):
    """Resource is absent or belongs to another user.

    The two cases are never distinguished so callers cannot discover
    other users' resumes.
    """


class ResumeValidationError(ResumeBuilderError, ValueError):
    """Create or update payload is missing required fields or is malformed."""


class InsufficientCreditsError(ResumeBuilderError):
    """The user's AI or download credit balance is exhausted."""

    def __init__(self, kind: str, message: str | None = None) -> None:
        self.kind = kind
        super().__init__(message or f"Insufficient {kind} credits")


class UnauthorizedError(ResumeBuilderError):
    """Identity is missing or expired; the client must log in again."""


class PaymentVerificationError(ResumeBuilderError):
    """Payment signature did not match or the payment cannot be verified."""


class PaymentConfigurationError(PaymentVerificationError):
    """Payment gateway credentials are not configured."""


class ExternalServiceError(ResumeBuilderError, RuntimeError):
    """An AI or payment gateway call failed or timed out."""
