"""Translate service exceptions into HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException, status

from resume_builder.errors import (
    ExternalServiceError,
    InsufficientCreditsError,
    PaymentConfigurationError,
    PaymentVerificationError,
    ResumeBuilderError,
    ResumeNotFoundError,
    ResumeValidationError,
    UnauthorizedError,
)

# Checked in order; subclasses before their bases.
_STATUS_BY_ERROR: tuple[tuple[type[ResumeBuilderError], int], ...] = (
    (ResumeNotFoundError, status.HTTP_404_NOT_FOUND),
    (ResumeValidationError, status.HTTP_400_BAD_REQUEST),
    (InsufficientCreditsError, status.HTTP_403_FORBIDDEN),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (PaymentConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (PaymentVerificationError, status.HTTP_400_BAD_REQUEST),
    (ExternalServiceError, status.HTTP_502_BAD_GATEWAY),
)


def to_http_exception(exc: ResumeBuilderError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
