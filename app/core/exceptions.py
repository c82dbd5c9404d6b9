"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ExternalServiceError - Third-party service failures (Firebase)
    └── InvalidFirebaseTokenError - Rejected ID tokens (authentication.firebase)

Usage:
    from core.exceptions import ExternalServiceError

    raise ExternalServiceError(
        "Firebase is unavailable",
        error_code="FIREBASE_UNAVAILABLE",
        details={"service": "firebase"},
    )

The DRF exception handler at the bottom of this module converts these
exceptions into JSON responses, so views may let them propagate.

This module is imported while DRF loads DEFAULT_AUTHENTICATION_CLASSES,
so it must not import rest_framework.views at module level.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework import status

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        status_code: HTTP status used by the API exception handler
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Channel not found",
                "error_code": "CHANNEL_NOT_FOUND",
                "details": {"channel_id": 123}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Log the original error for debugging but don't expose internal
    details to clients.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = status.HTTP_502_BAD_GATEWAY


def exception_handler(exc, context):
    """
    DRF exception handler that understands BaseApplicationError.

    Configured via REST_FRAMEWORK["EXCEPTION_HANDLER"]. Application errors are
    rendered with their to_dict() body and status_code; everything else is
    delegated to DRF's default handler.
    """
    from rest_framework.response import Response
    from rest_framework.views import exception_handler as drf_exception_handler

    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        logger.info(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: {exc}"
        )
        return Response(exc.to_dict(), status=exc.status_code)

    return drf_exception_handler(exc, context)
