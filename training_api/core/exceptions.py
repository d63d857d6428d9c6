"""
Custom exceptions for the Training API proxy.
Provides structured error handling for upstream calls and profile storage.
"""

from typing import Any, Dict, Optional

from fastapi import status


class TrainingAPIException(Exception):
    """Base exception for the Training API proxy."""

    def __init__(
        self,
        message: str,
        error_code: str = "TRAINING_API_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# Upstream API
class UpstreamTransportError(TrainingAPIException):
    """Raised when the upstream API cannot be reached or times out."""

    def __init__(self, message: str = "Upstream request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "UPSTREAM_TRANSPORT_ERROR", details)


class UpstreamStatusError(TrainingAPIException):
    """Raised when the upstream API answers with a non-200 status."""

    def __init__(self, status_code: int, status_text: str, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        super().__init__(status_text, "UPSTREAM_STATUS_ERROR", details)


class UpstreamDecodeError(TrainingAPIException):
    """Raised when the upstream body is not the JSON we expect."""

    def __init__(self, message: str = "Malformed upstream response", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "UPSTREAM_DECODE_ERROR", details)


# Profile storage
class ProfileNotFoundError(TrainingAPIException):
    """Raised when a lookup matches no profile row."""

    def __init__(self, account_id: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        self.account_id = account_id
        message = "no rows in result set"
        if account_id is not None:
            message = f"Profile not found: {account_id}"
        super().__init__(message, "PROFILE_NOT_FOUND", details)


class DatabaseError(TrainingAPIException):
    """Raised when database operations fail."""

    def __init__(self, message: str = "Database operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_ERROR", details)


# Validation
class InvalidQueryParameterError(TrainingAPIException):
    """Raised when a query parameter is missing or out of range."""

    def __init__(self, name: str, value: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.name = name
        self.value = value
        message = f"Invalid query parameter: {name}={value!r}"
        super().__init__(message, "INVALID_QUERY_PARAMETER", details)


def get_exception_status_code(exc: TrainingAPIException) -> int:
    """
    Get the appropriate HTTP status code for a TrainingAPIException.

    Args:
        exc: TrainingAPIException instance

    Returns:
        int: HTTP status code
    """
    if isinstance(exc, UpstreamStatusError):
        return exc.status_code

    status_mapping = {
        # Upstream API
        "UPSTREAM_TRANSPORT_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "UPSTREAM_DECODE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,

        # Profile storage
        "PROFILE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
        "DATABASE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,

        # Validation
        "INVALID_QUERY_PARAMETER": status.HTTP_400_BAD_REQUEST,
    }

    return status_mapping.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
