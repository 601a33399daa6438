"""
Error types raised by the sharing client and workflow.
"""

from typing import Optional


class SharingError(Exception):
    """Base class for all sharing failures.

    Carries the operation that failed and the id or endpoint it targeted
    so callers can log a useful line without parsing the message.
    """

    def __init__(self, message: str, operation: str = "", target: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = target

    def __str__(self) -> str:
        return self.message


class ValidationError(SharingError):
    """Input rejected locally, before any request was made."""


class AuthenticationError(SharingError):
    """Token issuance or refresh failed."""

    def __init__(
        self,
        message: str,
        operation: str = "authenticate",
        target: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, operation=operation, target=target)
        self.status_code = status_code


class ProtocolError(SharingError):
    """The backend answered, but with an error status or an unexpected body."""

    def __init__(
        self,
        message: str,
        operation: str = "",
        target: Optional[str] = None,
        status_code: Optional[int] = None,
        status_text: str = "",
    ):
        super().__init__(message, operation=operation, target=target)
        self.status_code = status_code
        self.status_text = status_text

    @property
    def unauthorized(self) -> bool:
        """True when the backend rejected the bearer token."""
        return self.status_code in (401, 403)


class NetworkError(SharingError):
    """The HTTP call itself failed (DNS, connection refused, timeout)."""
