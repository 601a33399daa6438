"""
Response helpers for MCP tools.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from nbshare_mcp.errors import (
    AuthenticationError,
    NetworkError,
    ProtocolError,
    SharingError,
    ValidationError,
)


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime objects."""

    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def make_response(data: Dict[str, Any], hint: str, compact: bool = False) -> str:
    """Create a JSON response with a hint for the model."""
    if not compact:
        data["_hint"] = hint
    return json.dumps(data, indent=2, cls=DateTimeEncoder)


def make_error(
    error_type: str,
    message: str,
    suggestion: str,
    did_you_mean: Optional[List[str]] = None,
    compact: bool = False,
) -> str:
    """Create an educational error response."""
    error_body: Dict[str, Any] = {"type": error_type, "message": message}
    if not compact:
        error_body["suggestion"] = suggestion
        if did_you_mean:
            error_body["did_you_mean"] = did_you_mean
    error: Dict[str, Any] = {"_error": error_body}
    return json.dumps(error, indent=2, cls=DateTimeEncoder)


def error_type_for(exc: Exception) -> str:
    """Map an exception to the ``type`` field of an error response."""
    if isinstance(exc, ValidationError):
        return "invalid_input"
    if isinstance(exc, AuthenticationError):
        return "authentication_failed"
    if isinstance(exc, ProtocolError):
        return "unauthorized" if exc.unauthorized else "backend_error"
    if isinstance(exc, NetworkError):
        return "network_error"
    if isinstance(exc, SharingError):
        return "sharing_error"
    if isinstance(exc, FileNotFoundError):
        return "not_found"
    return "error"


def suggestion_for(exc: Exception) -> str:
    """A short next step for the user, based on the kind of failure."""
    if isinstance(exc, ValidationError):
        return "Check the notebook or id and try again."
    if isinstance(exc, AuthenticationError) or (
        isinstance(exc, ProtocolError) and exc.unauthorized
    ):
        return "Check NBSHARE_API_URL, then run nbshare_status() to re-authenticate."
    if isinstance(exc, NetworkError):
        return "The sharing service is unreachable. Check NBSHARE_API_URL and your connection."
    if isinstance(exc, FileNotFoundError):
        return "Use nbshare_status() to list notebooks in the workspace."
    return "Try again later. If the problem persists, check the sharing service logs."
