"""
Identifier helpers for shared notebooks.

A shared notebook is addressed by a canonical UUID issued by the backend
and, optionally, by a human-friendly readable id that aliases the same
resource.
"""

import re
from typing import Optional

# Version nibble 1-5, variant nibble 8/9/a/b
_STRICT_UUID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# Any 8-4-4-4-12 hex string (ids issued before the backend enforced versions)
_LOOSE_UUID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value, strict: bool = True) -> bool:
    """Return True if ``value`` is a hyphenated UUID string.

    Args:
        value: Candidate identifier (non-strings are rejected)
        strict: Require an RFC 4122 version (1-5) and variant (8, 9, a, b).
            With ``strict=False`` any 8-4-4-4-12 hex string is accepted.
    """
    if not isinstance(value, str):
        return False
    pattern = _STRICT_UUID if strict else _LOOSE_UUID
    return pattern.match(value) is not None


def is_readable_id(value) -> bool:
    """Return True if ``value`` looks like a readable id rather than a UUID."""
    if not isinstance(value, str) or not value:
        return False
    if any(ch.isspace() for ch in value):
        return False
    return not is_valid_uuid(value, strict=False)


def preferred_id(shared_id: Optional[str], readable_id: Optional[str]) -> Optional[str]:
    """Pick the id to show users: the readable alias when known, else the UUID."""
    if readable_id:
        return readable_id
    return shared_id or None
