"""
Sharing backend transports.

Provides the HTTP client for the notebook sharing API.
"""

from nbshare_mcp.clients.sharing import (  # noqa: F401
    SharingClient,
    normalize_base_url,
)
