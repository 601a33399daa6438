"""
Notebook Sharing MCP Server

Shares Jupyter notebooks through a notebook sharing service and opens
shared notebooks as view-only copies.
"""

from nbshare_mcp.clients.sharing import SharingClient
from nbshare_mcp.document import NotebookDocument
from nbshare_mcp.errors import (
    AuthenticationError,
    NetworkError,
    ProtocolError,
    SharingError,
    ValidationError,
)
from nbshare_mcp.workflow import ShareWorkflow

__version__ = "0.1.0"


def get_mcp():
    """Get the MCP server instance. Only imports when called."""
    from nbshare_mcp.server import mcp

    return mcp


__all__ = [
    "get_mcp",
    "__version__",
    "SharingClient",
    "ShareWorkflow",
    "NotebookDocument",
    # Errors
    "SharingError",
    "ValidationError",
    "AuthenticationError",
    "ProtocolError",
    "NetworkError",
]
