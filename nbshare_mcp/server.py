"""
Notebook Sharing MCP Server initialization.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)


def _build_instructions() -> str:
    """Build server instructions based on current configuration."""
    return """# Notebook Sharing MCP Server

Share Jupyter notebooks from a local workspace through a notebook sharing
service, and open notebooks other people shared as view-only copies.

## Available Tools

- `nbshare_share(notebook, name, password)` - Share a notebook, or re-share one that is already shared
- `nbshare_sync(notebook)` - Push a saved notebook to its existing shared copy (no-op if never shared)
- `nbshare_open(notebook_id)` - Open a shared notebook by UUID or readable id, view-only
- `nbshare_copy(notebook)` - Create an editable, unshared copy of a notebook
- `nbshare_link(notebook_id)` - Build the retrieval URL for a shared notebook (no network)
- `nbshare_status()` - Check the connection and list workspace notebooks

## Recommended Workflows

### Sharing a Notebook
1. Use `nbshare_share("analysis.ipynb")` the first time. Keep the returned edit code.
2. After edits, `nbshare_sync("analysis.ipynb")` updates the same shared link.

### Working From a Shared Link
1. `nbshare_open("my-readable-id")` saves a view-only copy in the workspace.
2. `nbshare_copy("Shared_my-readable-id.ipynb")` makes an editable copy you can share yourself.

## MCP Resources

- `nbshare:///{notebook_id}` - The shared notebook's nbformat JSON
"""


@asynccontextmanager
async def lifespan(app: FastMCP) -> AsyncIterator[None]:
    """Lifespan context manager for the MCP server."""
    from nbshare_mcp.api import NBSHARE_API_URL, NBSHARE_WORKSPACE

    logger.info("Sharing API: %s, workspace: %s", NBSHARE_API_URL, NBSHARE_WORKSPACE)
    try:
        yield
    finally:
        from nbshare_mcp.api import reset_client

        reset_client()


# Initialize FastMCP server with lifespan and instructions
mcp = FastMCP("nbshare-mcp", instructions=_build_instructions(), lifespan=lifespan)

# Import tools and resources to register them
from nbshare_mcp import (  # noqa: E402
    resources,  # noqa: F401
    tools,  # noqa: F401
)


def run():
    """Run the MCP server."""
    mcp.run()
