"""
MCP Resources for shared notebooks.

Provides:
- nbshare:///{notebook_id} - the retrieved notebook as nbformat JSON
"""

import logging

from nbshare_mcp.server import mcp

logger = logging.getLogger(__name__)


@mcp.resource(
    "nbshare:///{notebook_id}",
    name="shared_notebook",
    description="A shared notebook's nbformat JSON, by UUID or readable id",
    mime_type="application/json",
)
def shared_notebook(notebook_id: str) -> str:
    """Retrieve a shared notebook without saving it to the workspace."""
    from nbshare_mcp.tools import _helpers

    client = _helpers.get_sharing_client()
    response = client.retrieve(notebook_id)
    logger.debug("Served shared notebook %s as a resource", response.id)
    return response.content.to_json(indent=2)
