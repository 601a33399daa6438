"""
Shared helpers and re-exports for MCP tool modules.

Tool modules access commonly-patched names through this module
(e.g., ``_helpers.get_workflow()``) so that a single
``unittest.mock.patch`` target works for all tools.
"""

import os

from mcp.types import ToolAnnotations

# --- Re-exports (commonly patched in tests) ---

from nbshare_mcp.api import (  # noqa: F401
    NBSHARE_API_URL,
    NBSHARE_TOKEN,
    NBSHARE_WORKSPACE,
    get_sharing_client,
    get_workflow,
)
from nbshare_mcp.responses import (  # noqa: F401
    error_type_for,
    make_error,
    make_response,
    suggestion_for,
)
from nbshare_mcp.store import NOTEBOOK_SUFFIX


def is_compact(compact_output: bool = False) -> bool:
    """Compact mode from the tool argument or NBSHARE_COMPACT_OUTPUT."""
    if compact_output:
        return True
    return os.environ.get("NBSHARE_COMPACT_OUTPUT", "").lower() in ("1", "true", "yes")


def notebook_name(notebook: str) -> str:
    """Normalize a user-supplied notebook name to a workspace file name."""
    notebook = notebook.strip().lstrip("/")
    if notebook and not notebook.endswith(NOTEBOOK_SUFFIX):
        notebook += NOTEBOOK_SUFFIX
    return notebook


def error_response(exc: Exception, compact: bool = False) -> str:
    """Render an exception as a tool error."""
    return make_error(
        error_type=error_type_for(exc),
        message=str(exc),
        suggestion=suggestion_for(exc),
        compact=compact,
    )


def suggest_notebooks(workflow, notebook: str, limit: int = 5):
    """Workspace notebooks whose names contain the requested stem."""
    stem = notebook.lower().replace(NOTEBOOK_SUFFIX, "")
    names = workflow.store.list()
    matches = [n for n in names if stem and stem in n.lower()]
    return (matches or names)[:limit]


# --- Tool annotations ---

# Sharing talks to a remote service and may create resources there
_REMOTE_WRITE_ANNOTATIONS = {
    "readOnlyHint": False,
    "destructiveHint": False,
    "openWorldHint": True,
}

SHARE_ANNOTATIONS = ToolAnnotations(
    title="Share Notebook",
    idempotentHint=False,
    **_REMOTE_WRITE_ANNOTATIONS,
)

SYNC_ANNOTATIONS = ToolAnnotations(
    title="Resync Shared Notebook",
    idempotentHint=True,
    **_REMOTE_WRITE_ANNOTATIONS,
)

OPEN_ANNOTATIONS = ToolAnnotations(
    title="Open Shared Notebook",
    readOnlyHint=False,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=True,
)

COPY_ANNOTATIONS = ToolAnnotations(
    title="Create Notebook Copy",
    readOnlyHint=False,
    destructiveHint=False,
    idempotentHint=False,
    openWorldHint=False,
)

LINK_ANNOTATIONS = ToolAnnotations(
    title="Build Shared Notebook URL",
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=False,
)

STATUS_ANNOTATIONS = ToolAnnotations(
    title="Check Sharing Service Connection",
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=True,
)
