"""
MCP Tools for sharing notebooks.

Share, resync, open and copy work on ``.ipynb`` files in the workspace
directory; link and status never modify anything.
"""

# Import tool modules to trigger registration with the MCP server
from nbshare_mcp.tools import (  # noqa: F401
    copy_notebook,
    link,
    open_shared,
    share,
    status,
    sync,
)
