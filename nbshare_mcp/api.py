"""
Configuration and the process-wide sharing client.

Library code receives a ``SharingClient`` by reference; only the MCP server
and the CLI go through the lazily built defaults here.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from nbshare_mcp.clients.sharing import DEFAULT_TIMEOUT, SharingClient
from nbshare_mcp.models import Token
from nbshare_mcp.store import NotebookStore
from nbshare_mcp.workflow import ShareWorkflow

logger = logging.getLogger(__name__)

# Configuration - environment first, then defaults
NBSHARE_CONFIG_DIR = Path.home() / ".nbshare"
NBSHARE_TOKEN_FILE = NBSHARE_CONFIG_DIR / "token"

DEFAULT_API_URL = "http://localhost:8080/api/v1/"
NBSHARE_API_URL = os.environ.get("NBSHARE_API_URL", DEFAULT_API_URL)
NBSHARE_APP_URL = os.environ.get("NBSHARE_APP_URL") or None
NBSHARE_TOKEN = os.environ.get("NBSHARE_TOKEN")
NBSHARE_WORKSPACE = Path(
    os.environ.get("NBSHARE_WORKSPACE", str(NBSHARE_CONFIG_DIR / "notebooks"))
).expanduser()

try:
    NBSHARE_TIMEOUT = float(os.environ.get("NBSHARE_TIMEOUT", str(DEFAULT_TIMEOUT)))
except ValueError:
    logger.warning("Invalid NBSHARE_TIMEOUT value, using default of %s seconds", DEFAULT_TIMEOUT)
    NBSHARE_TIMEOUT = DEFAULT_TIMEOUT

# --- Process defaults ---
_client_singleton: Optional[SharingClient] = None
_workflow_singleton: Optional[ShareWorkflow] = None


def _load_saved_token() -> Optional[Token]:
    if NBSHARE_TOKEN:
        return Token(NBSHARE_TOKEN.strip())
    if NBSHARE_TOKEN_FILE.exists():
        saved = NBSHARE_TOKEN_FILE.read_text().strip()
        if saved:
            return Token(saved)
    return None


def get_sharing_client() -> SharingClient:
    """Get or create the process-wide sharing client."""
    global _client_singleton

    if _client_singleton is None:
        _client_singleton = SharingClient(
            NBSHARE_API_URL,
            token=_load_saved_token(),
            timeout=NBSHARE_TIMEOUT,
        )
        logger.debug("Initialized sharing client for %s", _client_singleton.api_url)
    return _client_singleton


def get_workflow() -> ShareWorkflow:
    """Get or create the process-wide share workflow."""
    global _workflow_singleton

    if _workflow_singleton is None:
        _workflow_singleton = ShareWorkflow(
            get_sharing_client(),
            NotebookStore(NBSHARE_WORKSPACE),
            app_url=NBSHARE_APP_URL,
        )
    return _workflow_singleton


def reset_client() -> None:
    """Drop the process defaults so the next call rebuilds them."""
    global _client_singleton, _workflow_singleton
    _client_singleton = None
    _workflow_singleton = None


def ensure_config_dir():
    """Ensure configuration directory exists."""
    NBSHARE_CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def issue_and_save_token(client: Optional[SharingClient] = None) -> str:
    """Authenticate against the backend and save the token to ~/.nbshare/token."""
    client = client or get_sharing_client()
    token = client.authenticate()

    ensure_config_dir()
    fd = os.open(str(NBSHARE_TOKEN_FILE), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        os.write(fd, token.token.encode())
    finally:
        os.close(fd)

    return token.token
