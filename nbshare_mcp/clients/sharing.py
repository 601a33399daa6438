"""
Notebook Sharing API Client

Talks to the sharing backend: issues and refreshes bearer tokens, creates
and updates shared notebooks, and retrieves them by UUID or readable id.

Every failure is raised as one of the ``nbshare_mcp.errors`` types; this
module never decides what the user sees.
"""

import logging
import threading
from typing import Any, Dict, Optional, Union
from urllib.parse import quote, urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from nbshare_mcp.document import NotebookDocument
from nbshare_mcp.errors import (
    AuthenticationError,
    NetworkError,
    ProtocolError,
    ValidationError,
)
from nbshare_mcp.ids import is_valid_uuid
from nbshare_mcp.models import NotebookResponse, ShareResponse, Token
from nbshare_mcp.validators import (
    validate_notebook_content,
    validate_notebook_response,
    validate_share_response,
    validate_token,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30

# Endpoints, relative to the API base URL
AUTH_ISSUE = "auth/issue"
AUTH_REFRESH = "auth/refresh"
NOTEBOOKS = "notebooks"
BY_READABLE_ID = "notebooks/get-by-readable-id"


def normalize_base_url(url: str) -> str:
    """Return ``url`` with a trailing slash so relative joins keep its path."""
    url = url.strip()
    if not url:
        raise ValidationError("Sharing API URL is required", operation="configure")
    return url if url.endswith("/") else url + "/"


NotebookLike = Union[NotebookDocument, Dict[str, Any]]


def _notebook_payload(notebook: NotebookLike) -> Dict[str, Any]:
    if isinstance(notebook, NotebookDocument):
        return notebook.to_dict()
    return notebook


class SharingClient:
    """Client for the notebook sharing API."""

    def __init__(
        self,
        api_url: str,
        token: Optional[Token] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.api_url = normalize_base_url(api_url)
        self.timeout = timeout
        self._token: Optional[Token] = token
        self._token_lock = threading.Lock()

        if session is None:
            # Connection-pooling session; only idempotent methods are retried
            session = requests.Session()
            retry_strategy = Retry(
                total=3,
                backoff_factor=0.5,
                status_forcelist=[500, 502, 503, 504],
                allowed_methods=["GET", "PUT"],
                raise_on_status=False,
            )
            adapter = HTTPAdapter(
                max_retries=retry_strategy,
                pool_connections=10,
                pool_maxsize=10,
            )
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self._session = session

    # --- Credentials ---

    @property
    def token(self) -> Token:
        """The cached token, authenticating on first use.

        A token that went stale mid-session is not renewed here; the next
        authenticated call fails with an unauthorized ``ProtocolError`` and
        the caller decides whether to ``authenticate()`` again.
        """
        if self._token is not None:
            return self._token
        return self.authenticate()

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def authenticate(self) -> Token:
        """Obtain a new bearer token and cache it."""
        endpoint = self._endpoint(AUTH_ISSUE)
        logger.debug("Authenticating with endpoint: %s", endpoint)
        token = self._issue_token("authenticate", endpoint, body=None)
        with self._token_lock:
            self._token = token
        return token

    def refresh(self, token: Optional[Token] = None) -> Token:
        """Exchange ``token`` (default: the cached one) for a fresh token."""
        if token is None:
            token = self.token
        endpoint = self._endpoint(AUTH_REFRESH)
        logger.debug("Refreshing token with endpoint: %s", endpoint)
        refreshed = self._issue_token("refresh", endpoint, body={"token": token.token})
        with self._token_lock:
            self._token = refreshed
        return refreshed

    def _issue_token(self, operation: str, endpoint: str, body: Optional[Dict[str, str]]) -> Token:
        try:
            response = self._send("POST", endpoint, token=None, body=body)
        except NetworkError as e:
            raise AuthenticationError(
                f"Network error during {operation}: {e}", operation=operation, target=endpoint
            ) from e

        if not response.ok:
            logger.debug(
                "%s failed: %s %s %s", operation, response.status_code, response.reason,
                response.text[:200],
            )
            label = "Token refresh" if operation == "refresh" else "Authentication"
            raise AuthenticationError(
                f"{label} failed (HTTP {response.status_code}"
                f"{' ' + response.reason if response.reason else ''})",
                operation=operation,
                target=endpoint,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        result = validate_token(data)
        if not result:
            logger.debug("Invalid token response from %s: %s", operation, result.reason)
            raise AuthenticationError(
                f"Invalid token response: {result.reason}",
                operation=operation,
                target=endpoint,
                status_code=response.status_code,
            )
        return Token.from_dict(data)

    # --- Notebooks ---

    def share(self, notebook: NotebookLike, password: Optional[str] = None) -> ShareResponse:
        """Store a new shared copy of ``notebook``.

        Every call creates a new server-side notebook with a new UUID. Use
        ``update`` for a notebook that already carries a ``sharedId``.

        Raises:
            ValidationError: If the notebook is malformed (no request is made)
            ProtocolError: On an error status or an unexpected response body
            NetworkError: If the request could not be sent
        """
        payload = self._share_payload("share", notebook, password, target=None)
        endpoint = self._endpoint(NOTEBOOKS)
        logger.debug("Sharing notebook with endpoint: %s", endpoint)
        data = self._authorized_json("share", "POST", endpoint, payload, target=endpoint)
        return self._share_response("share", data, target=endpoint)

    def update(
        self, id: str, notebook: NotebookLike, password: Optional[str] = None
    ) -> ShareResponse:
        """Replace the content of the shared notebook ``id``."""
        id = (id or "").strip()
        payload = self._share_payload("update", notebook, password, target=id)
        if not id:
            raise ValidationError("Notebook ID is required", operation="update")
        endpoint = self._endpoint(f"{NOTEBOOKS}/{quote(id, safe='')}")
        logger.debug("Updating notebook with endpoint: %s", endpoint)
        data = self._authorized_json("update", "PUT", endpoint, payload, target=id)
        return self._share_response("update", data, target=id)

    def retrieve(self, id: str) -> NotebookResponse:
        """Fetch a shared notebook by UUID or readable id."""
        id = (id or "").strip()
        endpoint = self.make_retrieve_url(id)
        logger.debug("Retrieving notebook with endpoint: %s", endpoint)
        data = self._authorized_json("retrieve", "GET", endpoint, None, target=id)

        result = validate_notebook_response(data)
        if not result:
            logger.debug("Invalid notebook response: %s", result.reason)
            raise ProtocolError(
                f"Invalid notebook response from API: {result.reason}",
                operation="retrieve",
                target=id,
            )
        return NotebookResponse.from_dict(data)

    def make_retrieve_url(self, id: str) -> str:
        """Build the URL ``retrieve`` would call for ``id``, without a request.

        UUID-shaped ids address the canonical endpoint; anything else is
        looked up as a readable id.
        """
        id = (id or "").strip()
        if not id:
            raise ValidationError("Notebook ID is required", operation="make_retrieve_url")
        if is_valid_uuid(id, strict=False):
            return self._endpoint(f"{NOTEBOOKS}/{id}")
        return self._endpoint(f"{BY_READABLE_ID}/{quote(id, safe='')}")

    # --- Internals ---

    def _endpoint(self, path: str) -> str:
        return urljoin(self.api_url, path)

    def _headers(self, token: Optional[Token]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if token is not None:
            headers["Authorization"] = f"Bearer {token.token}"
        return headers

    def _send(
        self,
        method: str,
        url: str,
        token: Optional[Token],
        body: Any = None,
    ) -> requests.Response:
        kwargs: Dict[str, Any] = {"headers": self._headers(token), "timeout": self.timeout}
        if body is not None:
            kwargs["json"] = body
        try:
            return self._session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(f"Network error calling {url}: {e}", target=url) from e

    def _authorized_json(
        self,
        operation: str,
        method: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]],
        target: Optional[str],
    ) -> Any:
        token = self.token
        try:
            response = self._send(method, endpoint, token=token, body=payload)
        except NetworkError as e:
            e.operation = operation
            e.target = target
            raise

        if not response.ok:
            logger.debug(
                "%s failed: %s %s %s", operation, response.status_code, response.reason,
                response.text[:200],
            )
            raise ProtocolError(
                f"{operation.capitalize()} failed (HTTP {response.status_code}"
                f"{' ' + response.reason if response.reason else ''})",
                operation=operation,
                target=target,
                status_code=response.status_code,
                status_text=response.reason or "",
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(
                f"Invalid JSON from sharing API: {e}",
                operation=operation,
                target=target,
                status_code=response.status_code,
                status_text=response.reason or "",
            ) from e

    def _share_payload(
        self,
        operation: str,
        notebook: NotebookLike,
        password: Optional[str],
        target: Optional[str],
    ) -> Dict[str, Any]:
        content = _notebook_payload(notebook)
        result = validate_notebook_content(content)
        if not result:
            logger.debug("Invalid notebook content provided for %s: %s", operation, result.reason)
            raise ValidationError(
                f"Invalid notebook content: {result.reason}",
                operation=operation,
                target=target,
            )
        payload: Dict[str, Any] = {"notebook": content}
        if password:
            payload["password"] = password
        return payload

    def _share_response(self, operation: str, data: Any, target: Optional[str]) -> ShareResponse:
        result = validate_share_response(data)
        if not result:
            logger.debug("Unexpected API response while %s: %s", operation, result.reason)
            raise ProtocolError(
                f"Unexpected API response while {'sharing' if operation == 'share' else 'updating'}"
                f": {result.reason}",
                operation=operation,
                target=target,
            )
        return ShareResponse.from_dict(data)
