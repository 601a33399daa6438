"""
Share workflow: decides, per notebook, whether a share is a first share, a
manual re-share or a silent resync after autosave, and writes the sharing
metadata back into the notebook.

The notebook's own metadata is the only record of its sharing state:

- ``unshared``: no ``sharedId``; a manual share creates a new shared notebook
- ``shared``: ``sharedId`` present; manual shares and autosaves update it

Metadata is written only after the backend accepted the request, and the
document is replaced as a whole, so a failure never leaves it half-updated.
"""

import logging
import secrets
import string
import threading
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, TypeVar

from nbshare_mcp.document import (
    DOMAIN_ID,
    IS_PASSWORD_PROTECTED,
    IS_SHARED_NOTEBOOK,
    LAST_SHARED,
    READABLE_ID,
    SHARED_ID,
    SHARED_NAME,
    NotebookDocument,
    generate_default_name,
    make_editable,
    make_view_only,
    strip_sharing_metadata,
)
from nbshare_mcp.errors import ProtocolError, SharingError
from nbshare_mcp.ids import preferred_id
from nbshare_mcp.models import ShareResponse, SharingClientProtocol
from nbshare_mcp.store import NotebookStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

PASSWORD_LENGTH = 8
_PASSWORD_ALPHABET = string.ascii_letters + string.digits

# Outcome actions
SHARED = "shared"
UPDATED = "updated"
SKIPPED = "skipped"
FAILED = "failed"
OPENED = "opened"
FALLBACK = "fallback"
COPIED = "copied"


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    """Edit code handed to the user on first share.

    This is a plain shared secret that lets its holder edit the shared
    notebook later. It is not an authentication scheme.
    """
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


@dataclass
class NotebookHandle:
    """An open notebook: its store name, current document and share marker."""

    name: str
    document: NotebookDocument
    sharing_in_progress: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @contextmanager
    def manual_share(self) -> Iterator["NotebookHandle"]:
        """Mark the handle as being manually shared until the block exits."""
        with self._lock:
            self.sharing_in_progress = True
        try:
            yield self
        finally:
            with self._lock:
                self.sharing_in_progress = False

    def is_manually_sharing(self) -> bool:
        with self._lock:
            return self.sharing_in_progress


@dataclass
class ShareOutcome:
    """What a share, sync, open or copy did, for the caller to render."""

    action: str
    notebook: str = ""
    shared_id: Optional[str] = None
    readable_id: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    url: Optional[str] = None
    is_new_share: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.action not in (FAILED, FALLBACK)

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


class ShareWorkflow:
    """Coordinates the sharing client, the notebook store and open handles."""

    def __init__(
        self,
        client: SharingClientProtocol,
        store: NotebookStore,
        app_url: Optional[str] = None,
    ):
        self.client = client
        self.store = store
        self.app_url = app_url or None
        self._handles: Dict[str, NotebookHandle] = {}
        self._handles_lock = threading.Lock()

    # --- Handles ---

    def open(self, name: str) -> NotebookHandle:
        """Return the handle for a stored notebook with its saved content.

        Handles are cached per name; the document is reloaded from the store
        on every call.
        """
        document = self.store.load(name)
        with self._handles_lock:
            handle = self._handles.get(name)
            if handle is None:
                handle = NotebookHandle(name=name, document=document)
                self._handles[name] = handle
            else:
                handle.document = document
            return handle

    def _track(self, name: str, document: NotebookDocument) -> NotebookHandle:
        handle = NotebookHandle(name=name, document=document)
        with self._handles_lock:
            self._handles[name] = handle
        return handle

    # --- Links ---

    def shareable_link(self, shared_id: Optional[str], readable_id: Optional[str] = None) -> str:
        """User-facing link for a shared notebook, preferring its readable id."""
        notebook_id = preferred_id(shared_id, readable_id)
        if self.app_url:
            return f"{self.app_url}?notebook={notebook_id}"
        return self.client.make_retrieve_url(notebook_id or "")

    # --- Share / resync ---

    def share(
        self,
        handle: NotebookHandle,
        name: Optional[str] = None,
        password: Optional[str] = None,
    ) -> ShareOutcome:
        """Manual share: first share of an unshared notebook, else a re-share.

        Errors are returned in the outcome rather than raised.
        """
        with handle.manual_share():
            document = handle.document
            if document.is_view_only:
                return ShareOutcome(
                    action=FAILED,
                    notebook=handle.name,
                    error="This is a view-only notebook. Create a copy before sharing it.",
                )

            shared_id = document.shared_id
            is_new_share = shared_id is None
            if is_new_share and not password:
                password = generate_password()

            try:
                if is_new_share:
                    response = self._with_reauth(lambda: self.client.share(document, password))
                else:
                    response = self._with_reauth(
                        lambda: self.client.update(shared_id, document, password)
                    )
            except SharingError as e:
                logger.error(
                    "Failed to share notebook %s (%s %s): %s",
                    handle.name, e.operation, e.target or "", e,
                )
                return ShareOutcome(action=FAILED, notebook=handle.name, error=str(e))

            shared_name = (
                name
                or document.metadata.get(SHARED_NAME)
                or generate_default_name()
            )
            updated = self._with_share_metadata(document, response, shared_name, password)
            try:
                self.store.save(handle.name, updated)
            except OSError as e:
                logger.error("Shared notebook %s but could not save it: %s", handle.name, e)
                return ShareOutcome(action=FAILED, notebook=handle.name, error=str(e))
            handle.document = updated

            ref = response.notebook
            logger.info(
                "%s notebook %s as %s",
                "Shared" if is_new_share else "Updated", handle.name, ref.display_id,
            )
            return ShareOutcome(
                action=SHARED if is_new_share else UPDATED,
                notebook=handle.name,
                shared_id=ref.id,
                readable_id=ref.readable_id,
                name=shared_name,
                password=(ref.password or password) if is_new_share else None,
                url=self.shareable_link(ref.id, ref.readable_id),
                is_new_share=is_new_share,
            )

    def autosave(self, handle: NotebookHandle) -> ShareOutcome:
        """Resync a shared notebook after it was saved.

        Skipped for unshared and view-only notebooks, and while a manual
        share of the same handle is running. Failures are logged, not raised.
        """
        if handle.is_manually_sharing():
            logger.debug("Skipping resync of %s: manual share in progress", handle.name)
            return ShareOutcome(action=SKIPPED, notebook=handle.name)

        document = handle.document
        shared_id = document.shared_id
        if shared_id is None or document.is_view_only:
            return ShareOutcome(action=SKIPPED, notebook=handle.name)

        try:
            response = self._with_reauth(lambda: self.client.update(shared_id, document))
        except SharingError as e:
            logger.warning("Failed to resync shared notebook %s (%s): %s", handle.name, shared_id, e)
            return ShareOutcome(
                action=FAILED, notebook=handle.name, shared_id=shared_id, error=str(e)
            )

        metadata = dict(document.metadata)
        metadata[LAST_SHARED] = _now_iso()
        if response.notebook.readable_id:
            metadata[READABLE_ID] = response.notebook.readable_id
        updated = _replace_metadata(document, metadata)
        try:
            self.store.save(handle.name, updated)
        except OSError as e:
            logger.warning("Resynced %s but could not save it: %s", handle.name, e)
            return ShareOutcome(
                action=FAILED, notebook=handle.name, shared_id=shared_id, error=str(e)
            )
        handle.document = updated

        ref = response.notebook
        return ShareOutcome(
            action=UPDATED,
            notebook=handle.name,
            shared_id=ref.id,
            readable_id=ref.readable_id,
            url=self.shareable_link(ref.id, ref.readable_id),
        )

    # --- View-only / copy ---

    def open_shared(self, notebook_id: str) -> Tuple[NotebookHandle, ShareOutcome]:
        """Retrieve a shared notebook and store it as a view-only copy.

        If retrieval fails for any reason, a new blank notebook is created
        instead so the user is never left with nothing open.
        """
        try:
            response = self._with_reauth(lambda: self.client.retrieve(notebook_id))
        except SharingError as e:
            logger.error("Failed to load shared notebook %r: %s", notebook_id, e)
            fallback_name = self.store.unique_name("Untitled")
            document = NotebookDocument.new()
            self.store.save(fallback_name, document)
            handle = self._track(fallback_name, document)
            return handle, ShareOutcome(
                action=FALLBACK,
                notebook=fallback_name,
                error=f'Failed to load shared notebook "{notebook_id}": {e}',
            )

        document = make_view_only(response.content)
        document.metadata.update(
            {
                IS_SHARED_NOTEBOOK: True,
                SHARED_ID: response.id,
                READABLE_ID: response.readable_id,
                DOMAIN_ID: response.domain_id,
            }
        )
        filename = f"Shared_{response.readable_id or response.id}.ipynb"
        self.store.save(filename, document)
        handle = self._track(filename, document)
        return handle, ShareOutcome(
            action=OPENED,
            notebook=filename,
            shared_id=response.id,
            readable_id=response.readable_id or None,
            url=self.shareable_link(response.id, response.readable_id),
        )

    def create_copy(self, handle: NotebookHandle, name: Optional[str] = None) -> NotebookHandle:
        """Save an editable, never-shared copy of ``handle``'s notebook."""
        document = make_editable(strip_sharing_metadata(handle.document))
        if name is None:
            stem = handle.name[: -len(".ipynb")] if handle.name.endswith(".ipynb") else handle.name
            if stem.startswith("Shared_"):
                stem = stem[len("Shared_"):]
            name = self.store.unique_name(f"{stem}-Copy")
        self.store.save(name, document)
        return self._track(name, document)

    # --- Internals ---

    def _with_reauth(self, call: Callable[[], T]) -> T:
        """Run ``call``; on a rejected token, re-authenticate once and retry."""
        try:
            return call()
        except ProtocolError as e:
            if not e.unauthorized:
                raise
            logger.info("Token rejected during %s; re-authenticating", e.operation)
            self.client.authenticate()
            return call()

    def _with_share_metadata(
        self,
        document: NotebookDocument,
        response: ShareResponse,
        shared_name: str,
        password: Optional[str],
    ) -> NotebookDocument:
        metadata = dict(document.metadata)
        metadata[SHARED_ID] = response.notebook.id
        metadata[READABLE_ID] = response.notebook.readable_id
        metadata[SHARED_NAME] = shared_name
        metadata[LAST_SHARED] = _now_iso()
        if password or response.notebook.password:
            metadata[IS_PASSWORD_PROTECTED] = True
        return _replace_metadata(document, metadata)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _replace_metadata(document: NotebookDocument, metadata: Dict[str, Any]) -> NotebookDocument:
    data = document.to_dict()
    data["metadata"] = metadata
    return NotebookDocument.from_dict(data)
