"""
Wire data models for the sharing backend.

Contains the Token, ShareResponse and NotebookResponse dataclasses and the
SharingClientProtocol interface the workflow depends on.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from nbshare_mcp.document import NotebookDocument
from nbshare_mcp.ids import preferred_id


@dataclass(frozen=True)
class Token:
    """Bearer token issued by the backend."""

    token: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Token":
        return cls(token=data["token"])

    def to_dict(self) -> Dict[str, str]:
        return {"token": self.token}

    def __repr__(self) -> str:
        # Keep credentials out of logs and tracebacks
        return "Token(token='***')"


@dataclass(frozen=True)
class SharedNotebookRef:
    """The ``notebook`` object of a share/update response."""

    id: str
    readable_id: Optional[str] = None
    password: Optional[str] = None

    @property
    def display_id(self) -> str:
        return preferred_id(self.id, self.readable_id) or self.id


@dataclass(frozen=True)
class ShareResponse:
    """Response to creating or updating a shared notebook."""

    message: str
    notebook: SharedNotebookRef

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShareResponse":
        nb = data["notebook"]
        return cls(
            message=data["message"],
            notebook=SharedNotebookRef(
                id=nb["id"],
                readable_id=nb.get("readable_id"),
                password=nb.get("password"),
            ),
        )


@dataclass(frozen=True)
class NotebookResponse:
    """Response to retrieving a shared notebook."""

    id: str
    domain_id: str
    readable_id: str
    content: NotebookDocument

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotebookResponse":
        return cls(
            id=data["id"],
            domain_id=data["domain_id"],
            readable_id=data["readable_id"],
            content=NotebookDocument.from_dict(data["content"]),
        )


@runtime_checkable
class SharingClientProtocol(Protocol):
    """Interface the share workflow needs from a sharing client."""

    def authenticate(self) -> Token: ...
    def share(self, document, password: Optional[str] = None) -> ShareResponse: ...
    def update(self, id: str, document, password: Optional[str] = None) -> ShareResponse: ...
    def retrieve(self, id: str) -> NotebookResponse: ...
    def make_retrieve_url(self, id: str) -> str: ...
