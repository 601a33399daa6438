"""
In-memory notebook document model.

A ``NotebookDocument`` is the nbformat JSON shape (cells, metadata and
format version) plus the helpers the sharing workflow needs to read and
write the sharing keys it keeps inside the notebook's own metadata.
"""

import copy
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from nbshare_mcp.errors import ValidationError
from nbshare_mcp.validators import validate_notebook_content

# Sharing keys stored in notebook metadata
SHARED_ID = "sharedId"
READABLE_ID = "readableId"
SHARED_NAME = "sharedName"
LAST_SHARED = "lastShared"
IS_PASSWORD_PROTECTED = "isPasswordProtected"
DOMAIN_ID = "domainId"
IS_SHARED_NOTEBOOK = "isSharedNotebook"

SHARING_METADATA_KEYS = (
    SHARED_ID,
    READABLE_ID,
    SHARED_NAME,
    LAST_SHARED,
    IS_PASSWORD_PROTECTED,
    DOMAIN_ID,
    IS_SHARED_NOTEBOOK,
)

UNSHARED = "unshared"
SHARED = "shared"


@dataclass
class NotebookDocument:
    """A notebook in nbformat 4 layout."""

    cells: List[Dict[str, Any]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    nbformat: int = 4
    nbformat_minor: int = 5

    @classmethod
    def new(cls) -> "NotebookDocument":
        """Create a blank notebook with a single empty code cell."""
        return cls(
            cells=[
                {
                    "cell_type": "code",
                    "execution_count": None,
                    "metadata": {},
                    "outputs": [],
                    "source": "",
                }
            ],
            metadata={},
        )

    @classmethod
    def from_dict(cls, data: Any) -> "NotebookDocument":
        """Build a document from decoded nbformat JSON.

        Raises:
            ValidationError: If ``data`` is not a valid notebook
        """
        result = validate_notebook_content(data)
        if not result:
            raise ValidationError(f"Invalid notebook content: {result.reason}", operation="load")
        data = copy.deepcopy(data)
        return cls(
            cells=list(data["cells"]),
            metadata=dict(data["metadata"]),
            nbformat=data["nbformat"],
            nbformat_minor=data["nbformat_minor"],
        )

    @classmethod
    def from_json(cls, text: str) -> "NotebookDocument":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Notebook is not valid JSON: {e}", operation="load") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cells": copy.deepcopy(self.cells),
            "metadata": copy.deepcopy(self.metadata),
            "nbformat": self.nbformat,
            "nbformat_minor": self.nbformat_minor,
        }

    def to_json(self, indent: Optional[int] = 1) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def is_valid(self) -> bool:
        return bool(validate_notebook_content(self.to_dict()))

    # --- Sharing metadata ---

    @property
    def shared_id(self) -> Optional[str]:
        return self.metadata.get(SHARED_ID) or None

    @property
    def readable_id(self) -> Optional[str]:
        return self.metadata.get(READABLE_ID) or None

    @property
    def is_view_only(self) -> bool:
        """True for a retrieved copy of someone else's shared notebook."""
        return bool(self.metadata.get(IS_SHARED_NOTEBOOK))

    @property
    def sharing_state(self) -> str:
        return SHARED if self.shared_id else UNSHARED


def generate_default_name(now: Optional[datetime] = None) -> str:
    """Default share name, e.g. ``Notebook_2025-03-01_14-05-09``."""
    now = now or datetime.now()
    return now.strftime("Notebook_%Y-%m-%d_%H-%M-%S")


def make_view_only(document: NotebookDocument) -> NotebookDocument:
    """Return a copy of ``document`` with every cell marked non-editable."""
    view = NotebookDocument.from_dict(document.to_dict())
    for cell in view.cells:
        cell["metadata"] = {**cell.get("metadata", {}), "editable": False}
    return view


def make_editable(document: NotebookDocument) -> NotebookDocument:
    """Undo ``make_view_only``: drop ``editable: False`` from every cell."""
    data = document.to_dict()
    for cell in data["cells"]:
        cell_meta = cell.get("metadata", {})
        if cell_meta.get("editable") is False:
            del cell_meta["editable"]
    return NotebookDocument.from_dict(data)


def strip_sharing_metadata(document: NotebookDocument) -> NotebookDocument:
    """Return a copy of ``document`` with every sharing key removed.

    Cells and all other metadata are copied unchanged, so the result is
    treated as a notebook that was never shared.
    """
    data = document.to_dict()
    for key in SHARING_METADATA_KEYS:
        data["metadata"].pop(key, None)
    return NotebookDocument.from_dict(data)
