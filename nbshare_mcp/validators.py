"""
Structural validation of decoded JSON.

Every validator is total: it accepts any value, never raises, and returns a
``Validation`` that is truthy when the value has the expected shape. A falsy
result carries a short ``reason`` for logs and error messages.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from nbshare_mcp.ids import is_valid_uuid

CELL_TYPES = ("code", "markdown", "raw")


@dataclass(frozen=True)
class Validation:
    """Outcome of a validation check."""

    ok: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok


VALID = Validation(True)


def _invalid(reason: str) -> Validation:
    return Validation(False, reason)


def has_required_keys(value: Any, keys: Iterable[str]) -> bool:
    """True iff ``value`` is a mapping containing every key (values may be None)."""
    if not isinstance(value, Mapping):
        return False
    return all(key in value for key in keys)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but is not a version number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_source(value: Any) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, list) and all(isinstance(line, str) for line in value)


def validate_cell(cell: Any) -> Validation:
    """Check one nbformat cell: a code, markdown or raw cell."""
    if not has_required_keys(cell, ("cell_type", "source", "metadata")):
        return _invalid("cell is missing cell_type, source or metadata")
    cell_type = cell["cell_type"]
    if cell_type not in CELL_TYPES:
        return _invalid(f"unknown cell_type {cell_type!r}")
    if not _is_source(cell["source"]):
        return _invalid("cell source must be a string or list of strings")
    if not isinstance(cell["metadata"], Mapping):
        return _invalid("cell metadata must be an object")
    if cell_type == "code" and not isinstance(cell.get("outputs"), list):
        return _invalid("code cell is missing its outputs list")
    return VALID


def validate_notebook_content(data: Any) -> Validation:
    """Check that ``data`` is a well-formed nbformat notebook document."""
    if not has_required_keys(data, ("metadata", "nbformat", "nbformat_minor", "cells")):
        return _invalid("notebook is missing metadata, nbformat, nbformat_minor or cells")
    if not _is_number(data["nbformat"]) or not _is_number(data["nbformat_minor"]):
        return _invalid("nbformat and nbformat_minor must be numbers")
    if not isinstance(data["cells"], list):
        return _invalid("cells must be a list")
    if not isinstance(data["metadata"], Mapping):
        return _invalid("metadata must be an object")
    for index, cell in enumerate(data["cells"]):
        result = validate_cell(cell)
        if not result:
            return _invalid(f"cell {index}: {result.reason}")
    return VALID


def validate_token(data: Any) -> Validation:
    """Check a token body: ``{"token": str}``."""
    if not has_required_keys(data, ("token",)):
        return _invalid("token body is missing 'token'")
    if not isinstance(data["token"], str) or not data["token"]:
        return _invalid("token must be a non-empty string")
    return VALID


def validate_share_response(data: Any) -> Validation:
    """Check a create/update response.

    ``notebook.readable_id`` must be present but may be null; ``notebook.id``
    must match the loose UUID rule used for routing.
    """
    if not has_required_keys(data, ("message", "notebook")):
        return _invalid("share response is missing 'message' or 'notebook'")
    if not isinstance(data["message"], str):
        return _invalid("share response message must be a string")
    notebook = data["notebook"]
    if not has_required_keys(notebook, ("id", "readable_id")):
        return _invalid("share response notebook is missing 'id' or 'readable_id'")
    if not is_valid_uuid(notebook["id"], strict=False):
        return _invalid(f"share response id {notebook['id']!r} is not a UUID")
    readable_id = notebook["readable_id"]
    if readable_id is not None and not isinstance(readable_id, str):
        return _invalid("share response readable_id must be a string or null")
    password = notebook.get("password")
    if password is not None and not isinstance(password, str):
        return _invalid("share response password must be a string")
    return VALID


def validate_notebook_response(data: Any) -> Validation:
    """Check a retrieval response and the notebook content it carries."""
    if not has_required_keys(data, ("id", "domain_id", "readable_id", "content")):
        return _invalid("notebook response is missing id, domain_id, readable_id or content")
    if not is_valid_uuid(data["id"], strict=False):
        return _invalid(f"notebook response id {data['id']!r} is not a UUID")
    if not isinstance(data["domain_id"], str):
        return _invalid("notebook response domain_id must be a string")
    if not isinstance(data["readable_id"], str):
        return _invalid("notebook response readable_id must be a string")
    content = validate_notebook_content(data["content"])
    if not content:
        return _invalid(f"notebook response content: {content.reason}")
    return VALID
