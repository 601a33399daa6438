"""Notebook workspace. Loads and saves ``.ipynb`` files under one directory."""

import logging
from pathlib import Path
from typing import List

from nbshare_mcp.document import NotebookDocument
from nbshare_mcp.errors import ValidationError

logger = logging.getLogger(__name__)

NOTEBOOK_SUFFIX = ".ipynb"


class NotebookStore:
    """A directory of notebooks addressed by file name."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).expanduser()

    def _path(self, name: str) -> Path:
        if not name or not name.strip():
            raise ValidationError("Notebook name is required", operation="store")
        if not name.endswith(NOTEBOOK_SUFFIX):
            name = name + NOTEBOOK_SUFFIX
        root = self.root.resolve()
        path = (root / name).resolve()
        if root not in path.parents:
            raise ValidationError(
                f"Notebook path escapes the workspace: {name}", operation="store", target=name
            )
        return path

    def exists(self, name: str) -> bool:
        return self._path(name).exists()

    def load(self, name: str) -> NotebookDocument:
        """Load and validate a notebook.

        Raises:
            FileNotFoundError: If the notebook does not exist
            ValidationError: If the file is not a valid notebook
        """
        path = self._path(name)
        if not path.exists():
            raise FileNotFoundError(f"Notebook not found: {name}")
        return NotebookDocument.from_json(path.read_text(encoding="utf-8"))

    def save(self, name: str, document: NotebookDocument) -> Path:
        """Atomic write: write to .tmp, then rename."""
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(document.to_json() + "\n", encoding="utf-8")
        tmp_path.replace(path)
        logger.info("Saved notebook %s (%d cells)", path.name, len(document.cells))
        return path

    def list(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(p.name for p in self.root.glob(f"*{NOTEBOOK_SUFFIX}") if p.is_file())

    def unique_name(self, stem: str = "Untitled") -> str:
        """First free name of the form ``Untitled.ipynb``, ``Untitled1.ipynb``, ..."""
        candidate = f"{stem}{NOTEBOOK_SUFFIX}"
        counter = 1
        while self.exists(candidate):
            candidate = f"{stem}{counter}{NOTEBOOK_SUFFIX}"
            counter += 1
        return candidate
