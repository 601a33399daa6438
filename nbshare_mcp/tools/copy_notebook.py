"""nbshare_copy tool: make an editable, unshared copy of a notebook."""

from typing import Optional

from nbshare_mcp.server import mcp
from nbshare_mcp.tools import _helpers
from nbshare_mcp.workflow import COPIED


@mcp.tool(annotations=_helpers.COPY_ANNOTATIONS)
def nbshare_copy(
    notebook: str, new_name: Optional[str] = None, compact_output: bool = False
) -> str:
    """
    <usecase>Create an editable copy of a notebook that is not shared.</usecase>
    <instructions>
    Removes every sharing field (shared id, readable id, name, share time,
    view-only flags) so the copy is treated as a brand-new notebook. Cells
    and other metadata are kept.
    </instructions>
    <examples>
    - nbshare_copy("Shared_purple-otter-42.ipynb")
    - nbshare_copy("analysis.ipynb", new_name="analysis-v2.ipynb")
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    workflow = _helpers.get_workflow()

    try:
        handle = workflow.open(_helpers.notebook_name(notebook))
        target = _helpers.notebook_name(new_name) if new_name else None
        if target and workflow.store.exists(target):
            return _helpers.make_error(
                error_type="already_exists",
                message=f"Notebook already exists: {target}",
                suggestion="Pick another new_name or omit it to get a free name.",
                compact=compact,
            )
        copy_handle = workflow.create_copy(handle, name=target)
    except Exception as e:
        return _helpers.error_response(e, compact=compact)

    result = {
        "action": COPIED,
        "source": handle.name,
        "notebook": copy_handle.name,
        "cells": len(copy_handle.document.cells),
    }
    hint = f"Created {copy_handle.name}. Use nbshare_share() to share it as a new notebook."
    return _helpers.make_response(result, hint, compact=compact)
