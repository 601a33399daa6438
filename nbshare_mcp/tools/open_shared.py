"""nbshare_open tool: open a shared notebook view-only."""

from nbshare_mcp.server import mcp
from nbshare_mcp.tools import _helpers


@mcp.tool(annotations=_helpers.OPEN_ANNOTATIONS)
def nbshare_open(notebook_id: str, compact_output: bool = False) -> str:
    """
    <usecase>Open a notebook someone shared, as a view-only copy.</usecase>
    <instructions>
    Accepts the notebook's UUID or its readable id (the part after
    ?notebook= in a shared link). The notebook is saved in the workspace as
    Shared_<id>.ipynb with every cell marked non-editable.

    If the notebook cannot be retrieved, a new blank notebook is created
    instead and the error is reported.
    </instructions>
    <examples>
    - nbshare_open("e3b0c442-98fc-4fc2-9c9f-8b6d6ed08a1d")
    - nbshare_open("purple-otter-42")
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    notebook_id = notebook_id.strip()
    if notebook_id.endswith(".ipynb"):
        notebook_id = notebook_id[: -len(".ipynb")]

    workflow = _helpers.get_workflow()
    try:
        handle, outcome = workflow.open_shared(notebook_id)
    except Exception as e:
        return _helpers.error_response(e, compact=compact)

    result = outcome.to_dict()
    result["cells"] = len(handle.document.cells)
    if outcome.ok:
        hint = (
            f"Opened view-only as {outcome.notebook}. "
            "Use nbshare_copy() to get an editable copy."
        )
    else:
        hint = f"Could not open the shared notebook; created {outcome.notebook} instead."
    return _helpers.make_response(result, hint, compact=compact)
