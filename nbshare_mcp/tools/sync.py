"""nbshare_sync tool: resync a shared notebook after it was saved."""

from nbshare_mcp.server import mcp
from nbshare_mcp.tools import _helpers


@mcp.tool(annotations=_helpers.SYNC_ANNOTATIONS)
def nbshare_sync(notebook: str, compact_output: bool = False) -> str:
    """
    <usecase>Push the saved notebook to its existing shared copy.</usecase>
    <instructions>
    Call after saving a notebook. If the notebook was shared before, its
    shared copy is updated in place. Notebooks that were never shared,
    view-only notebooks, and notebooks in the middle of a manual share are
    skipped.

    A failed resync is reported but does not change the local notebook.
    </instructions>
    <examples>
    - nbshare_sync("analysis.ipynb")
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    workflow = _helpers.get_workflow()

    try:
        handle = workflow.open(_helpers.notebook_name(notebook))
    except Exception as e:
        return _helpers.error_response(e, compact=compact)

    outcome = workflow.autosave(handle)
    result = outcome.to_dict()
    if outcome.action == "skipped":
        hint = "Nothing to sync: the notebook is not shared, is view-only, or is being shared."
    elif outcome.ok:
        hint = f"Shared copy updated: {outcome.url}"
    else:
        hint = "Resync failed; the local notebook is unchanged. Try nbshare_share() to retry."
    return _helpers.make_response(result, hint, compact=compact)
