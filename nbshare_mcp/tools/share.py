"""nbshare_share tool: share or re-share a notebook."""

from typing import Optional

from nbshare_mcp.server import mcp
from nbshare_mcp.tools import _helpers


@mcp.tool(annotations=_helpers.SHARE_ANNOTATIONS)
def nbshare_share(
    notebook: str,
    name: Optional[str] = None,
    password: Optional[str] = None,
    compact_output: bool = False,
) -> str:
    """
    <usecase>Share a workspace notebook and get a link others can open.</usecase>
    <instructions>
    The first share of a notebook creates a new shared copy on the sharing
    service and returns an edit code. Keep the edit code: it is shown only once.

    Sharing a notebook that was already shared updates the same shared copy
    (same link) instead of creating a new one.

    View-only notebooks (opened with nbshare_open) cannot be shared; use
    nbshare_copy first.
    </instructions>
    <parameters>
    - notebook: Workspace notebook name, e.g. "analysis.ipynb"
    - name: Display name for the shared notebook (default: Notebook_<date>_<time>)
    - password: Edit code to use instead of a generated one
    </parameters>
    <examples>
    - nbshare_share("analysis.ipynb")
    - nbshare_share("analysis", name="Week 3 lab")
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    filename = _helpers.notebook_name(notebook)
    workflow = _helpers.get_workflow()

    try:
        handle = workflow.open(filename)
    except FileNotFoundError as e:
        return _helpers.make_error(
            error_type="not_found",
            message=str(e),
            suggestion="Check the notebook name. Use nbshare_status() to list workspace notebooks.",
            did_you_mean=_helpers.suggest_notebooks(workflow, filename),
            compact=compact,
        )
    except Exception as e:
        return _helpers.error_response(e, compact=compact)

    outcome = workflow.share(handle, name=name, password=password)
    if not outcome.ok:
        return _helpers.make_error(
            error_type="share_failed",
            message=f"Failed to share notebook: {outcome.error}",
            suggestion="Check nbshare_status() and try again. The notebook was not changed.",
            compact=compact,
        )

    result = outcome.to_dict()
    if outcome.is_new_share:
        hint = (
            f"Your notebook is now shared! Use this link to access it: {outcome.url}. "
            "Save the edit code now; it will not be shown again."
        )
    else:
        hint = f"Your notebook has been updated! Use this link to access it: {outcome.url}"
    return _helpers.make_response(result, hint, compact=compact)
