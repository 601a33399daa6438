"""nbshare_status tool: check connection and authentication."""

from nbshare_mcp.server import mcp
from nbshare_mcp.tools import _helpers


@mcp.tool(annotations=_helpers.STATUS_ANNOTATIONS)
def nbshare_status(compact_output: bool = False) -> str:
    """
    <usecase>Check the connection to the sharing service and list workspace notebooks.</usecase>
    <instructions>
    Authenticates against the sharing service (issuing a new token) and
    reports configuration and the notebooks in the workspace with their
    sharing state. Use this to verify your setup or after an
    authorization error.
    </instructions>
    <examples>
    - nbshare_status()
    - nbshare_status(compact_output=True)  # Omit hints
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    workflow = _helpers.get_workflow()
    client = workflow.client

    notebooks = []
    for name in workflow.store.list():
        try:
            document = workflow.store.load(name)
        except Exception:
            notebooks.append({"notebook": name, "state": "invalid"})
            continue
        entry = {"notebook": name, "state": document.sharing_state}
        if document.is_view_only:
            entry["view_only"] = True
        if document.shared_id:
            entry["shared_id"] = document.shared_id
        if document.readable_id:
            entry["readable_id"] = document.readable_id
        notebooks.append(entry)

    config = {
        "api_url": client.api_url,
        "app_url": workflow.app_url,
        "workspace": str(workflow.store.root),
        "compact_mode": _helpers.is_compact(),
    }

    try:
        client.authenticate()
    except Exception as e:
        result = {
            "authenticated": False,
            "error": str(e),
            "config": config,
            "notebooks": notebooks,
        }
        hint = (
            "Could not authenticate with the sharing service. "
            "Check that NBSHARE_API_URL points at a running service."
        )
        return _helpers.make_response(result, hint, compact=compact)

    result = {
        "authenticated": True,
        "status": "connected",
        "config": config,
        "notebooks": notebooks,
    }
    shared = sum(1 for n in notebooks if n["state"] == "shared")
    hint = (
        f"Connected to {client.api_url}. {len(notebooks)} notebooks in the workspace, "
        f"{shared} shared. Use nbshare_share() to share one."
    )
    return _helpers.make_response(result, hint, compact=compact)
