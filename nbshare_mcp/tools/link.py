"""nbshare_link tool: build a shared notebook URL without a request."""

from nbshare_mcp.server import mcp
from nbshare_mcp.tools import _helpers


@mcp.tool(annotations=_helpers.LINK_ANNOTATIONS)
def nbshare_link(notebook_id: str, compact_output: bool = False) -> str:
    """
    <usecase>Get the URL for a shared notebook from its id.</usecase>
    <instructions>
    Accepts a UUID or a readable id. Returns the API retrieval URL and,
    when a viewer URL is configured, the link to send to other people.
    Does not contact the sharing service.
    </instructions>
    <examples>
    - nbshare_link("purple-otter-42")
    </examples>
    """
    compact = _helpers.is_compact(compact_output)
    workflow = _helpers.get_workflow()

    try:
        retrieve_url = workflow.client.make_retrieve_url(notebook_id)
        share_url = workflow.shareable_link(notebook_id.strip())
    except Exception as e:
        return _helpers.error_response(e, compact=compact)

    result = {
        "notebook_id": notebook_id.strip(),
        "retrieve_url": retrieve_url,
        "url": share_url,
    }
    return _helpers.make_response(result, f"Share this link: {share_url}", compact=compact)
