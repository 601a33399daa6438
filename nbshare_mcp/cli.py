#!/usr/bin/env python3
"""
CLI entry point for the Notebook Sharing MCP Server.

Usage:
    # As MCP server
    nbshare-mcp

    # Issue a token and save it to ~/.nbshare/token
    nbshare-mcp --token

    # Share a workspace notebook, then resync it after edits
    nbshare-mcp --share analysis.ipynb --name "Week 3 lab"
    nbshare-mcp --sync analysis.ipynb

    # Open a shared notebook view-only, then make an editable copy
    nbshare-mcp --open purple-otter-42
    nbshare-mcp --copy Shared_purple-otter-42.ipynb
"""

import argparse
import logging
import sys
from importlib.metadata import version as pkg_version

from nbshare_mcp._style import box, error, header, link, success, warning

try:
    _VERSION = pkg_version("nbshare-mcp")
except Exception:
    _VERSION = "dev"


def _notebook_arg(value: str) -> str:
    return value if value.endswith(".ipynb") else value + ".ipynb"


def _handle_token(quiet: bool) -> int:
    from nbshare_mcp.api import NBSHARE_TOKEN_FILE, issue_and_save_token

    try:
        token = issue_and_save_token()
    except Exception as e:
        print(error(f"Authentication failed: {e}"), file=sys.stderr)
        return 1

    if quiet:
        print(token)
        return 0
    print(success(f"Token saved to {NBSHARE_TOKEN_FILE}"))
    return 0


def _handle_share(notebook: str, name, password) -> int:
    from nbshare_mcp.api import get_workflow

    workflow = get_workflow()
    try:
        handle = workflow.open(_notebook_arg(notebook))
    except Exception as e:
        print(error(f"Cannot open {notebook}: {e}"), file=sys.stderr)
        return 1

    outcome = workflow.share(handle, name=name, password=password)
    if not outcome.ok:
        print(error(f"Failed to share notebook: {outcome.error}"), file=sys.stderr)
        return 1

    if outcome.is_new_share:
        print(success("Your notebook is now shared!"))
    else:
        print(success("Your notebook has been updated!"))
    print(f"  Link: {link(outcome.url)}")
    if outcome.password:
        print()
        print(
            box(
                "Edit code",
                [
                    outcome.password,
                    "",
                    "Save this code: it is required to edit the",
                    "shared notebook and will not appear again.",
                ],
            )
        )
    return 0


def _handle_sync(notebook: str) -> int:
    from nbshare_mcp.api import get_workflow

    workflow = get_workflow()
    try:
        handle = workflow.open(_notebook_arg(notebook))
    except Exception as e:
        print(error(f"Cannot open {notebook}: {e}"), file=sys.stderr)
        return 1

    outcome = workflow.autosave(handle)
    if outcome.action == "skipped":
        if handle.document.is_view_only:
            reason = "is view-only; use --copy to get an editable notebook"
        elif handle.document.shared_id is None:
            reason = "is not shared; nothing to sync"
        else:
            reason = "is being shared; sync skipped"
        print(warning(f"{handle.name} {reason}."))
    elif outcome.ok:
        print(success(f"Synced {handle.name}: {link(outcome.url)}"))
    else:
        # Resync failures are warnings; the local notebook is untouched
        print(warning(f"Could not sync {handle.name}: {outcome.error}"), file=sys.stderr)
    return 0


def _handle_open(notebook_id: str) -> int:
    from nbshare_mcp.api import get_workflow

    handle, outcome = get_workflow().open_shared(notebook_id)
    if not outcome.ok:
        print(error(outcome.error), file=sys.stderr)
        print(warning(f"Created a blank notebook instead: {handle.name}"))
        return 1
    print(success(f"Saved view-only notebook as {handle.name}"))
    return 0


def _handle_copy(notebook: str) -> int:
    from nbshare_mcp.api import get_workflow

    workflow = get_workflow()
    try:
        copy_handle = workflow.create_copy(workflow.open(_notebook_arg(notebook)))
    except Exception as e:
        print(error(f"Cannot copy {notebook}: {e}"), file=sys.stderr)
        return 1
    print(success(f"Created editable copy {copy_handle.name}"))
    return 0


def _handle_url(notebook_id: str) -> int:
    from nbshare_mcp.api import get_workflow

    try:
        url = get_workflow().shareable_link(notebook_id.strip())
    except Exception as e:
        print(error(str(e)), file=sys.stderr)
        return 1
    print(url)
    return 0


def main():
    """Main entry point - handle CLI args or run MCP server."""
    parser = argparse.ArgumentParser(
        description="Notebook Sharing MCP Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run as MCP server
  nbshare-mcp

  # Share a notebook from the workspace (~/.nbshare/notebooks)
  nbshare-mcp --share analysis.ipynb --name "Week 3 lab"

  # Point at another sharing service
  NBSHARE_API_URL="https://share.example.org/api/v1" nbshare-mcp --open purple-otter-42
""",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--token",
        action="store_true",
        help="Issue a bearer token and save it to ~/.nbshare/token",
    )
    action.add_argument("--share", metavar="NOTEBOOK", help="Share or re-share a notebook")
    action.add_argument("--sync", metavar="NOTEBOOK", help="Resync an already shared notebook")
    action.add_argument("--open", metavar="ID", help="Open a shared notebook view-only")
    action.add_argument("--copy", metavar="NOTEBOOK", help="Create an editable, unshared copy")
    action.add_argument("--url", metavar="ID", help="Print the link for a shared notebook")
    parser.add_argument("--name", help="With --share: display name for the shared notebook")
    parser.add_argument("--password", help="With --share: edit code to use")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="With --token: output only the raw token (for scripting)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.token:
        sys.exit(_handle_token(args.quiet))
    elif args.share:
        if not args.quiet:
            print(header(_VERSION))
        sys.exit(_handle_share(args.share, args.name, args.password))
    elif args.sync:
        sys.exit(_handle_sync(args.sync))
    elif args.open:
        sys.exit(_handle_open(args.open))
    elif args.copy:
        sys.exit(_handle_copy(args.copy))
    elif args.url:
        sys.exit(_handle_url(args.url))
    else:
        # MCP server mode - only now import the full server
        from nbshare_mcp.server import run

        run()


if __name__ == "__main__":
    main()
