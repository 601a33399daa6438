#!/usr/bin/env python3
"""
Notebook Sharing MCP Server

An MCP server that shares Jupyter notebooks through a notebook sharing service.

Usage:
    # As MCP server (default)
    python server.py

    # Share a notebook from the workspace
    python server.py --share analysis.ipynb

This is a backwards-compatible entry point. The actual CLI is in nbshare_mcp/cli.py.
"""

from nbshare_mcp.cli import main

if __name__ == "__main__":
    main()
