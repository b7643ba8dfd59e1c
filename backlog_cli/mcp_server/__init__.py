"""MCP server exposing BacklogClient methods as tools.

Package structure:
  __init__.py       — FastMCP init, register() calls, re-exports
  __main__.py       — ``python -m backlog_cli.mcp_server`` entry point
  _core.py          — Client caching, _call dispatcher, response contract
  _tools_read.py    — space, user, project, issue and notification reads
  _tools_write.py   — issue create/update and comments

Run: python -m backlog_cli.mcp_server
Requires: pip install .[mcp]
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from backlog_cli.mcp_server import _tools_read, _tools_write

mcp = FastMCP(
    "backlog",
    instructions=(
        "Backlog issue tracker tools. "
        "Projects and issues accept either a numeric id or a key "
        "(e.g. 'PROJ' or 'PROJ-123'). "
        "Use list_issue_types and list_priorities to find the ids "
        "create_issue needs."
    ),
)

for _mod in [_tools_read, _tools_write]:
    _mod.register(mcp)

# ---------------------------------------------------------------------------
# Re-exports (tests import via mcp_mod.xxx)
# ---------------------------------------------------------------------------

from backlog_cli.mcp_server._core import (  # noqa: E402, F401
    _call,
    _contract_error,
    _finalize_tool_result,
    _get_client,
)
from backlog_cli.mcp_server._tools_read import (  # noqa: E402, F401
    count_notifications,
    get_issue,
    get_myself,
    get_project,
    get_space,
    list_categories,
    list_comments,
    list_issue_types,
    list_notifications,
    list_priorities,
    list_projects,
    list_users,
    search_issues,
)
from backlog_cli.mcp_server._tools_write import (  # noqa: E402, F401
    add_comment,
    create_issue,
    update_issue,
)


def main():
    """Run the MCP server (stdio transport)."""
    mcp.run()
