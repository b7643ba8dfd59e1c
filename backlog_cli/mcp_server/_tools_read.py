"""Read tools: space, users, projects, issues, comments, notifications."""

from __future__ import annotations

from typing import Literal

from backlog_cli import CliError
from backlog_cli.config import DEFAULT_NOTIFICATION_COUNT
from backlog_cli.mcp_server._core import _call, _contract_error, _finalize_tool_result
from backlog_cli.models import IssueSearch


def get_space() -> dict:
    """Get space info (spaceKey, name, owner, language, timezone)."""
    return _finalize_tool_result(_call("get_space"))


def get_myself() -> dict:
    """Get the user the API key belongs to."""
    return _finalize_tool_result(_call("get_myself"))


def list_users() -> dict:
    """List users in the space. Result list is under 'data'."""
    return _finalize_tool_result(_call("list_users"))


def list_priorities() -> dict:
    """List priority ids and names (needed by create_issue)."""
    return _finalize_tool_result(_call("list_priorities"))


def list_projects(archived: bool | None = None) -> dict:
    """List projects.

    Args:
        archived: True for archived only, False for active only, omit for all.
    """
    return _finalize_tool_result(_call("list_projects", archived=archived))


def get_project(project_id_or_key: str) -> dict:
    """Get one project by numeric id or project key."""
    return _finalize_tool_result(_call("get_project", project_id_or_key))


def list_issue_types(project_id_or_key: str) -> dict:
    """List issue types of a project (needed by create_issue)."""
    return _finalize_tool_result(_call("list_issue_types", project_id_or_key))


def list_categories(project_id_or_key: str) -> dict:
    return _finalize_tool_result(_call("list_categories", project_id_or_key))


def search_issues(
    project_ids: list[int] | None = None,
    issue_type_ids: list[int] | None = None,
    status_ids: list[int] | None = None,
    priority_ids: list[int] | None = None,
    assignee_ids: list[int] | None = None,
    keyword: str | None = None,
    count: int | None = None,
    offset: int | None = None,
    sort: str | None = None,
    order: Literal["asc", "desc"] | None = None,
) -> dict:
    """Search issues. Filters combine with AND; ids within one filter with OR.

    Args:
        count/offset: Server-side paging (Backlog caps count at 100).
        sort: Field name such as created, updated, priority, dueDate.

    Returns:
        Dict with the issue list under 'data'.
    """
    try:
        search = IssueSearch(
            project_ids=project_ids or [],
            issue_type_ids=issue_type_ids or [],
            status_ids=status_ids or [],
            priority_ids=priority_ids or [],
            assignee_ids=assignee_ids or [],
            keyword=keyword,
            count=count,
            offset=offset,
            sort=sort,
            order=order,
        )
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), "validation"))
    return _finalize_tool_result(_call("search_issues", search))


def get_issue(issue_id_or_key: str) -> dict:
    """Get full issue details by numeric id or issue key (e.g. PROJ-123)."""
    return _finalize_tool_result(_call("get_issue", issue_id_or_key))


def list_comments(issue_id_or_key: str) -> dict:
    return _finalize_tool_result(_call("list_comments", issue_id_or_key))


def list_notifications(count: int = DEFAULT_NOTIFICATION_COUNT) -> dict:
    """List recent notifications for the API key's user."""
    return _finalize_tool_result(_call("list_notifications", count))


def count_notifications() -> dict:
    """Count unread notifications."""
    return _finalize_tool_result(_call("count_notifications"))


def register(mcp):
    """Register all read tools with the FastMCP instance."""
    for tool in (
        get_space,
        get_myself,
        list_users,
        list_priorities,
        list_projects,
        get_project,
        list_issue_types,
        list_categories,
        search_issues,
        get_issue,
        list_comments,
        list_notifications,
        count_notifications,
    ):
        mcp.tool()(tool)
