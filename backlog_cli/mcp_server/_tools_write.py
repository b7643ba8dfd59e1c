"""Write tools: issue create/update and comments."""

from __future__ import annotations

from backlog_cli import CliError
from backlog_cli.mcp_server._core import (
    _call,
    _contract_error,
    _error_type,
    _finalize_tool_result,
)
from backlog_cli.models import CreateIssueParams, UpdateIssueParams


def _drop_none(**fields):
    return {k: v for k, v in fields.items() if v is not None}


def create_issue(
    project_id: int,
    summary: str,
    issue_type_id: int,
    priority_id: int,
    description: str | None = None,
    assignee_id: int | None = None,
    due_date: str | None = None,
    start_date: str | None = None,
) -> dict:
    """Create an issue.

    Args:
        due_date/start_date: yyyy-MM-dd date strings.
    """
    try:
        params = CreateIssueParams.from_payload(
            _drop_none(
                projectId=project_id,
                summary=summary,
                issueTypeId=issue_type_id,
                priorityId=priority_id,
                description=description,
                assigneeId=assignee_id,
                dueDate=due_date,
                startDate=start_date,
            )
        )
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), _error_type(e)))
    return _finalize_tool_result(_call("create_issue", params))


def update_issue(
    issue_id_or_key: str,
    summary: str | None = None,
    description: str | None = None,
    status_id: int | None = None,
    priority_id: int | None = None,
    assignee_id: int | None = None,
    due_date: str | None = None,
    comment: str | None = None,
) -> dict:
    """Update an issue. Only the given fields change; at least one is required.

    Args:
        comment: Posted as a comment alongside the change.
    """
    try:
        params = UpdateIssueParams.from_payload(
            _drop_none(
                summary=summary,
                description=description,
                statusId=status_id,
                priorityId=priority_id,
                assigneeId=assignee_id,
                dueDate=due_date,
                comment=comment,
            )
        )
    except CliError as e:
        return _finalize_tool_result(_contract_error(str(e), _error_type(e)))
    return _finalize_tool_result(_call("update_issue", issue_id_or_key, params))


def add_comment(issue_id_or_key: str, content: str) -> dict:
    """Add a comment to an issue."""
    if not content or not content.strip():
        return _finalize_tool_result(_contract_error("content required", "validation"))
    return _finalize_tool_result(_call("add_comment", issue_id_or_key, content))


def register(mcp):
    """Register all write tools with the FastMCP instance."""
    mcp.tool()(create_issue)
    mcp.tool()(update_issue)
    mcp.tool()(add_comment)
