"""
BacklogClient — public Python API for the Backlog issue tracker.

One method per endpoint. Every method issues exactly one request and
returns the decoded JSON unchanged (dicts and lists from the service).
"""

from __future__ import annotations

from typing import Any

from backlog_cli.api import api_request, build_endpoint, segment
from backlog_cli.config import DEFAULT_NOTIFICATION_COUNT, BacklogConfig, get_config
from backlog_cli.models import CreateIssueParams, IssueSearch, UpdateIssueParams

# TypedDict return types, for documentation only
from backlog_cli.types import (
    Comment,
    Issue,
    Notification,
    NotificationCount,
    Project,
    User,
)


class BacklogClient:
    """Thin wrapper over the /api/v2 endpoints.

    Args:
        config: Explicit configuration. When omitted it is read from the
            environment (BACKLOG_DOMAIN, BACKLOG_API_KEY).
    """

    def __init__(self, config: BacklogConfig | None = None):
        self.config = config if config is not None else get_config()

    def _get(self, endpoint: str) -> Any:
        return api_request(self.config, endpoint)

    # -------------------------------------------------------------------
    # Space and users
    # -------------------------------------------------------------------

    def get_space(self) -> dict[str, Any]:
        return self._get("space")

    def get_myself(self) -> User:
        return self._get("users/myself")

    def list_users(self) -> list[User]:
        return self._get("users")

    def list_priorities(self) -> list[dict[str, Any]]:
        return self._get("priorities")

    # -------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------

    def list_projects(self, archived: bool | None = None) -> list[Project]:
        """List projects. *archived* is only sent when given."""
        return self._get(build_endpoint("projects", {"archived": archived}))

    def get_project(self, project_id_or_key: str) -> Project:
        return self._get(f"projects/{segment(project_id_or_key)}")

    def list_issue_types(self, project_id_or_key: str) -> list[dict[str, Any]]:
        return self._get(f"projects/{segment(project_id_or_key)}/issueTypes")

    def list_categories(self, project_id_or_key: str) -> list[dict[str, Any]]:
        return self._get(f"projects/{segment(project_id_or_key)}/categories")

    # -------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------

    def search_issues(self, search: IssueSearch | None = None) -> list[Issue]:
        """Search issues. An empty search requests the bare ``issues`` path."""
        params = (search or IssueSearch()).to_params()
        return self._get(build_endpoint("issues", params))

    def get_issue(self, issue_id_or_key: str) -> Issue:
        return self._get(f"issues/{segment(issue_id_or_key)}")

    def create_issue(self, params: CreateIssueParams) -> Issue:
        return api_request(self.config, "issues", method="POST", form=params.to_form())

    def update_issue(self, issue_id_or_key: str, params: UpdateIssueParams) -> Issue:
        return api_request(
            self.config,
            f"issues/{segment(issue_id_or_key)}",
            method="PATCH",
            form=params.to_form(),
        )

    # -------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------

    def add_comment(self, issue_id_or_key: str, content: str) -> Comment:
        return api_request(
            self.config,
            f"issues/{segment(issue_id_or_key)}/comments",
            method="POST",
            form={"content": content},
        )

    def list_comments(self, issue_id_or_key: str) -> list[Comment]:
        return self._get(f"issues/{segment(issue_id_or_key)}/comments")

    # -------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------

    def list_notifications(self, count: int = DEFAULT_NOTIFICATION_COUNT) -> list[Notification]:
        return self._get(build_endpoint("notifications", {"count": count}))

    def count_notifications(self) -> NotificationCount:
        return self._get("notifications/count")
