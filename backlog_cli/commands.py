"""
Command implementations for backlog-cli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Request logic lives in client.py (BacklogClient). These thin wrappers
validate payloads, build the client from the environment, and print.
Payloads are validated before configuration is read, so a bad argument
never costs a network call.
"""

from backlog_cli.api import _safe_json_parse
from backlog_cli.client import BacklogClient
from backlog_cli.config import get_config
from backlog_cli.formatters import (
    format_comments_table,
    format_issues_table,
    format_notifications_table,
    format_projects_table,
    format_users_table,
    output,
)
from backlog_cli.models import CreateIssueParams, IssueSearch, UpdateIssueParams


def _client():
    return BacklogClient(get_config())


# ---------------------------------------------------------------------------
# Space, users, priorities
# ---------------------------------------------------------------------------


def cmd_space(ns):
    output(_client().get_space(), fmt=ns.format)


def cmd_myself(ns):
    output(_client().get_myself(), fmt=ns.format)


def cmd_users(ns):
    output(_client().list_users(), format_users_table, ns.format)


def cmd_priorities(ns):
    output(_client().list_priorities(), fmt=ns.format)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def cmd_projects(ns):
    archived = True if ns.archived else None
    output(_client().list_projects(archived=archived), format_projects_table, ns.format)


def cmd_project(ns):
    output(_client().get_project(ns.project_id_or_key), fmt=ns.format)


def cmd_issue_types(ns):
    output(_client().list_issue_types(ns.project_id_or_key), fmt=ns.format)


def cmd_categories(ns):
    output(_client().list_categories(ns.project_id_or_key), fmt=ns.format)


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------


def cmd_issues(ns):
    search = IssueSearch(
        project_ids=ns.project_ids or [],
        issue_type_ids=ns.issue_type_ids or [],
        status_ids=ns.status_ids or [],
        priority_ids=ns.priority_ids or [],
        assignee_ids=ns.assignee_ids or [],
        keyword=ns.keyword,
        count=ns.count,
        offset=ns.offset,
        sort=ns.sort,
        order=ns.order,
    )
    output(_client().search_issues(search), format_issues_table, ns.format)


def cmd_issue(ns):
    output(_client().get_issue(ns.issue_id_or_key), fmt=ns.format)


def cmd_create_issue(ns):
    params = CreateIssueParams.from_payload(_safe_json_parse(ns.json_params, "create-issue"))
    output(_client().create_issue(params), fmt=ns.format)


def cmd_update_issue(ns):
    params = UpdateIssueParams.from_payload(_safe_json_parse(ns.json_params, "update-issue"))
    output(_client().update_issue(ns.issue_id_or_key, params), fmt=ns.format)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


def cmd_add_comment(ns):
    output(_client().add_comment(ns.issue_id_or_key, ns.content), fmt=ns.format)


def cmd_comments(ns):
    output(_client().list_comments(ns.issue_id_or_key), format_comments_table, ns.format)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


def cmd_notifications(ns):
    output(_client().list_notifications(ns.count), format_notifications_table, ns.format)


def cmd_count_notifications(ns):
    output(_client().count_notifications(), fmt=ns.format)
