"""Output formatting package for backlog-cli.

Re-exports all public names so consumers can do:
    from backlog_cli.formatters import format_issues_table
"""

from backlog_cli.formatters._core import output, pretty_print
from backlog_cli.formatters._entities import (
    format_comments_table,
    format_issues_table,
    format_notifications_table,
    format_projects_table,
    format_users_table,
)
from backlog_cli.formatters._table import _sanitize_str, _table, _trunc

__all__ = [
    "output",
    "pretty_print",
    "format_comments_table",
    "format_issues_table",
    "format_notifications_table",
    "format_projects_table",
    "format_users_table",
    "_sanitize_str",
    "_table",
    "_trunc",
]
