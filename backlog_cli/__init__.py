"""backlog-cli — command-line client for the Backlog issue tracker API."""

from backlog_cli.client import BacklogClient
from backlog_cli.config import VERSION, BacklogConfig
from backlog_cli.exceptions import (
    ApiError,
    CliError,
    InvalidJsonError,
    NetworkError,
    SetupError,
    ValidationError,
)
from backlog_cli.types import (
    Comment,
    Issue,
    Notification,
    NotificationCount,
    Project,
    User,
)

__all__ = [
    "VERSION",
    "BacklogClient",
    "BacklogConfig",
    "ApiError",
    "CliError",
    "InvalidJsonError",
    "NetworkError",
    "SetupError",
    "ValidationError",
    "Comment",
    "Issue",
    "Notification",
    "NotificationCount",
    "Project",
    "User",
]
