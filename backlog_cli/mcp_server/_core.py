"""Core helpers: client caching, _call dispatcher, response contract."""

from __future__ import annotations

from backlog_cli import (
    ApiError,
    BacklogClient,
    CliError,
    InvalidJsonError,
    NetworkError,
    SetupError,
    ValidationError,
)
from backlog_cli.config import CONTRACT_SCHEMA_VERSION

_client: BacklogClient | None = None

# Most specific first: InvalidJsonError is a ValidationError.
_ERROR_TYPES = (
    (SetupError, "setup"),
    (InvalidJsonError, "invalid_json"),
    (ValidationError, "validation"),
    (NetworkError, "network"),
    (ApiError, "api"),
)


def _get_client() -> BacklogClient:
    """Return a cached BacklogClient, creating one on first use."""
    global _client
    if _client is None:
        _client = BacklogClient()
    return _client


def _error_type(err: CliError) -> str:
    """Stable error type name for the envelope (setup, api, network, ...)."""
    for cls, name in _ERROR_TYPES:
        if isinstance(err, cls):
            return name
    return "error"


def _contract_error(message: str, error_type: str = "error") -> dict:
    """Return a stable MCP error envelope."""
    return {
        "ok": False,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "error": {
            "type": error_type,
            "message": message,
        },
    }


def _finalize_tool_result(result):
    """Add contract metadata. Dicts gain ok/schema_version; anything else is
    wrapped as {"ok", "schema_version", "data"}."""
    if isinstance(result, dict):
        if result.get("ok") is False:
            return result
        out = dict(result)
        out.setdefault("ok", True)
        out.setdefault("schema_version", CONTRACT_SCHEMA_VERSION)
        return out
    return {
        "ok": True,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "data": result,
    }


_ALLOWED_METHODS = {
    "get_space",
    "get_myself",
    "list_users",
    "list_priorities",
    "list_projects",
    "get_project",
    "list_issue_types",
    "list_categories",
    "search_issues",
    "get_issue",
    "create_issue",
    "update_issue",
    "add_comment",
    "list_comments",
    "list_notifications",
    "count_notifications",
}


def _call(method_name: str, *args, **kwargs):
    """Call a BacklogClient method, converting exceptions to error dicts."""
    if method_name not in _ALLOWED_METHODS:
        return _contract_error(f"Unknown method: {method_name}", "error")
    try:
        client = _get_client()
        return getattr(client, method_name)(*args, **kwargs)
    except CliError as e:
        return _contract_error(str(e), _error_type(e))
    except Exception as e:
        return _contract_error(f"Unexpected error: {e}", "error")
