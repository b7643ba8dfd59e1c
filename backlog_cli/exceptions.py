"""
backlog-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1: every user-facing failure."""

    exit_code = 1


class SetupError(CliError):
    """Required configuration (domain or API key) is missing."""


class ValidationError(CliError):
    """A command argument is missing or invalid."""


class InvalidJsonError(ValidationError):
    """A JSON payload could not be parsed or has the wrong shape."""


class NetworkError(CliError):
    """The service could not be reached at all."""

    def __init__(self, message, domain):
        super().__init__(message)
        self.domain = domain


class ApiError(CliError):
    """The service answered with a non-2xx status."""

    def __init__(self, status, kind, hint, body):
        self.status = status
        self.kind = kind
        self.hint = hint
        self.body = body
        label = f" ({hint})" if hint else ""
        super().__init__(f"API Error {status}{label}: {body}")


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
