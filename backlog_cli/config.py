"""
backlog-cli configuration, constants, and module-level switches.
Standalone module: no imports from other project files except exceptions.
"""

import os
from dataclasses import dataclass

from backlog_cli.exceptions import SetupError

# ---------------------------------------------------------------------------
# .env path and helpers
# ---------------------------------------------------------------------------

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_PACKAGE_DIR)

ENV_PATH = os.path.join(_PROJECT_ROOT, ".env")


def load_env():
    env = {}
    if os.path.exists(ENV_PATH):
        with open(ENV_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip()
    return env


def _lookup(key, environ, file_env):
    """Process environment wins over .env; empty values count as unset."""
    value = environ.get(key)
    if value:
        return value
    return file_env.get(key) or None


def _parse_bool(raw, default=False):
    """Parse common boolean env formats."""
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _parse_int(raw, default):
    """Parse integer env values with fallback."""
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_positive_int(raw, default):
    """Like _parse_int, but zero or negative values fall back to *default*."""
    value = _parse_int(raw, default)
    return value if value > 0 else default


def _normalize_domain(raw):
    """Reduce 'https://space.backlog.com/' to 'space.backlog.com'."""
    domain = raw.strip()
    for scheme in ("https://", "http://"):
        if domain.lower().startswith(scheme):
            domain = domain[len(scheme) :]
    return domain.rstrip("/")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.1.0"
PROG = "backlog-cli"

DOMAIN_VAR = "BACKLOG_DOMAIN"
API_KEY_VAR = "BACKLOG_API_KEY"

API_PREFIX = "/api/v2/"
DEFAULT_NOTIFICATION_COUNT = 20
VALID_ORDERS = ("asc", "desc")
VALID_FORMATS = ("json", "table")
CONTRACT_SCHEMA_VERSION = "1.0"

# ---------------------------------------------------------------------------
# Module-level switches (read once at import, overridable at runtime)
# ---------------------------------------------------------------------------

env = load_env()

HTTP_TIMEOUT_SECONDS = _parse_int(
    _lookup("BACKLOG_HTTP_TIMEOUT_SECONDS", os.environ, env), 30
)
HTTP_MAX_RESPONSE_BYTES = _parse_positive_int(
    _lookup("BACKLOG_HTTP_MAX_RESPONSE_BYTES", os.environ, env), 5_000_000
)
HTTP_LOG_ENABLED = _parse_bool(_lookup("BACKLOG_HTTP_LOG", os.environ, env))


# ---------------------------------------------------------------------------
# Per-invocation configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BacklogConfig:
    """Credentials and transport settings for one invocation."""

    domain: str
    api_key: str
    timeout_seconds: int = 30

    @property
    def base_url(self):
        return f"https://{self.domain}{API_PREFIX}"


def get_config(environ=None):
    """Build a BacklogConfig from the environment (then .env).

    Raises SetupError naming the first missing variable.
    """
    if environ is None:
        environ = os.environ
    file_env = load_env()
    domain = _lookup(DOMAIN_VAR, environ, file_env)
    if not domain:
        raise SetupError(f"{DOMAIN_VAR} environment variable is required")
    api_key = _lookup(API_KEY_VAR, environ, file_env)
    if not api_key:
        raise SetupError(f"{API_KEY_VAR} environment variable is required")
    timeout = _parse_int(
        _lookup("BACKLOG_HTTP_TIMEOUT_SECONDS", environ, file_env),
        HTTP_TIMEOUT_SECONDS,
    )
    domain = _normalize_domain(domain)
    if not domain:
        raise SetupError(f"{DOMAIN_VAR} environment variable is required")
    return BacklogConfig(domain=domain, api_key=api_key, timeout_seconds=max(1, timeout))
