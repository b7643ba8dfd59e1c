"""
HTTP request layer for backlog-cli: URL building, apiKey injection,
form encoding, and classification of failures.
"""

import http.client
import json
import sys
import time
import urllib.error
import urllib.parse
import urllib.request

from backlog_cli import config
from backlog_cli.exceptions import (
    ApiError,
    CliError,
    HTTPError,
    InvalidJsonError,
    NetworkError,
)

_STATUS_KINDS = {
    400: ("bad_request", "Bad Request - Check your parameters"),
    401: ("unauthorized", "Unauthorized - Check your API key"),
    403: ("forbidden", "Forbidden - You don't have permission"),
    404: ("not_found", "Not Found - Resource doesn't exist or you don't have access"),
    429: ("rate_limited", "Rate Limited - Too many requests, please wait"),
    500: ("server_error", "Internal Server Error - Backlog server issue"),
}

_SENSITIVE_PARAMS = {"apikey"}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _safe_json_parse(text, context="input"):
    """Parse a JSON command payload, raising InvalidJsonError with the raw text.

    The received text is collapsed onto one line so the error stays a single line.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        received = " ".join(text.split())
        raise InvalidJsonError(
            f"Invalid JSON in {context}: {e.msg} at position {e.pos}. Received: {received}"
        ) from None


def _stringify(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _param_pairs(params):
    """Flatten a params mapping into (name, value) pairs.

    None values are dropped. List values become one ``name[]`` pair per
    element, so an empty list contributes nothing.
    """
    pairs = []
    for name, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            key = name if name.endswith("[]") else f"{name}[]"
            pairs.extend((key, _stringify(v)) for v in value)
        else:
            pairs.append((name, _stringify(value)))
    return pairs


def build_endpoint(path, params=None):
    """Return ``path`` with an encoded query string, or the bare path."""
    query = urllib.parse.urlencode(_param_pairs(params))
    return f"{path}?{query}" if query else path


def encode_form(fields):
    """Encode a body as application/x-www-form-urlencoded."""
    return urllib.parse.urlencode(_param_pairs(fields))


def segment(value):
    """Quote a single path segment (an id or key)."""
    return urllib.parse.quote(str(value), safe="")


def build_url(cfg, endpoint):
    """Absolute URL for *endpoint* with the apiKey query parameter appended."""
    sep = "&" if "?" in endpoint else "?"
    auth = urllib.parse.urlencode({"apiKey": cfg.api_key})
    return f"{cfg.base_url}{endpoint}{sep}{auth}"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def _sanitize_url_for_log(url):
    """Mask the API key in URLs before logging."""
    parsed = urllib.parse.urlsplit(url)
    if not parsed.query:
        return url
    pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    masked = []
    for key, value in pairs:
        if key.lower() in _SENSITIVE_PARAMS:
            masked.append((key, "***"))
        else:
            masked.append((key, value))
    safe_query = urllib.parse.urlencode(masked, doseq=True)
    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, safe_query, parsed.fragment)
    )


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _http_request(url, data=None, headers=None, method="GET", timeout=30):
    """Make one HTTP request.
    Returns parsed JSON on success.
    Raises HTTPError for HTTP errors (caller classifies the code).
    Raises NetworkError when the host cannot be reached."""
    host = urllib.parse.urlsplit(url).netloc
    safe_url = _sanitize_url_for_log(url)
    timeout = max(1, timeout)
    start = time.perf_counter()
    req = urllib.request.Request(url, data=data, headers=headers or {}, method=method)
    _log_http_event(phase="request", method=method, url=safe_url, timeout_seconds=timeout)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            content_type = resp.headers.get("Content-Type", "")
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
            if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                raise CliError(
                    f"Response too large from {host} (>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
                )
            _log_http_event(
                phase="response",
                method=method,
                url=safe_url,
                status=getattr(resp, "status", 200),
                content_type=content_type,
                bytes=len(raw),
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            try:
                return json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise CliError(f"Unexpected response from {host} (not valid JSON): {e}") from e
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        _log_http_event(
            phase="response",
            method=method,
            url=safe_url,
            status=e.code,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except TimeoutError as e:
        _log_http_event(phase="network_error", method=method, url=safe_url, error="timeout")
        raise NetworkError(
            f"Network error: Request to {host} timed out after {timeout} seconds.",
            host,
        ) from e
    except urllib.error.URLError as e:
        _log_http_event(
            phase="network_error", method=method, url=safe_url, error=f"url_error: {e.reason}"
        )
        raise NetworkError(
            f"Network error: Unable to connect to {host}. "
            "Check your internet connection and domain.",
            host,
        ) from e
    except (OSError, http.client.HTTPException) as e:
        _log_http_event(
            phase="network_error", method=method, url=safe_url, error=type(e).__name__
        )
        raise NetworkError(
            f"Network error: Connection to {host} failed ({str(e) or type(e).__name__}). "
            "Check your internet connection and domain.",
            host,
        ) from e


def classify_http_error(err):
    """Turn a raw HTTPError into an ApiError with a status-specific hint."""
    kind, hint = _STATUS_KINDS.get(err.code, ("unknown", ""))
    return ApiError(err.code, kind, hint, err.body)


def api_request(cfg, endpoint, method="GET", form=None):
    """Call ``https://{domain}/api/v2/{endpoint}`` and return parsed JSON.

    The API key always travels in the query string, also for POST/PATCH.
    Mutating requests send *form* as a form-encoded body.
    """
    url = build_url(cfg, endpoint)
    headers = {"Accept": "application/json"}
    data = None
    if method != "GET":
        headers["Content-Type"] = FORM_CONTENT_TYPE
        data = encode_form(form).encode("utf-8")
    try:
        return _http_request(url, data, headers, method, timeout=cfg.timeout_seconds)
    except HTTPError as e:
        raise classify_http_error(e) from e
