"""Tests for cli.py — global flags, argument validation, end-to-end dispatch."""

import http.client
import json
import urllib.error
import urllib.parse
from unittest.mock import patch

import pytest

from backlog_cli import config
from backlog_cli.cli import HELP_TEXT, _extract_global_flags, build_parser, main
from backlog_cli.exceptions import ValidationError


def _run(argv):
    """Run main() and return its exit code (0 when it returns normally)."""
    try:
        main(argv)
    except SystemExit as e:
        return e.code
    return 0


def _respond(mock_urlopen, body):
    resp = mock_urlopen.return_value.__enter__.return_value
    resp.headers.get.return_value = "application/json"
    resp.read.return_value = body
    resp.status = 200


def _sent_request(mock_urlopen):
    return mock_urlopen.call_args.args[0]


# ---------------------------------------------------------------------------
# _extract_global_flags
# ---------------------------------------------------------------------------


class TestExtractGlobalFlags:
    def test_no_flags(self):
        assert _extract_global_flags(["get-space"]) == ("json", False, False, ["get-space"])

    def test_format_with_equals_after_command(self):
        fmt, _, _, remaining = _extract_global_flags(["get-issues", "--format=table"])
        assert fmt == "table"
        assert remaining == ["get-issues"]

    def test_format_with_separate_value(self):
        fmt, _, _, remaining = _extract_global_flags(["--format", "table", "get-users"])
        assert fmt == "table"
        assert remaining == ["get-users"]

    def test_invalid_format(self):
        with pytest.raises(ValidationError):
            _extract_global_flags(["--format=xml", "get-space"])

    def test_verbose(self):
        _, verbose, _, remaining = _extract_global_flags(["-v", "get-space"])
        assert verbose is True
        assert remaining == ["get-space"]

    def test_help_anywhere(self):
        _, _, show_help, _ = _extract_global_flags(["get-issue", "--help"])
        assert show_help is True

    def test_version_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _extract_global_flags(["--version"])
        assert exc_info.value.code == 0
        assert config.VERSION in capsys.readouterr().out

    def test_comment_text_is_not_a_flag(self):
        fmt, verbose, show_help, remaining = _extract_global_flags(
            ["add-comment", "PROJ-1", "-v", "--format=table"]
        )
        assert verbose is False
        assert show_help is False
        assert fmt == "table"
        assert remaining == ["add-comment", "PROJ-1", "--", "-v"]

    def test_comment_text_equal_to_version_does_not_exit(self):
        _, _, _, remaining = _extract_global_flags(["-v", "add-comment", "PROJ-1", "--version"])
        assert remaining == ["add-comment", "PROJ-1", "--", "--version"]

    def test_double_dash_stops_flag_scanning(self):
        _, verbose, show_help, remaining = _extract_global_flags(
            ["add-comment", "--", "PROJ-1", "--help"]
        )
        assert verbose is False
        assert show_help is False
        assert remaining == ["add-comment", "--", "PROJ-1", "--help"]


# ---------------------------------------------------------------------------
# build_parser
# ---------------------------------------------------------------------------


class TestBuildParser:
    def setup_method(self):
        self.parser, self.commands = build_parser()

    def test_lists_every_command(self):
        assert self.commands == sorted(
            [
                "get-space",
                "get-myself",
                "get-users",
                "get-priorities",
                "get-projects",
                "get-project",
                "get-issue-types",
                "get-categories",
                "get-issues",
                "get-issue",
                "create-issue",
                "update-issue",
                "add-comment",
                "get-comments",
                "get-notifications",
                "count-notifications",
            ]
        )

    def test_issue_id_flags_repeat_and_split(self):
        ns = self.parser.parse_args(["get-issues", "--project=1,2", "--project=3", "--status=4"])
        assert ns.project_ids == [1, 2, 3]
        assert ns.status_ids == [4]
        assert ns.priority_ids is None

    def test_issue_scalar_flags(self):
        ns = self.parser.parse_args(
            ["get-issues", "--keyword=login bug", "--count=10", "--offset=0", "--order=asc"]
        )
        assert ns.keyword == "login bug"
        assert ns.count == 10
        assert ns.offset == 0
        assert ns.order == "asc"

    def test_invalid_order(self):
        with pytest.raises(ValidationError):
            self.parser.parse_args(["get-issues", "--order=up"])

    def test_non_integer_id(self):
        with pytest.raises(ValidationError) as exc_info:
            self.parser.parse_args(["get-issues", "--project=abc"])
        assert "--project" in str(exc_info.value)

    def test_notifications_default_count(self):
        ns = self.parser.parse_args(["get-notifications"])
        assert ns.count == 20

    def test_archived_flag(self):
        assert self.parser.parse_args(["get-projects", "--archived"]).archived is True
        assert self.parser.parse_args(["get-projects"]).archived is False


# ---------------------------------------------------------------------------
# main: help, usage, validation (no network, no config)
# ---------------------------------------------------------------------------


class TestMainWithoutNetwork:
    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_help_exits_zero_without_config(self, mock_urlopen, capsys):
        assert _run(["--help"]) == 0
        assert capsys.readouterr().out.strip() == HELP_TEXT.strip()
        mock_urlopen.assert_not_called()

    def test_short_help(self, capsys):
        assert _run(["-h"]) == 0
        assert "get-notifications" in capsys.readouterr().out

    def test_no_command_is_usage_error(self, capsys):
        assert _run([]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert "Usage" in err

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_unknown_command(self, mock_urlopen, capsys, backlog_env):
        assert _run(["frobnicate"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() == "Error: Unknown command: frobnicate"
        mock_urlopen.assert_not_called()

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_get_issue_without_id(self, mock_urlopen, capsys, backlog_env):
        assert _run(["get-issue"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.strip() == "Error: issueIdOrKey required"
        mock_urlopen.assert_not_called()

    def test_missing_id_reported_before_config(self, capsys):
        assert _run(["get-project"]) == 1
        assert "projectIdOrKey required" in capsys.readouterr().err

    def test_empty_id_rejected(self, capsys, backlog_env):
        assert _run(["get-issue", ""]) == 1
        assert "issueIdOrKey" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "argv,missing",
        [
            (["update-issue"], "issueIdOrKey"),
            (["update-issue", "PROJ-1"], "JSON params"),
            (["add-comment", "PROJ-1"], "content"),
            (["create-issue"], "JSON params"),
        ],
    )
    def test_missing_positionals(self, argv, missing, capsys, backlog_env):
        assert _run(argv) == 1
        assert f"{missing} required" in capsys.readouterr().err

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_create_issue_invalid_json(self, mock_urlopen, capsys, backlog_env):
        assert _run(["create-issue", "{projectId: 1"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Invalid JSON" in captured.err
        assert "{projectId: 1" in captured.err
        mock_urlopen.assert_not_called()

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_create_issue_missing_field(self, mock_urlopen, capsys, backlog_env):
        assert _run(["create-issue", '{"projectId": 1}']) == 1
        assert "'summary' is required" in capsys.readouterr().err
        mock_urlopen.assert_not_called()

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_update_issue_empty_payload(self, mock_urlopen, capsys, backlog_env):
        assert _run(["update-issue", "PROJ-1", "{}"]) == 1
        assert "at least one of" in capsys.readouterr().err
        mock_urlopen.assert_not_called()

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_missing_config(self, mock_urlopen, capsys):
        assert _run(["get-space"]) == 1
        assert capsys.readouterr().err.strip() == (
            "Error: BACKLOG_DOMAIN environment variable is required"
        )
        mock_urlopen.assert_not_called()


# ---------------------------------------------------------------------------
# main: end to end against a mocked transport
# ---------------------------------------------------------------------------


class TestMainEndToEnd:
    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_get_projects_archived(self, mock_urlopen, capsys, backlog_env):
        body = [{"id": 1, "projectKey": "TEST", "name": "Test"}]
        _respond(mock_urlopen, json.dumps(body).encode())
        assert _run(["get-projects", "--archived"]) == 0
        req = _sent_request(mock_urlopen)
        assert req.full_url == (
            "https://example.backlog.com/api/v2/projects?archived=true&apiKey=secret-key"
        )
        captured = capsys.readouterr()
        assert captured.out == json.dumps(body, indent=2) + "\n"
        assert captured.err == ""

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_get_issues_filters(self, mock_urlopen, capsys, backlog_env):
        _respond(mock_urlopen, b"[]")
        assert _run(["get-issues", "--project=1", "--status=2,3", "--keyword=crash"]) == 0
        query = urllib.parse.urlsplit(_sent_request(mock_urlopen).full_url).query
        pairs = urllib.parse.parse_qsl(query)
        assert ("projectId[]", "1") in pairs
        assert ("statusId[]", "2") in pairs
        assert ("statusId[]", "3") in pairs
        assert ("keyword", "crash") in pairs
        assert pairs[-1] == ("apiKey", "secret-key")
        assert capsys.readouterr().out == "[]\n"

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_create_issue_sends_form(self, mock_urlopen, capsys, backlog_env):
        _respond(mock_urlopen, b'{"issueKey": "TEST-1"}')
        payload = {"projectId": 1, "summary": "New", "issueTypeId": 2, "priorityId": 3}
        assert _run(["create-issue", json.dumps(payload)]) == 0
        req = _sent_request(mock_urlopen)
        assert req.get_method() == "POST"
        assert req.get_header("Content-type") == "application/x-www-form-urlencoded"
        form = dict(urllib.parse.parse_qsl(req.data.decode()))
        assert form == {"projectId": "1", "summary": "New", "issueTypeId": "2", "priorityId": "3"}
        assert "apiKey=secret-key" in req.full_url
        assert json.loads(capsys.readouterr().out) == {"issueKey": "TEST-1"}

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_update_issue_patch(self, mock_urlopen, backlog_env):
        _respond(mock_urlopen, b"{}")
        assert _run(["update-issue", "TEST-1", '{"statusId": 4, "comment": "done"}']) == 0
        req = _sent_request(mock_urlopen)
        assert req.get_method() == "PATCH"
        assert "/issues/TEST-1?" in req.full_url
        assert dict(urllib.parse.parse_qsl(req.data.decode())) == {
            "statusId": "4",
            "comment": "done",
        }

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_add_comment(self, mock_urlopen, backlog_env):
        _respond(mock_urlopen, b'{"id": 9}')
        assert _run(["add-comment", "TEST-1", "Ship it"]) == 0
        req = _sent_request(mock_urlopen)
        assert req.full_url.startswith("https://example.backlog.com/api/v2/issues/TEST-1/comments?")
        assert req.data == b"content=Ship+it"

    @pytest.mark.parametrize("content", ["-wip", "-v", "--help", "--version", "--format"])
    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_add_comment_dash_content_sent_verbatim(
        self, mock_urlopen, content, capsys, backlog_env
    ):
        _respond(mock_urlopen, b'{"id": 9}')
        assert _run(["add-comment", "TEST-1", content]) == 0
        req = _sent_request(mock_urlopen)
        assert dict(urllib.parse.parse_qsl(req.data.decode())) == {"content": content}
        assert json.loads(capsys.readouterr().out) == {"id": 9}

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_add_comment_flags_after_content_still_apply(
        self, mock_urlopen, capsys, backlog_env, monkeypatch
    ):
        monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
        _respond(mock_urlopen, b'{"id": 9}')
        assert _run(["add-comment", "TEST-1", "-wip", "--verbose"]) == 0
        assert _sent_request(mock_urlopen).data == b"content=-wip"
        assert "[HTTP]" in capsys.readouterr().err

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_dropped_connection_exit_1(self, mock_urlopen, capsys, backlog_env):
        mock_urlopen.side_effect = http.client.RemoteDisconnected(
            "Remote end closed connection without response"
        )
        assert _run(["get-space"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: Network error")
        assert "example.backlog.com" in err

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_api_error_exit_1(self, mock_urlopen, capsys, backlog_env):
        import io

        mock_urlopen.side_effect = urllib.error.HTTPError(
            "https://example.backlog.com", 401, "Unauthorized", {}, io.BytesIO(b"bad key")
        )
        assert _run(["get-myself"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: API Error 401 (Unauthorized")
        assert "bad key" in captured.err

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_network_error_exit_1(self, mock_urlopen, capsys, backlog_env):
        mock_urlopen.side_effect = urllib.error.URLError("unreachable")
        assert _run(["get-space"]) == 1
        err = capsys.readouterr().err
        assert "Network error" in err
        assert "example.backlog.com" in err

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_table_format(self, mock_urlopen, capsys, backlog_env):
        _respond(mock_urlopen, b'[{"id": 1, "projectKey": "TEST", "name": "Test"}]')
        assert _run(["get-projects", "--format=table"]) == 0
        out = capsys.readouterr().out
        assert "TEST" in out
        assert "Total: 1 projects" in out

    @patch("backlog_cli.api.urllib.request.urlopen")
    def test_verbose_logs_to_stderr(self, mock_urlopen, capsys, backlog_env, monkeypatch):
        monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
        _respond(mock_urlopen, b'{"count": 3}')
        assert _run(["count-notifications", "--verbose"]) == 0
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"count": 3}
        assert "[HTTP]" in captured.err
        assert "secret-key" not in captured.err
