"""
backlog-cli — command-line client for the Backlog issue tracker API
"""

import argparse
import sys

from backlog_cli import config
from backlog_cli.commands import (
    cmd_add_comment,
    cmd_categories,
    cmd_comments,
    cmd_count_notifications,
    cmd_create_issue,
    cmd_issue,
    cmd_issue_types,
    cmd_issues,
    cmd_myself,
    cmd_notifications,
    cmd_priorities,
    cmd_project,
    cmd_projects,
    cmd_space,
    cmd_update_issue,
    cmd_users,
)
from backlog_cli.exceptions import CliError, ValidationError

HELP_TEXT = """\
Backlog API Client

Usage: backlog-cli <command> [args...] [--flag=value ...]

Global flags:
  --format table          Output lists as readable text instead of JSON (default: json)
  --verbose, -v           Log HTTP requests to stderr (API key masked)
  --version               Show version number
  --help, -h              Show this help

Commands:
  get-space                            Get space info
  get-myself                           Get authenticated user
  get-users                            List users
  get-priorities                       List priorities
  get-projects [--archived]            List projects
  get-project <projectIdOrKey>         Get project details
  get-issue-types <projectIdOrKey>     List issue types
  get-categories <projectIdOrKey>      List categories
  get-issues [options]                 Search issues
    --project=ID                         Project id (repeatable, comma-separated)
    --issue-type=ID                      Issue type id (repeatable, comma-separated)
    --status=ID                          Status id (repeatable, comma-separated)
    --priority=ID                        Priority id (repeatable, comma-separated)
    --assignee=ID                        Assignee id (repeatable, comma-separated)
    --keyword=TEXT                       Keyword search
    --count=N                            Number of results
    --offset=N                           Skip first N results
    --sort=FIELD                         Sort field (e.g. created, updated, priority)
    --order=asc|desc                     Sort order
  get-issue <issueIdOrKey>             Get issue details
  create-issue <json>                  Create issue (JSON params)
                                         required: projectId, summary, issueTypeId, priorityId
                                         optional: description, assigneeId, dueDate, startDate
  update-issue <issueIdOrKey> <json>   Update issue (JSON params, at least one of:
                                         summary, description, statusId, priorityId,
                                         assigneeId, dueDate, comment)
  add-comment <issueIdOrKey> <content> Add comment
  get-comments <issueIdOrKey>          Get issue comments
  get-notifications [--count=N]        Get notifications (default count: 20)
  count-notifications                  Count unread notifications

Environment:
  BACKLOG_DOMAIN  - Backlog space domain (e.g., mycompany.backlog.com)
  BACKLOG_API_KEY - Backlog API key
"""

USAGE = f"Usage: {config.PROG} <command> [args...]. Run with --help for available commands"


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so flags work after the command)
# ---------------------------------------------------------------------------


# Command -> index (command itself is 0) of its free-text positional
_FREE_TEXT_POSITIONS = {"add-comment": 2}


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (format_str, verbose, show_help, remaining_argv).
    Handles --version directly.

    Free-text positionals and everything after ``--`` are passed through
    untouched, behind a ``--`` so argparse never reads them as options.
    """
    fmt = "json"
    verbose = False
    show_help = False
    remaining = []
    free_text_taken = False
    i = 0
    while i < len(argv):
        arg = argv[i]
        positionals = [a for a in remaining if not a.startswith("-")]
        free_text_at = _FREE_TEXT_POSITIONS.get(positionals[0]) if positionals else None
        if arg == "--":
            remaining.extend(argv[i:])
            break
        elif not free_text_taken and free_text_at == len(positionals):
            remaining.extend(["--", arg])
            free_text_taken = True
        elif arg == "--version":
            print(f"{config.PROG} {config.VERSION}")
            sys.exit(0)
        elif arg in ("--help", "-h"):
            show_help = True
        elif arg in ("--verbose", "-v"):
            verbose = True
        elif arg.startswith("--format="):
            fmt = arg.split("=", 1)[1]
            _check_format(fmt)
        elif arg == "--format" and i + 1 < len(argv):
            fmt = argv[i + 1]
            _check_format(fmt)
            i += 1
        else:
            remaining.append(arg)
        i += 1
    return fmt, verbose, show_help, remaining


def _check_format(fmt):
    if fmt not in config.VALID_FORMATS:
        raise ValidationError(f"Invalid format '{fmt}'. Use: {', '.join(config.VALID_FORMATS)}")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises ValidationError instead of printing usage."""

    def error(self, message):
        raise ValidationError(message)


def _non_empty(value):
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _non_negative_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a non-negative integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be a non-negative integer")
    return parsed


def _id_list(value):
    """Parse '1,2,3' into [1, 2, 3]."""
    try:
        return [int(v) for v in value.split(",") if v.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a comma-separated list of integer ids") from exc


def build_parser():
    parser = _SubcommandParser(
        prog=config.PROG,
        description="Command-line client for the Backlog issue tracker API",
        add_help=False,
    )
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    def command(name, func):
        p = sub.add_parser(name, add_help=False)
        p.set_defaults(func=func)
        return p

    # --- space / users / priorities ---
    command("get-space", cmd_space)
    command("get-myself", cmd_myself)
    command("get-users", cmd_users)
    command("get-priorities", cmd_priorities)

    # --- projects ---
    p = command("get-projects", cmd_projects)
    p.add_argument("--archived", action="store_true")

    for name, func in (
        ("get-project", cmd_project),
        ("get-issue-types", cmd_issue_types),
        ("get-categories", cmd_categories),
    ):
        p = command(name, func)
        p.add_argument(
            "project_id_or_key", metavar="projectIdOrKey", nargs="?", type=_non_empty
        )

    # --- issues ---
    p = command("get-issues", cmd_issues)
    p.add_argument("--project", dest="project_ids", type=_id_list, action="extend")
    p.add_argument("--issue-type", dest="issue_type_ids", type=_id_list, action="extend")
    p.add_argument("--status", dest="status_ids", type=_id_list, action="extend")
    p.add_argument("--priority", dest="priority_ids", type=_id_list, action="extend")
    p.add_argument("--assignee", dest="assignee_ids", type=_id_list, action="extend")
    p.add_argument("--keyword")
    p.add_argument("--count", type=_positive_int)
    p.add_argument("--offset", type=_non_negative_int)
    p.add_argument("--sort")
    p.add_argument("--order", choices=config.VALID_ORDERS)

    p = command("get-issue", cmd_issue)
    p.add_argument("issue_id_or_key", metavar="issueIdOrKey", nargs="?", type=_non_empty)

    p = command("create-issue", cmd_create_issue)
    p.add_argument("json_params", metavar="json", nargs="?", type=_non_empty)

    p = command("update-issue", cmd_update_issue)
    p.add_argument("issue_id_or_key", metavar="issueIdOrKey", nargs="?", type=_non_empty)
    p.add_argument("json_params", metavar="json", nargs="?", type=_non_empty)

    # --- comments ---
    p = command("add-comment", cmd_add_comment)
    p.add_argument("issue_id_or_key", metavar="issueIdOrKey", nargs="?", type=_non_empty)
    p.add_argument("content", nargs="?", type=_non_empty)

    p = command("get-comments", cmd_comments)
    p.add_argument("issue_id_or_key", metavar="issueIdOrKey", nargs="?", type=_non_empty)

    # --- notifications ---
    p = command("get-notifications", cmd_notifications)
    p.add_argument("--count", type=_positive_int, default=config.DEFAULT_NOTIFICATION_COUNT)
    command("count-notifications", cmd_count_notifications)

    return parser, sorted(sub.choices)


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

_REQUIRED_POSITIONALS = {
    "project_id_or_key": "projectIdOrKey",
    "issue_id_or_key": "issueIdOrKey",
    "json_params": "JSON params",
    "content": "content",
}


def _check_required(ns):
    """Positionals are optional to argparse so the first missing one is reported by name."""
    for dest, label in _REQUIRED_POSITIONALS.items():
        if hasattr(ns, dest) and getattr(ns, dest) is None:
            raise ValidationError(f"{label} required")


def _emit_cli_error(err):
    print(f"Error: {err}", file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    if argv is None:
        argv = sys.argv[1:]

    try:
        fmt, verbose, show_help, remaining = _extract_global_flags(argv)
        if show_help:
            print(HELP_TEXT)
            sys.exit(0)
        if verbose:
            config.HTTP_LOG_ENABLED = True
        if not remaining:
            raise ValidationError(f"No command given. {USAGE}")

        parser, commands = build_parser()
        cmd = remaining[0]
        if cmd not in commands:
            raise CliError(f"Unknown command: {cmd}")

        ns = parser.parse_args(remaining)
        ns.format = fmt  # inject global format flag
        _check_required(ns)
        ns.func(ns)

    except CliError as e:
        _emit_cli_error(e)
        sys.exit(e.exit_code)
    except Exception as e:
        _emit_cli_error(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
