"""Table formatters for issues, projects, users, comments, and notifications."""

from backlog_cli.formatters._table import _table, _trunc


def _name(obj):
    """Display name of a nested {id, name} object, or '-'."""
    if isinstance(obj, dict):
        return obj.get("name") or "-"
    return "-"


def _one_line(text):
    return " ".join((text or "").split())


def format_issues_table(issues):
    """Format issues as a readable table.

    Accepts the list returned by BacklogClient.search_issues().
    """
    if not issues:
        return "No issues found."
    cols = [("Key", 14), ("Status", 12), ("Priority", 9), ("Assignee", 16), ("Summary", 0)]
    rows = []
    for issue in issues:
        rows.append(
            (
                issue.get("issueKey", ""),
                _trunc(_name(issue.get("status")), 12),
                _trunc(_name(issue.get("priority")), 9),
                _trunc(_name(issue.get("assignee")), 16),
                _trunc(issue.get("summary", ""), 60),
            )
        )
    return _table(cols, rows, f"Total: {len(issues)} issues")


def format_projects_table(projects):
    if not projects:
        return "No projects found."
    cols = [("ID", 10), ("Key", 16), ("Name", 0)]
    rows = [(str(p.get("id", "")), p.get("projectKey", ""), p.get("name", "")) for p in projects]
    return _table(cols, rows, f"Total: {len(projects)} projects")


def format_users_table(users):
    if not users:
        return "No users found."
    cols = [("ID", 10), ("Login", 20), ("Name", 24), ("Email", 0)]
    rows = []
    for u in users:
        rows.append(
            (
                str(u.get("id", "")),
                _trunc(u.get("userId") or "", 20),
                _trunc(u.get("name", ""), 24),
                u.get("mailAddress") or "",
            )
        )
    return _table(cols, rows, f"Total: {len(users)} users")


def format_comments_table(comments):
    """Format issue comments, oldest first as the service returns them."""
    if not comments:
        return "No comments found."
    cols = [("ID", 10), ("Author", 16), ("Created", 21), ("Content", 0)]
    rows = []
    for c in comments:
        rows.append(
            (
                str(c.get("id", "")),
                _trunc(_name(c.get("createdUser")), 16),
                c.get("created", ""),
                _trunc(_one_line(c.get("content")), 60),
            )
        )
    return _table(cols, rows, f"Total: {len(comments)} comments")


def format_notifications_table(notifications):
    if not notifications:
        return "No notifications."
    cols = [("ID", 10), ("Read", 5), ("Issue", 14), ("From", 16), ("Summary", 0)]
    rows = []
    for n in notifications:
        issue = n.get("issue") or {}
        rows.append(
            (
                str(n.get("id", "")),
                "yes" if n.get("alreadyRead") else "no",
                issue.get("issueKey", "-"),
                _trunc(_name(n.get("sender")), 16),
                _trunc(issue.get("summary", ""), 50),
            )
        )
    return _table(cols, rows, f"Total: {len(notifications)} notifications")
