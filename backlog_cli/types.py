"""Typed response definitions for BacklogClient methods.

These TypedDicts document the shape of the JSON the service returns.
They are optional; runtime behavior is unchanged (plain dicts and lists).
Only the commonly used keys are listed; the service sends more.
"""

from __future__ import annotations

from typing import TypedDict


class IdName(TypedDict):
    id: int
    name: str


class User(TypedDict, total=False):
    """Return type of get_myself() and items of list_users()."""

    id: int
    userId: str
    name: str
    roleType: int
    mailAddress: str


class Project(TypedDict, total=False):
    """Return type of get_project() and items of list_projects()."""

    id: int
    projectKey: str
    name: str
    archived: bool


class Issue(TypedDict, total=False):
    """Return type of get_issue(), create_issue(), update_issue()."""

    id: int
    projectId: int
    issueKey: str
    summary: str
    description: str | None
    status: IdName
    priority: IdName
    assignee: User | None
    createdUser: User
    created: str
    updated: str
    dueDate: str | None
    startDate: str | None


class Comment(TypedDict, total=False):
    """Return type of add_comment() and items of list_comments()."""

    id: int
    content: str
    createdUser: User
    created: str
    updated: str


class Notification(TypedDict, total=False):
    """Items of list_notifications()."""

    id: int
    alreadyRead: bool
    reason: int
    issue: Issue
    comment: Comment
    sender: User
    created: str


class NotificationCount(TypedDict):
    """Return type of count_notifications()."""

    count: int
