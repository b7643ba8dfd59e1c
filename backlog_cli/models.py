"""
Typed parameter records for issue search, creation, and update.
"""

from dataclasses import dataclass, field, fields

from backlog_cli.exceptions import InvalidJsonError, ValidationError


@dataclass(frozen=True)
class ObjectPayload:
    """Typed wrapper for raw JSON object payloads."""

    data: dict

    @classmethod
    def from_value(cls, value, context):
        if isinstance(value, dict):
            return cls(data=value)
        raise InvalidJsonError(
            f"Invalid JSON in {context}: expected object, got {type(value).__name__}."
        )


def _take_int(data, key, context, required=False):
    value = data.get(key)
    if value is None:
        if required:
            raise InvalidJsonError(f"Invalid JSON in {context}: '{key}' is required.")
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidJsonError(
            f"Invalid JSON in {context}: '{key}' must be an integer, "
            f"got {type(value).__name__}."
        )
    return value


def _take_str(data, key, context, required=False):
    value = data.get(key)
    if value is None:
        if required:
            raise InvalidJsonError(f"Invalid JSON in {context}: '{key}' is required.")
        return None
    if not isinstance(value, str):
        raise InvalidJsonError(
            f"Invalid JSON in {context}: '{key}' must be a string, got {type(value).__name__}."
        )
    return value


def _present(record):
    """Field name → value for every field that is set, in declaration order."""
    out = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if value is not None:
            out[f.metadata.get("wire", f.name)] = value
    return out


@dataclass(frozen=True)
class IssueSearch:
    """Filters for GET /issues. Id lists go out as repeated ``name[]`` params."""

    project_ids: list[int] = field(default_factory=list, metadata={"wire": "projectId"})
    issue_type_ids: list[int] = field(default_factory=list, metadata={"wire": "issueTypeId"})
    status_ids: list[int] = field(default_factory=list, metadata={"wire": "statusId"})
    priority_ids: list[int] = field(default_factory=list, metadata={"wire": "priorityId"})
    assignee_ids: list[int] = field(default_factory=list, metadata={"wire": "assigneeId"})
    keyword: str | None = None
    count: int | None = None
    offset: int | None = None
    sort: str | None = None
    order: str | None = None

    def __post_init__(self):
        if self.order is not None and self.order not in ("asc", "desc"):
            raise ValidationError(f"Invalid order '{self.order}'. Use: asc, desc")

    def to_params(self):
        return _present(self)


@dataclass(frozen=True)
class CreateIssueParams:
    """Validated input for POST /issues."""

    projectId: int
    summary: str
    issueTypeId: int
    priorityId: int
    description: str | None = None
    assigneeId: int | None = None
    dueDate: str | None = None
    startDate: str | None = None

    @classmethod
    def from_payload(cls, value, context="create-issue"):
        data = ObjectPayload.from_value(value, context).data
        return cls(
            projectId=_take_int(data, "projectId", context, required=True),
            summary=_take_str(data, "summary", context, required=True),
            issueTypeId=_take_int(data, "issueTypeId", context, required=True),
            priorityId=_take_int(data, "priorityId", context, required=True),
            description=_take_str(data, "description", context),
            assigneeId=_take_int(data, "assigneeId", context),
            dueDate=_take_str(data, "dueDate", context),
            startDate=_take_str(data, "startDate", context),
        )

    def to_form(self):
        return _present(self)


@dataclass(frozen=True)
class UpdateIssueParams:
    """Validated input for PATCH /issues/{idOrKey}. At least one field must be set."""

    summary: str | None = None
    description: str | None = None
    statusId: int | None = None
    priorityId: int | None = None
    assigneeId: int | None = None
    dueDate: str | None = None
    comment: str | None = None

    def __post_init__(self):
        if not _present(self):
            names = ", ".join(f.name for f in fields(self))
            raise ValidationError(f"update-issue needs at least one of: {names}")

    @classmethod
    def from_payload(cls, value, context="update-issue"):
        data = ObjectPayload.from_value(value, context).data
        return cls(
            summary=_take_str(data, "summary", context),
            description=_take_str(data, "description", context),
            statusId=_take_int(data, "statusId", context),
            priorityId=_take_int(data, "priorityId", context),
            assigneeId=_take_int(data, "assigneeId", context),
            dueDate=_take_str(data, "dueDate", context),
            comment=_take_str(data, "comment", context),
        )

    def to_form(self):
        return _present(self)
