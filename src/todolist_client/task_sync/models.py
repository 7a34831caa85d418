"""Data models for task synchronization functionality."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

TaskId = int | str

# Python attribute name -> backend (camelCase) field name
_WIRE_NAMES = {
    "project_id": "projectId",
    "project_name": "projectName",
    "assigned_to": "assignedTo",
    "assignee_id": "assigneeId",
    "due_date": "dueDate",
}

_KNOWN_FIELDS = {
    "id",
    "name",
    "description",
    "projectId",
    "projectName",
    "assignedTo",
    "assigneeId",
    "dueDate",
    "due_date",
    "due",
    "priority",
    "progress",
    "status",
}


class TaskPriority(str, Enum):
    """Task priority enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Any) -> "TaskPriority | None":
        """Parse a loosely formatted priority, returning None when invalid."""
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


def date_component(value: Any) -> str | None:
    """
    Return the ``YYYY-MM-DD`` part of a date or date-time value.

    Time-of-day and timezone offset are ignored. Empty values yield None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not text:
        return None
    return text.split("T", 1)[0].split(" ", 1)[0]


@dataclass
class ErrorInfo:
    """Structured error surfaced to the presentation layer."""

    message: str
    details: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"message": self.message, "details": self.details}


@dataclass
class Task:
    """Represents a task as returned by the backend."""

    id: TaskId
    name: str
    assigned_to: str = ""
    description: str | None = None
    project_id: TaskId | None = None
    project_name: str | None = None
    due_date: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    progress: int = 0
    status: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_personal(self) -> bool:
        """A task is personal iff it has no project name."""
        return not self.project_name

    @property
    def is_completed(self) -> bool:
        return self.progress == 100

    @property
    def due_day(self) -> str | None:
        return date_component(self.due_date)

    @property
    def display_status(self) -> str:
        """Label shown in task lists, derived from progress."""
        if self.progress == 100:
            return "Completed"
        if self.progress > 0:
            return "In Progress"
        return "To Do"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Task":
        """
        Build a Task from a backend JSON object.

        Args:
            data: Decoded JSON object (camelCase keys)

        Returns:
            Task instance

        Raises:
            ValueError: If the object has no id
        """
        if data.get("id") is None:
            raise ValueError("Task payload has no id")

        due = data.get("dueDate") or data.get("due_date") or data.get("due") or None

        try:
            progress = int(data.get("progress") or 0)
        except (TypeError, ValueError):
            progress = 0

        return cls(
            id=data["id"],
            name=str(data.get("name") or ""),
            assigned_to=str(data.get("assignedTo") or ""),
            description=data.get("description") or None,
            project_id=data.get("projectId"),
            project_name=data.get("projectName"),
            due_date=due,
            priority=TaskPriority.parse(data.get("priority")) or TaskPriority.MEDIUM,
            progress=max(0, min(100, progress)),
            status=data.get("status"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_FIELDS},
        )

    def to_api(self) -> dict[str, Any]:
        """Serialize back to the backend's camelCase representation."""
        payload: dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "id": self.id,
                "name": self.name,
                "description": self.description,
                "projectId": self.project_id,
                "projectName": self.project_name,
                "assignedTo": self.assigned_to,
                "dueDate": self.due_date,
                "priority": self.priority.value,
                "progress": self.progress,
                "status": self.status,
            }
        )
        return payload


@dataclass
class TaskDraft:
    """A task that has not been created yet (no server-assigned id)."""

    name: str
    assigned_to: str | None = None
    assignee_id: TaskId | None = None
    description: str | None = None
    project_id: TaskId | None = None
    project_name: str | None = None
    due_date: str | None = None
    priority: str | TaskPriority | None = None


@dataclass
class TaskPage:
    """One page of tasks from the paging endpoint."""

    content: list[Task]
    total_elements: int = 0
    total_pages: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "TaskPage":
        content = [Task.from_api(item) for item in data.get("content") or []]
        return cls(
            content=content,
            total_elements=int(data.get("totalElements") or 0),
            total_pages=int(data.get("totalPages") or 0),
        )


def patch_to_api(patch: dict[str, Any]) -> dict[str, Any]:
    """
    Convert an update patch to backend field names.

    Accepts both snake_case attribute names and camelCase wire names;
    enum values are unwrapped.
    """
    body: dict[str, Any] = {}
    for key, value in patch.items():
        wire_key = _WIRE_NAMES.get(key, key)
        if isinstance(value, Enum):
            value = value.value
        body[wire_key] = value
    return body
