"""Task synchronization module: cached task list kept in step with the backend."""

from .api_client import TaskApiClient
from .exceptions import (
    PreconditionError,
    RequestError,
    TaskSyncError,
    TransportError,
    ValidationError,
)
from .models import ErrorInfo, Task, TaskDraft, TaskPage, TaskPriority
from .task_store import TaskStore

__all__ = [
    "Task",
    "TaskDraft",
    "TaskPage",
    "TaskPriority",
    "ErrorInfo",
    "TaskStore",
    "TaskApiClient",
    "TaskSyncError",
    "PreconditionError",
    "ValidationError",
    "RequestError",
    "TransportError",
]
