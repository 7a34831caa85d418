"""Abstract interfaces for the task synchronization layer."""

from abc import ABC, abstractmethod
from typing import Any

from todolist_client.task_sync.models import Task, TaskId, TaskPage


class TaskApi(ABC):
    """Abstract interface for the task backend collaborator."""

    @abstractmethod
    async def get_tasks(self, token: str | None, offset: int, limit: int) -> TaskPage:
        """
        Fetch one page of tasks.

        Args:
            token: Bearer credential
            offset: Paging offset
            limit: Page size

        Returns:
            TaskPage with the content and paging totals

        Raises:
            PreconditionError: If the token is missing
            RequestError: If the backend rejects the request
            TransportError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def create_task(self, token: str | None, body: dict[str, Any]) -> Task:
        """
        Create a task and return the canonical copy.

        Args:
            token: Bearer credential
            body: Request body built by ``validation.prepare_draft``

        Raises:
            RequestError: If the backend rejects the request
            TransportError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def update_task(
        self, token: str | None, task_id: TaskId, patch: dict[str, Any]
    ) -> Task:
        """Apply a full or partial patch and return the canonical copy."""
        pass

    @abstractmethod
    async def delete_task(self, token: str | None, task_id: TaskId) -> None:
        """Delete a task. No body is expected on success."""
        pass
