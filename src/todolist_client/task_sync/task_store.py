"""Task Store: in-memory projection of server-side tasks with derived views."""

from collections.abc import Awaitable, Callable
from datetime import date, datetime
from typing import Any, TypeVar

from .config import (
    DEFAULT_CALENDAR_LIMIT,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_PAGE_OFFSET,
    DEFAULT_STRICT_DATE_VIEW,
)
from .exceptions import TaskSyncError
from .interfaces import TaskApi
from .logging_utils import TRACE_LEVEL, get_logger, log_operation
from .models import ErrorInfo, Task, TaskDraft, TaskId, TaskPage
from .validation import prepare_draft, require_token
from .views import (
    dedupe_by_id,
    matches_date,
    normalize_date,
    personal_tasks,
    same_id,
    tasks_for_date,
    without_id,
)

logger = get_logger(__name__)

T = TypeVar("T")

DateInput = str | date | datetime | None


class TaskStore:
    """
    Holds the authoritative task list and its derived views.

    The task list follows server order, with newly created tasks prepended.
    ``personal_tasks`` and ``date_indexed_tasks`` are recomputed from it on
    every read, so they stay consistent after each mutation without a refetch.

    With ``strict_date_view=False`` the date view instead behaves like a
    snapshot: it is refreshed by ``load`` and ``select_date``, prepended to by
    ``create``, and left untouched by ``update`` and ``remove``.
    """

    def __init__(
        self, api: TaskApi, strict_date_view: bool = DEFAULT_STRICT_DATE_VIEW
    ) -> None:
        """
        Initialize Task Store.

        Args:
            api: Backend collaborator used for every network call
            strict_date_view: Re-derive the date view after update/remove
        """
        self._api = api
        self._strict_date_view = strict_date_view
        self._tasks: list[Task] = []
        self._date_snapshot: list[Task] = []

        self.selected_date: str | None = None
        self.loading = False
        self.error: ErrorInfo | None = None
        self.total_elements = 0
        self.total_pages = 0

    # ---- views ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def personal_tasks(self) -> list[Task]:
        return personal_tasks(self._tasks)

    @property
    def date_indexed_tasks(self) -> list[Task]:
        if self._strict_date_view:
            return tasks_for_date(self._tasks, self.selected_date)
        return list(self._date_snapshot)

    def get(self, task_id: TaskId) -> Task | None:
        for task in self._tasks:
            if same_id(task.id, task_id):
                return task
        return None

    def tasks_by_status(self) -> dict[str, list[Task]]:
        """Personal tasks bucketed by progress: all, todo, in_progress, completed."""
        mine = self.personal_tasks
        return {
            "all": mine,
            "todo": [task for task in mine if task.progress == 0],
            "in_progress": [task for task in mine if 0 < task.progress < 100],
            "completed": [task for task in mine if task.progress == 100],
        }

    # ---- internals ----

    async def _run(
        self, operation: str, call: Callable[[], Awaitable[T]], **fields: Any
    ) -> T:
        """Run one unit of work, tracking loading/error state."""
        self.loading = True
        self.error = None
        try:
            return await call()
        except TaskSyncError as e:
            self.error = e.to_info()
            log_operation(
                logger, operation, type(e).__name__, message=e.message, **fields
            )
            raise
        finally:
            self.loading = False

    def _refresh_snapshot(self) -> None:
        self._date_snapshot = tasks_for_date(self._tasks, self.selected_date)

    def _replace_all(self, page: TaskPage) -> None:
        tasks, dropped = dedupe_by_id(page.content)
        if dropped:
            logger.warning(f"Dropped {dropped} task(s) with repeated ids from response")

        self._tasks = tasks
        self.total_elements = page.total_elements
        self.total_pages = page.total_pages
        self._refresh_snapshot()

        for task in tasks:
            logger.log(
                TRACE_LEVEL,
                f"task id={task.id!r} name={task.name!r} due={task.due_date!r} "
                f"project={task.project_name!r} progress={task.progress}",
            )

    # ---- operations ----

    async def load(
        self,
        token: str | None,
        offset: int = DEFAULT_PAGE_OFFSET,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> list[Task]:
        """
        Fetch tasks and replace the cached list wholesale.

        On failure the previous tasks stay in place and ``error`` is set.

        Args:
            token: Bearer credential
            offset: Paging offset
            limit: Page size

        Returns:
            The new task list

        Raises:
            TaskSyncError: Any precondition, request or transport failure
        """

        async def call() -> TaskPage:
            return await self._api.get_tasks(require_token(token), offset, limit)

        page = await self._run("load", call, offset=offset, limit=limit)
        self._replace_all(page)
        log_operation(
            logger,
            "load",
            "ok",
            count=len(self._tasks),
            personal=len(self.personal_tasks),
            selected_date=self.selected_date,
        )
        return self.tasks

    async def create(self, token: str | None, draft: TaskDraft) -> Task:
        """
        Create a task and prepend the canonical copy.

        The draft is validated and turned into the request body here, before
        any network call. The backend client posts that body as given.

        Args:
            token: Bearer credential
            draft: Task without an id

        Returns:
            Canonical task returned by the backend

        Raises:
            ValidationError: If the draft is missing required fields
            TaskSyncError: Any other precondition, request or transport failure
        """

        async def call() -> Task:
            body = prepare_draft(draft)
            return await self._api.create_task(require_token(token), body)

        task = await self._run("create", call)

        existed = self.get(task.id) is not None
        self._tasks = [task, *without_id(self._tasks, task.id)]
        if not existed:
            self.total_elements += 1

        if matches_date(task, self.selected_date):
            self._date_snapshot = [task, *without_id(self._date_snapshot, task.id)]

        log_operation(
            logger, "create", "ok", id=task.id, personal=task.is_personal, due=task.due_day
        )
        return task

    async def update(
        self, token: str | None, task_id: TaskId, patch: dict[str, Any]
    ) -> Task:
        """
        Apply a patch and replace the cached entry with the canonical copy.

        A task that is not cached locally is not inserted.

        Args:
            token: Bearer credential
            task_id: Id of the task to update
            patch: Full or partial set of fields

        Returns:
            Canonical task returned by the backend

        Raises:
            TaskSyncError: Any precondition, request or transport failure
        """

        async def call() -> Task:
            return await self._api.update_task(require_token(token), task_id, patch)

        updated = await self._run("update", call, id=task_id)

        replaced = False
        for index, task in enumerate(self._tasks):
            if same_id(task.id, updated.id):
                self._tasks[index] = updated
                replaced = True
                break

        if not replaced:
            logger.debug(f"Updated task {updated.id!r} is not cached; list unchanged")

        log_operation(
            logger,
            "update",
            "ok",
            id=updated.id,
            cached=replaced,
            personal=updated.is_personal,
        )
        return updated

    async def remove(self, token: str | None, task_id: TaskId) -> None:
        """
        Delete a task and drop it from the cached list.

        Raises:
            TaskSyncError: Any precondition, request or transport failure
        """

        async def call() -> None:
            await self._api.delete_task(require_token(token), task_id)

        await self._run("remove", call, id=task_id)

        self._tasks = without_id(self._tasks, task_id)
        self.total_elements = max(0, self.total_elements - 1)

        log_operation(logger, "remove", "ok", id=task_id, count=len(self._tasks))

    def select_date(self, value: DateInput) -> list[Task]:
        """
        Select a calendar day and recompute the date view.

        Args:
            value: Day as ``YYYY-MM-DD``, ISO date-time, date or datetime;
                empty/None clears the selection

        Returns:
            Tasks due on the selected day
        """
        self.selected_date = normalize_date(value)
        self._refresh_snapshot()
        logger.debug(
            f"Selected date {self.selected_date!r}: "
            f"{len(self.date_indexed_tasks)} task(s)"
        )
        return self.date_indexed_tasks

    async def load_for_date(
        self,
        token: str | None,
        value: DateInput,
        offset: int = DEFAULT_PAGE_OFFSET,
        limit: int = DEFAULT_CALENDAR_LIMIT,
    ) -> list[Task]:
        """
        Select a day, fetching tasks first if nothing is cached yet.

        Returns:
            Tasks due on the selected day

        Raises:
            TaskSyncError: If the fetch was needed and failed
        """
        if not self._tasks:
            await self.load(token, offset=offset, limit=limit)
        return self.select_date(value)

    def clear_error(self) -> None:
        self.error = None

    def clear(self) -> None:
        """Forget all cached tasks and paging totals (keeps the selected date)."""
        self._tasks = []
        self._date_snapshot = []
        self.total_elements = 0
        self.total_pages = 0
        logger.debug("Task store cleared")

    def to_dict(self) -> dict[str, Any]:
        """Plain snapshot of the store for rendering."""
        return {
            "tasks": [task.to_api() for task in self._tasks],
            "personalTasks": [task.to_api() for task in self.personal_tasks],
            "dateIndexedTasks": [task.to_api() for task in self.date_indexed_tasks],
            "selectedDate": self.selected_date,
            "loading": self.loading,
            "error": self.error.to_dict() if self.error else None,
            "totalElements": self.total_elements,
            "totalPages": self.total_pages,
        }
