"""MCP Server exposing the task store using FastMCP."""

import logging
from typing import Any

from fastmcp import FastMCP

from .api_client import TaskApiClient
from .config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_API_TOKEN,
    DEFAULT_MCP_HOST,
    DEFAULT_MCP_PORT,
    DEFAULT_MCP_SERVER_NAME,
)
from .exceptions import TaskSyncError
from .models import Task, TaskDraft, TaskId
from .statistics import group_by_project, in_progress_preview, today_summary
from .task_store import TaskStore

logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(DEFAULT_MCP_SERVER_NAME)

# Wiring point for the tools below (set in cli_entry() or by MCPServer)
_task_store: TaskStore | None = None
_token: str | None = None


def get_task_store() -> TaskStore:
    """Get the task store the tools operate on."""
    if _task_store is None:
        raise RuntimeError("Task store not initialized")
    return _task_store


def set_task_store(task_store: TaskStore, token: str | None) -> None:
    """Set the task store and the bearer token used by the tools."""
    global _task_store, _token
    _task_store = task_store
    _token = token


def resolve_task_id(store: TaskStore, raw: TaskId) -> TaskId:
    """
    Map an id received from a tool call onto the cached task's own id.

    Ids are opaque, so an uncached id is passed through unchanged.
    """
    if isinstance(raw, str):
        raw = raw.strip()
    cached = store.get(raw)
    return cached.id if cached is not None else raw


def _task_to_dict(task: Task) -> dict[str, Any]:
    data = task.to_api()
    data["displayStatus"] = task.display_status
    return data


def _error_payload(error: TaskSyncError) -> dict[str, Any]:
    return {"success": False, "error": error.message, "details": error.details}


async def _list_tasks_impl(
    view: str = "all", date: str | None = None, refresh: bool = False
) -> dict[str, Any]:
    """Implementation of list_tasks tool."""
    store = get_task_store()

    if view not in ("all", "personal", "date"):
        return {"success": False, "error": f"Invalid view: {view}"}

    try:
        if refresh or not store.tasks:
            await store.load(_token)
    except TaskSyncError as e:
        logger.error(f"Error loading tasks: {e.message}")
        return _error_payload(e)

    if date is not None:
        store.select_date(date)

    if view == "personal":
        tasks = store.personal_tasks
    elif view == "date":
        tasks = store.date_indexed_tasks
    else:
        tasks = store.tasks

    return {
        "success": True,
        "tasks": [_task_to_dict(task) for task in tasks],
        "selected_date": store.selected_date,
        "total_elements": store.total_elements,
    }


async def _add_task_impl(
    name: str,
    assigned_to: str,
    description: str | None = None,
    project_name: str | None = None,
    due_date: str | None = None,
    priority: str | None = None,
) -> dict[str, Any]:
    """Implementation of add_task tool."""
    store = get_task_store()
    draft = TaskDraft(
        name=name,
        assigned_to=assigned_to,
        description=description,
        project_name=project_name,
        due_date=due_date,
        priority=priority,
    )
    try:
        task = await store.create(_token, draft)
    except TaskSyncError as e:
        logger.error(f"Error adding task: {e.message}")
        return _error_payload(e)

    return {"success": True, "task": _task_to_dict(task)}


async def _update_task_impl(task_id: TaskId, fields: dict[str, Any]) -> dict[str, Any]:
    """Implementation of update_task tool."""
    store = get_task_store()
    if not fields:
        return {"success": False, "error": "No fields to update"}

    try:
        task = await store.update(_token, resolve_task_id(store, task_id), fields)
    except TaskSyncError as e:
        logger.error(f"Error updating task {task_id}: {e.message}")
        return _error_payload(e)

    return {"success": True, "task": _task_to_dict(task)}


async def _delete_task_impl(task_id: TaskId) -> dict[str, Any]:
    """Implementation of delete_task tool."""
    store = get_task_store()
    try:
        await store.remove(_token, resolve_task_id(store, task_id))
    except TaskSyncError as e:
        logger.warning(f"Error deleting task {task_id}: {e.message}")
        return _error_payload(e)

    return {"success": True}


async def _select_date_impl(date: str | None) -> dict[str, Any]:
    """Implementation of select_date tool."""
    store = get_task_store()
    tasks = store.select_date(date)
    return {
        "success": True,
        "selected_date": store.selected_date,
        "tasks": [_task_to_dict(task) for task in tasks],
    }


async def _get_dashboard_impl(today: str | None = None) -> dict[str, Any]:
    """Implementation of get_dashboard tool."""
    store = get_task_store()
    tasks = store.tasks
    summary = today_summary(tasks, today)
    return {
        "success": True,
        "today": {
            "date": summary.date,
            "total": summary.total,
            "completed": summary.completed,
            "percentage": summary.percentage,
        },
        "in_progress": [
            {
                "id": card.task.id,
                "name": card.task.name,
                "progress": card.task.progress,
                "color": card.color,
                "icon": card.icon,
            }
            for card in in_progress_preview(tasks)
        ],
        "projects": [
            {
                "name": group.name,
                "total": group.total,
                "completed": group.completed,
                "percentage": group.percentage,
                "color": group.color,
                "icon": group.icon,
            }
            for group in group_by_project(tasks)
        ],
        "by_status": {
            bucket: len(members) for bucket, members in store.tasks_by_status().items()
        },
    }


# FastMCP decorated wrappers (for actual MCP server)
@mcp.tool()
async def list_tasks(
    view: str = "all", date: str | None = None, refresh: bool = False
) -> dict[str, Any]:
    """
    List cached tasks, loading them from the backend on first use.

    Args:
        view: "all", "personal" (no project) or "date" (due on the selected day)
        date: Optional day (YYYY-MM-DD) to select before listing
        refresh: Reload from the backend even if tasks are cached

    Returns:
        Dictionary with tasks list
    """
    return await _list_tasks_impl(view=view, date=date, refresh=refresh)


@mcp.tool()
async def add_task(
    name: str,
    assigned_to: str,
    description: str | None = None,
    project_name: str | None = None,
    due_date: str | None = None,
    priority: str | None = None,
) -> dict[str, Any]:
    """
    Create a task. Leave project_name empty for a personal task.

    Args:
        name: Task name (required)
        assigned_to: Assignee username (required)
        description: Optional description
        project_name: Optional project name
        due_date: Due date in YYYY-MM-DD format (optional)
        priority: low, medium or high (invalid values use the server default)

    Returns:
        Dictionary with the created task and success status
    """
    return await _add_task_impl(
        name=name,
        assigned_to=assigned_to,
        description=description,
        project_name=project_name,
        due_date=due_date,
        priority=priority,
    )


@mcp.tool()
async def update_task(task_id: str, fields: dict[str, Any]) -> dict[str, Any]:
    """
    Update fields of a task (e.g. progress, projectName, dueDate).

    Args:
        task_id: Task id
        fields: Fields to change

    Returns:
        Dictionary with the canonical task and success status
    """
    return await _update_task_impl(task_id=task_id, fields=fields)


@mcp.tool()
async def delete_task(task_id: str) -> dict[str, Any]:
    """
    Delete a task.

    Args:
        task_id: Task id

    Returns:
        Dictionary with success status
    """
    return await _delete_task_impl(task_id=task_id)


@mcp.tool()
async def select_date(date: str | None = None) -> dict[str, Any]:
    """
    Select a calendar day and return the tasks due on it.

    Args:
        date: Day in YYYY-MM-DD format; empty clears the selection

    Returns:
        Dictionary with the selected date and its tasks
    """
    return await _select_date_impl(date=date)


@mcp.tool()
async def get_dashboard(today: str | None = None) -> dict[str, Any]:
    """
    Get dashboard statistics for the cached tasks.

    Args:
        today: Day to treat as today (defaults to the current date)

    Returns:
        Today's summary, in-progress preview and per-project groups
    """
    return await _get_dashboard_impl(today=today)


# Compatibility wrapper for tests
class MCPServer:
    """
    Compatibility wrapper for testing.

    The actual MCP server uses FastMCP with function decorators.
    This class provides a plain interface over the same implementations.
    """

    def __init__(
        self,
        task_store: TaskStore,
        token: str | None = None,
        server_name: str = DEFAULT_MCP_SERVER_NAME,
        host: str = DEFAULT_MCP_HOST,
        port: int = DEFAULT_MCP_PORT,
    ) -> None:
        """Initialize MCP Server wrapper."""
        self._task_store = task_store
        self._token = token
        self._server_name = server_name
        self._host = host
        self._port = port
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the server."""
        set_task_store(self._task_store, self._token)
        self._initialized = True

    async def shutdown(self) -> None:
        """Shutdown the server."""
        self._initialized = False

    def get_available_tools(self) -> list[str]:
        """Get list of available tools."""
        return [
            "list_tasks",
            "add_task",
            "update_task",
            "delete_task",
            "select_date",
            "get_dashboard",
        ]

    async def handle_list_tasks(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle list_tasks request."""
        return await _list_tasks_impl(
            view=params.get("view", "all"),
            date=params.get("date"),
            refresh=bool(params.get("refresh", False)),
        )

    async def handle_add_task(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle add_task request."""
        for required in ("name", "assigned_to"):
            if required not in params:
                return {"success": False, "error": f"Missing required field: {required}"}
        return await _add_task_impl(
            name=params["name"],
            assigned_to=params["assigned_to"],
            description=params.get("description"),
            project_name=params.get("project_name"),
            due_date=params.get("due_date"),
            priority=params.get("priority"),
        )

    async def handle_update_task(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle update_task request."""
        if "task_id" not in params:
            return {"success": False, "error": "Missing required field: task_id"}
        return await _update_task_impl(
            task_id=params["task_id"], fields=params.get("fields") or {}
        )

    async def handle_delete_task(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle delete_task request."""
        if "task_id" not in params:
            return {"success": False, "error": "Missing required field: task_id"}
        return await _delete_task_impl(task_id=params["task_id"])

    async def handle_select_date(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle select_date request."""
        return await _select_date_impl(date=params.get("date"))

    async def handle_get_dashboard(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle get_dashboard request."""
        return await _get_dashboard_impl(today=params.get("today"))


def cli_entry() -> None:
    """CLI entry point for the MCP server."""
    import sys

    logging.basicConfig(
        level="INFO", format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Check for transport argument
    transport_type = "stdio"
    if len(sys.argv) > 1 and sys.argv[1] in ("stdio", "sse", "http"):
        transport_type = "sse" if sys.argv[1] == "http" else sys.argv[1]

    if not DEFAULT_API_TOKEN:
        logger.warning("TODOLIST_API_TOKEN is not set; backend calls will be rejected")

    store = TaskStore(TaskApiClient(DEFAULT_API_BASE_URL))
    set_task_store(store, DEFAULT_API_TOKEN)
    logger.info(
        f"MCP Server initialized with 6 tools for {DEFAULT_API_BASE_URL} "
        f"(transport={transport_type})"
    )

    # FastMCP's run() manages its own event loop
    if transport_type == "stdio":
        mcp.run(transport="stdio")
    else:
        logger.info(f"Server will listen on http://{DEFAULT_MCP_HOST}:{DEFAULT_MCP_PORT}")
        mcp.run(transport="sse", host=DEFAULT_MCP_HOST, port=DEFAULT_MCP_PORT)


if __name__ == "__main__":
    cli_entry()
