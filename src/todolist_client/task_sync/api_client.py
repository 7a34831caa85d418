"""HTTP client for the task backend using httpx."""

import logging
from typing import Any

import httpx

from .config import (
    BACKEND_PROBE_OK_STATUSES,
    BACKEND_PROBE_PATH,
    DEFAULT_API_BASE_URL,
    DEFAULT_HTTP_TIMEOUT,
    TASKS_PATH,
)
from .exceptions import RequestError, TransportError
from .interfaces import TaskApi
from .models import Task, TaskId, TaskPage, patch_to_api
from .validation import require_token

logger = logging.getLogger(__name__)

CONNECTION_MESSAGE = "Connection error"
CONNECTION_DETAILS = (
    "Could not reach the server. Please check:\n"
    "• Your network connection\n"
    "• That the backend is running"
)

# operation -> (fallback failure message, verb used in permission errors)
_OPERATIONS = {
    "load": ("Could not load tasks", "view"),
    "create": ("Could not create task", "create"),
    "update": ("Could not update task", "update"),
    "remove": ("Could not delete task", "delete"),
}


def _read_error_body(response: httpx.Response) -> tuple[str, str | None, str | None]:
    """
    Extract (message, details, code) from an error response.

    JSON bodies are preferred; plain-text bodies become the message.
    """
    try:
        data = response.json()
    except ValueError:
        return response.text.strip(), None, None

    if not isinstance(data, dict):
        return str(data).strip(), None, None

    code = data.get("code")
    message = data.get("message") or code or ""
    details = data.get("details")
    return (
        str(message).strip(),
        str(details) if details else None,
        str(code) if code is not None else None,
    )


def translate_error(response: httpx.Response, operation: str) -> RequestError:
    """
    Map a non-success response to a RequestError with a readable message.

    Args:
        response: The failed response
        operation: Store operation name (load, create, update, remove)

    Returns:
        RequestError carrying message, details and status code
    """
    fallback, verb = _OPERATIONS.get(operation, ("Request failed", "access"))
    backend_message, backend_details, code = _read_error_body(response)

    status = response.status_code
    if code in {"400", "401", "403", "404", "500"}:
        status = int(code)

    if status == 401:
        message, details = "Session expired", "Please sign in again."
    elif status == 403:
        message = "Not allowed"
        details = f"You do not have permission to {verb} this task."
    elif status == 404:
        message = "Task not found" if operation in ("update", "remove") else "Not found"
        details = (
            "This task may already have been deleted."
            if operation == "remove"
            else "The task, user or project could not be found."
        )
    elif status == 500:
        message = "Server error"
        details = "Something went wrong on the server. Please try again later."
    elif status == 400:
        message = backend_message or "Invalid input data"
        details = backend_details or "Please check the information you entered."
    else:
        message = backend_message or f"{fallback} ({response.status_code})"
        details = backend_details

    return RequestError(message, details, status_code=response.status_code)


class TaskApiClient(TaskApi):
    """Async client for the task REST backend."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Backend API root, e.g. http://localhost:8000/ba-todolist/api
            timeout: Transport timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url + "/",
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    @staticmethod
    def _auth_headers(token: str | None) -> dict[str, str]:
        return {"Authorization": f"Bearer {require_token(token)}"}

    async def _send(
        self,
        method: str,
        path: str,
        operation: str,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"{method} {path} failed to reach backend: {e}")
            raise TransportError(CONNECTION_MESSAGE, CONNECTION_DETAILS) from e
        except httpx.RequestError as e:
            # Reached the backend but the response could not be read
            logger.error(f"{method} {path} returned an unreadable response: {e}")
            raise RequestError(
                "Unexpected response from server",
                "The server returned data that could not be read.",
            ) from e

        logger.debug(f"{method} {path} -> {response.status_code}")

        if not response.is_success:
            raise translate_error(response, operation)
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RequestError(
                "Unexpected response from server",
                "The server returned data that could not be read.",
                status_code=response.status_code,
            ) from e

    def _decode_task(self, response: httpx.Response) -> Task:
        data = self._decode(response)
        try:
            return Task.from_api(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise RequestError(
                "Unexpected response from server",
                f"Task payload could not be read: {e}",
                status_code=response.status_code,
            ) from e

    async def get_tasks(self, token: str | None, offset: int, limit: int) -> TaskPage:
        headers = self._auth_headers(token)
        response = await self._send(
            "GET",
            TASKS_PATH,
            "load",
            headers=headers,
            params={"offset": offset, "limit": limit},
        )
        data = self._decode(response)
        try:
            if isinstance(data, list):
                return TaskPage(content=[Task.from_api(item) for item in data])
            return TaskPage.from_api(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise RequestError(
                "Unexpected response from server",
                f"Task page could not be read: {e}",
                status_code=response.status_code,
            ) from e

    async def create_task(self, token: str | None, body: dict[str, Any]) -> Task:
        headers = self._auth_headers(token)
        response = await self._send(
            "POST", TASKS_PATH, "create", headers=headers, json=body
        )
        return self._decode_task(response)

    async def update_task(
        self, token: str | None, task_id: TaskId, patch: dict[str, Any]
    ) -> Task:
        headers = self._auth_headers(token)
        response = await self._send(
            "PUT",
            f"{TASKS_PATH}/{task_id}",
            "update",
            headers=headers,
            json=patch_to_api(patch),
        )
        return self._decode_task(response)

    async def delete_task(self, token: str | None, task_id: TaskId) -> None:
        headers = self._auth_headers(token)
        await self._send("DELETE", f"{TASKS_PATH}/{task_id}", "remove", headers=headers)

    async def check_backend(self) -> bool:
        """
        Probe whether the backend is up.

        Posts an empty login request; a 200 or 400 answer means the
        backend is running.

        Returns:
            True if the backend answered as expected, False otherwise
        """
        try:
            response = await self._client.post(BACKEND_PROBE_PATH, json={})
        except httpx.RequestError as e:
            logger.warning(f"Backend probe failed: {e}")
            return False

        logger.info(
            f"Backend probe {self.base_url}/{BACKEND_PROBE_PATH} -> {response.status_code}"
        )
        return response.status_code in BACKEND_PROBE_OK_STATUSES
