"""Unit tests for the httpx task backend client."""

import json
from collections.abc import Callable

import httpx
import pytest

from todolist_client.task_sync.api_client import TaskApiClient, translate_error
from todolist_client.task_sync.exceptions import (
    PreconditionError,
    RequestError,
    TransportError,
    ValidationError,
)
from todolist_client.task_sync.models import TaskDraft, TaskPriority
from todolist_client.task_sync.task_store import TaskStore
from todolist_client.task_sync.validation import prepare_draft

BASE_URL = "http://backend.test/ba-todolist/api"


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> tuple[TaskApiClient, list[httpx.Request]]:
    """Create a client whose requests are answered by ``handler``."""
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = TaskApiClient(BASE_URL, transport=httpx.MockTransport(record))
    return client, seen


def task_json(task_id: int, **kwargs) -> dict:
    data = {"id": task_id, "name": f"Task {task_id}", "assignedTo": "alice"}
    data.update(kwargs)
    return data


@pytest.mark.unit
@pytest.mark.asyncio
class TestRequests:
    """Test the REST contract of each call."""

    async def test_get_tasks_page(self) -> None:
        """Test GET tasks with paging params and bearer auth."""
        client, seen = make_client(
            lambda request: httpx.Response(
                200,
                json={
                    "content": [task_json(1), task_json(2)],
                    "totalElements": 2,
                    "totalPages": 1,
                },
            )
        )

        async with client:
            page = await client.get_tasks("tok", 0, 100)

        assert [task.id for task in page.content] == [1, 2]
        assert page.total_elements == 2
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/ba-todolist/api/tasks"
        assert request.url.params["offset"] == "0"
        assert request.url.params["limit"] == "100"
        assert request.headers["Authorization"] == "Bearer tok"

    async def test_get_tasks_plain_list(self) -> None:
        """Test a bare JSON array is accepted as the task list."""
        client, _ = make_client(
            lambda request: httpx.Response(200, json=[task_json(3)])
        )

        async with client:
            page = await client.get_tasks("tok", 0, 10)

        assert [task.id for task in page.content] == [3]

    async def test_create_task_posts_normalized_body(self) -> None:
        """Test POST tasks sends the prepared body."""
        client, seen = make_client(
            lambda request: httpx.Response(201, json=task_json(9, projectName=""))
        )
        draft = TaskDraft(
            name="  Buy milk ",
            assigned_to="alice",
            description="",
            priority="urgent",
            due_date="2024-05-01",
        )

        async with client:
            task = await client.create_task("tok", prepare_draft(draft))

        assert task.id == 9
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/ba-todolist/api/tasks"
        body = json.loads(request.content)
        assert body["name"] == "Buy milk"
        assert body["projectName"] == ""
        assert body["dueDate"] == "2024-05-01"
        assert "description" not in body
        assert "priority" not in body

    async def test_update_task_puts_patch(self) -> None:
        client, seen = make_client(
            lambda request: httpx.Response(200, json=task_json(5, progress=100))
        )

        async with client:
            task = await client.update_task("tok", 5, {"progress": 100})

        assert task.progress == 100
        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/ba-todolist/api/tasks/5"
        assert json.loads(seen[0].content) == {"progress": 100}

    async def test_delete_task(self) -> None:
        client, seen = make_client(lambda request: httpx.Response(204))

        async with client:
            result = await client.delete_task("tok", 5)

        assert result is None
        assert seen[0].method == "DELETE"
        assert seen[0].url.path == "/ba-todolist/api/tasks/5"


@pytest.mark.unit
@pytest.mark.asyncio
class TestPreconditions:
    """Test checks that must fail before any network call."""

    @pytest.mark.parametrize("token", [None, "", "   "])
    async def test_missing_token_makes_no_request(self, token) -> None:
        client, seen = make_client(lambda request: httpx.Response(200, json=[]))

        async with client:
            with pytest.raises(PreconditionError) as exc_info:
                await client.get_tasks(token, 0, 10)

        assert exc_info.value.message == "Not signed in"
        assert seen == []


@pytest.mark.unit
@pytest.mark.asyncio
class TestErrorTranslation:
    """Test mapping of failures to structured errors."""

    @pytest.mark.parametrize(
        "status, message",
        [
            (401, "Session expired"),
            (403, "Not allowed"),
            (404, "Not found"),
            (500, "Server error"),
        ],
    )
    async def test_status_mapping(self, status, message) -> None:
        client, _ = make_client(lambda request: httpx.Response(status, json={}))

        async with client:
            with pytest.raises(RequestError) as exc_info:
                await client.get_tasks("tok", 0, 10)

        assert exc_info.value.message == message
        assert exc_info.value.status_code == status
        assert exc_info.value.details

    async def test_400_keeps_backend_message(self) -> None:
        client, _ = make_client(
            lambda request: httpx.Response(
                400, json={"message": "Due date is in the past", "details": "dueDate"}
            )
        )

        async with client:
            with pytest.raises(RequestError) as exc_info:
                await client.update_task("tok", 1, {"dueDate": "2000-01-01"})

        assert exc_info.value.message == "Due date is in the past"
        assert exc_info.value.details == "dueDate"

    async def test_plain_text_body_becomes_message(self) -> None:
        client, _ = make_client(
            lambda request: httpx.Response(409, text="Task is locked")
        )

        async with client:
            with pytest.raises(RequestError) as exc_info:
                await client.update_task("tok", 1, {"progress": 50})

        assert exc_info.value.message == "Task is locked"
        assert exc_info.value.status_code == 409

    async def test_empty_error_body_uses_fallback(self) -> None:
        client, _ = make_client(lambda request: httpx.Response(502))

        async with client:
            with pytest.raises(RequestError) as exc_info:
                await client.delete_task("tok", 1)

        assert exc_info.value.message == "Could not delete task (502)"

    async def test_remove_404_mentions_deleted_task(self) -> None:
        client, _ = make_client(lambda request: httpx.Response(404, json={}))

        async with client:
            with pytest.raises(RequestError) as exc_info:
                await client.delete_task("tok", 1)

        assert exc_info.value.message == "Task not found"
        assert "already have been deleted" in exc_info.value.details

    async def test_code_field_overrides_status(self) -> None:
        response = httpx.Response(200, json={"code": "401", "message": "expired"})

        error = translate_error(response, "load")

        assert error.message == "Session expired"
        assert error.status_code == 200

    async def test_invalid_json_on_success(self) -> None:
        client, _ = make_client(lambda request: httpx.Response(200, text="<html>"))

        async with client:
            with pytest.raises(RequestError) as exc_info:
                await client.get_tasks("tok", 0, 10)

        assert exc_info.value.message == "Unexpected response from server"

    async def test_transport_failure(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(refuse)

        async with client:
            with pytest.raises(TransportError) as exc_info:
                await client.get_tasks("tok", 0, 10)

        assert exc_info.value.message == "Connection error"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_corrupt_encoded_body(self) -> None:
        """Test a body that cannot be decoded surfaces as a RequestError."""
        client, _ = make_client(
            lambda request: httpx.Response(
                200,
                content=b"definitely not gzip",
                headers={"content-encoding": "gzip"},
            )
        )

        async with client:
            with pytest.raises(RequestError) as exc_info:
                await client.get_tasks("tok", 0, 10)

        assert exc_info.value.message == "Unexpected response from server"
        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)

    async def test_corrupt_body_is_recorded_on_store(self) -> None:
        client, _ = make_client(
            lambda request: httpx.Response(
                200,
                content=b"definitely not gzip",
                headers={"content-encoding": "gzip"},
            )
        )
        store = TaskStore(client)

        async with client:
            with pytest.raises(RequestError):
                await store.load("tok")

        assert store.error is not None
        assert store.error.message == "Unexpected response from server"
        assert store.loading is False


@pytest.mark.unit
@pytest.mark.asyncio
class TestCheckBackend:
    """Test the backend liveness probe."""

    @pytest.mark.parametrize("status, expected", [(200, True), (400, True), (503, False)])
    async def test_probe_status(self, status, expected) -> None:
        client, seen = make_client(lambda request: httpx.Response(status, json={}))

        async with client:
            assert await client.check_backend() is expected

        assert seen[0].method == "POST"
        assert seen[0].url.path == "/ba-todolist/api/auth/login"

    async def test_probe_unreachable(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(refuse)

        async with client:
            assert await client.check_backend() is False


@pytest.mark.unit
class TestPrepareDraft:
    """Test draft normalization."""

    def test_valid_priority_is_kept(self) -> None:
        body = prepare_draft(
            TaskDraft(name="Task", assigned_to="bob", priority=" High ", project_name=" Work ")
        )

        assert body["priority"] == "high"
        assert body["projectName"] == "Work"

    def test_enum_priority(self) -> None:
        body = prepare_draft(TaskDraft(name="Task", assignee_id=4, priority=TaskPriority.LOW))

        assert body["priority"] == "low"
        assert body["assigneeId"] == 4
        assert body["assignedTo"] is None

    def test_description_kept_when_present(self) -> None:
        body = prepare_draft(TaskDraft(name="Task", assigned_to="bob", description="Notes"))

        assert body["description"] == "Notes"

    @pytest.mark.parametrize(
        "draft",
        [TaskDraft(name="", assigned_to="alice"), TaskDraft(name="Task")],
    )
    def test_missing_name_or_assignee(self, draft) -> None:
        with pytest.raises(ValidationError):
            prepare_draft(draft)
