"""
Tests for the todos API client and load lifecycle.

Run with: pytest tests/test_todo_client.py -v
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from errors import TodoViewError
from todo_client import (
    Failed,
    Pending,
    Ready,
    Record,
    TodoClient,
    TodoFetchError,
    TodoResource,
    get_todo_client,
)

SAMPLE_TODOS = [
    {"userId": 1, "id": 1, "title": "delectus aut autem", "completed": False},
    {"userId": 1, "id": 2, "title": "quis ut nam facilis et officia qui", "completed": False},
    {"userId": 1, "id": 3, "title": "fugiat veniam minus", "completed": True},
]


def make_client(handler, max_retries=2):
    return TodoClient(
        base_url="https://api.example.test/",
        max_retries=max_retries,
        retry_delay=0,
        transport=httpx.MockTransport(handler),
    )


def json_handler(payload, status_code=200):
    def handler(request):
        return httpx.Response(status_code, json=payload)
    return handler


class TestRecord:

    def test_from_api(self):
        record = Record.from_api(SAMPLE_TODOS[2])
        assert record == Record(id=3, owner_id=1, title="fugiat veniam minus", completed=True)

    def test_rejects_non_boolean_completed(self):
        with pytest.raises(TypeError):
            Record.from_api(dict(SAMPLE_TODOS[0], completed="false"))
        with pytest.raises(TypeError):
            Record.from_api(dict(SAMPLE_TODOS[0], completed=1))

    def test_is_immutable(self):
        record = Record.from_api(SAMPLE_TODOS[0])
        with pytest.raises(Exception):
            record.title = "changed"


class TestTodoFetchError:

    def test_is_todo_view_error(self):
        e = TodoFetchError(500, "Internal Server Error")
        assert isinstance(e, TodoViewError)
        assert e.user_message == "Error loading data"
        assert "500" in e.message

    def test_recoverable_by_status(self):
        assert TodoFetchError(0, "conn").recoverable is True
        assert TodoFetchError(503, "down").recoverable is True
        assert TodoFetchError(404, "missing").recoverable is False


class TestFetchTodos:
    """Tests for TodoClient.fetch_todos."""

    def test_success_preserves_order(self):
        client = make_client(json_handler(SAMPLE_TODOS))
        records = asyncio.run(client.fetch_todos())
        assert [r.id for r in records] == [1, 2, 3]
        assert records[2].completed is True

    def test_requests_todos_path(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json=[])

        asyncio.run(make_client(handler).fetch_todos())
        assert seen == ["https://api.example.test/todos"]

    def test_client_error_not_retried(self):
        calls = []

        def handler(request):
            calls.append(1)
            return httpx.Response(404, text="Not Found")

        with pytest.raises(TodoFetchError) as exc_info:
            asyncio.run(make_client(handler).fetch_todos())
        assert exc_info.value.status_code == 404
        assert exc_info.value.recoverable is False
        assert len(calls) == 1

    def test_server_error_retried_then_succeeds(self):
        responses = [
            httpx.Response(503, text="busy"),
            httpx.Response(429, headers={"Retry-After": "0"}, text="slow down"),
            httpx.Response(200, json=SAMPLE_TODOS),
        ]

        def handler(request):
            return responses.pop(0)

        records = asyncio.run(make_client(handler).fetch_todos())
        assert len(records) == 3
        assert responses == []

    def test_server_error_after_retries(self):
        calls = []

        def handler(request):
            calls.append(1)
            return httpx.Response(500, text="boom")

        with pytest.raises(TodoFetchError) as exc_info:
            asyncio.run(make_client(handler, max_retries=1).fetch_todos())
        assert exc_info.value.status_code == 500
        assert len(calls) == 2

    def test_timeout_after_retries(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TodoFetchError) as exc_info:
            asyncio.run(make_client(handler, max_retries=1).fetch_todos())
        assert exc_info.value.status_code == 0
        assert "timeout" in exc_info.value.message.lower()

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("DNS resolution failed", request=request)

        with pytest.raises(TodoFetchError) as exc_info:
            asyncio.run(make_client(handler).fetch_todos())
        assert "Connection error" in exc_info.value.message

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        with pytest.raises(TodoFetchError) as exc_info:
            asyncio.run(make_client(handler).fetch_todos())
        assert "Invalid JSON" in exc_info.value.message

    def test_non_array_payload(self):
        client = make_client(json_handler({"todos": SAMPLE_TODOS}))
        with pytest.raises(TodoFetchError) as exc_info:
            asyncio.run(client.fetch_todos())
        assert "JSON array" in exc_info.value.message

    def test_malformed_item(self):
        client = make_client(json_handler([{"id": 1, "title": "no owner"}]))
        with pytest.raises(TodoFetchError) as exc_info:
            asyncio.run(client.fetch_todos())
        assert "Malformed" in exc_info.value.message

    def test_string_completed_is_malformed(self):
        item = dict(SAMPLE_TODOS[0], completed="false")
        client = make_client(json_handler([item]))
        with pytest.raises(TodoFetchError) as exc_info:
            asyncio.run(client.fetch_todos())
        assert "completed must be a boolean" in exc_info.value.message


class TestTodoResource:
    """Tests for the Pending -> Ready/Failed lifecycle."""

    def test_starts_pending(self):
        resource = TodoResource(make_client(json_handler(SAMPLE_TODOS)))
        assert resource.state.get() == Pending()

    def test_load_ready(self):
        resource = TodoResource(make_client(json_handler(SAMPLE_TODOS)))
        result = resource.load_blocking()
        assert isinstance(result, Ready)
        assert [r.id for r in result.records] == [1, 2, 3]
        assert resource.state.get() is result

    def test_load_failed(self):
        resource = TodoResource(make_client(json_handler([], status_code=404)))
        result = resource.load_blocking()
        assert isinstance(result, Failed)
        assert isinstance(result.error, TodoFetchError)

    def test_single_load_per_resource(self):
        client = MagicMock()
        client.fetch_todos = AsyncMock(return_value=[Record.from_api(SAMPLE_TODOS[0])])
        resource = TodoResource(client)
        resource.load_blocking()
        resource.load_blocking()
        client.fetch_todos.assert_awaited_once()

    def test_cancel_discards_result(self):
        client = MagicMock()
        resource = TodoResource(client)

        async def fetch_then_unmount():
            resource.cancel()
            return [Record.from_api(SAMPLE_TODOS[0])]

        client.fetch_todos = AsyncMock(side_effect=fetch_then_unmount)
        resource.load_blocking()
        assert resource.cancelled is True
        assert resource.state.get() == Pending()

    def test_state_change_notifies(self):
        resource = TodoResource(make_client(json_handler(SAMPLE_TODOS)))
        seen = []
        resource.state.subscribe(seen.append)
        resource.load_blocking()
        assert len(seen) == 1
        assert isinstance(seen[0], Ready)

    def test_unexpected_error_settles_failed(self):
        """A non-fetch exception still settles the load instead of leaving it Pending."""
        client = MagicMock()
        client.fetch_todos = AsyncMock(side_effect=RuntimeError("boom"))
        resource = TodoResource(client)

        result = resource.load_blocking()
        assert isinstance(result, Failed)
        assert isinstance(result.error, TodoFetchError)
        assert "RuntimeError: boom" in result.error.message
        assert result.error.user_message == "Error loading data"

        assert resource.load_blocking() is result
        client.fetch_todos.assert_awaited_once()

    def test_invalid_base_url_settles_failed(self):
        resource = TodoResource(TodoClient(base_url="http://exa\x00mple.com", retry_delay=0))
        result = resource.load_blocking()
        assert isinstance(result, Failed)
        assert isinstance(result.error, TodoFetchError)
        assert resource.state.get() is result


class TestGetTodoClient:

    @patch("todo_client.get_api_config")
    def test_built_from_config(self, mock_config):
        mock_config.return_value = {
            "base_url": "https://todos.example.test",
            "todos_path": "/api/todos",
            "timeout_seconds": 5.0,
            "max_retries": 1,
            "retry_delay_seconds": 0.5,
        }
        get_todo_client.clear()
        try:
            client = get_todo_client()
        finally:
            get_todo_client.clear()
        assert client.todos_url == "https://todos.example.test/api/todos"
        assert client.timeout == 5.0
        assert client.max_retries == 1
