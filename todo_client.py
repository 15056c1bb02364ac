"""
Todos API client and load lifecycle.
- Async fetch over httpx with retry/backoff on 429/5xx and timeouts
- Pending / Ready / Failed load states
- One load per mount; a cancelled load discards its result
"""

import httpx
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

import streamlit as st

from errors import TodoViewError
from reactive import Cell
from utils import get_api_config

# Configure logging
logger = logging.getLogger(__name__)

# Set up console handler if not already configured
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

MAX_DELAY_SECONDS = 30.0
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class TodoFetchError(TodoViewError):
    """Todos could not be fetched (network, HTTP status or payload)."""

    default_user_message = "Error loading data"

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(
            f"Todos fetch error {status_code}: {message}",
            recoverable=status_code == 0 or status_code >= 500,
        )


@dataclass(frozen=True)
class Record:
    """A single task as returned by the API."""

    id: int
    owner_id: int
    title: str
    completed: bool

    @classmethod
    def from_api(cls, item: dict) -> "Record":
        """Build from an API item ({userId, id, title, completed})."""
        completed = item["completed"]
        if not isinstance(completed, bool):
            raise TypeError(f"completed must be a boolean, got {completed!r}")
        return cls(
            id=int(item["id"]),
            owner_id=int(item["userId"]),
            title=str(item["title"]),
            completed=completed,
        )


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class Ready:
    records: tuple[Record, ...]


@dataclass(frozen=True)
class Failed:
    error: Exception


LoadState = Union[Pending, Ready, Failed]


class TodoClient:
    """Todos API client with retry logic."""

    def __init__(
        self,
        base_url: str,
        todos_path: str = "/todos",
        timeout: float = 30.0,
        max_retries: int = 2,
        retry_delay: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.todos_path = todos_path
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._transport = transport

    @property
    def todos_url(self) -> str:
        return f"{self.base_url}{self.todos_path}"

    async def _get_json(self, url: str) -> Any:
        """GET with retry/backoff. Raises TodoFetchError on final failure."""
        logger.info(f"Todos API Request: GET {url}")

        for attempt in range(self.max_retries + 1):
            if attempt > 0:
                logger.info(f"  Retry attempt {attempt + 1}/{self.max_retries + 1}")
            delay = min(self.retry_delay * (2 ** attempt), MAX_DELAY_SECONDS)

            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                try:
                    response = await client.get(url)

                    if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                        retry_after = response.headers.get("Retry-After")
                        if retry_after:
                            try:
                                delay = min(float(retry_after), MAX_DELAY_SECONDS)
                            except ValueError:
                                pass
                        logger.warning(f"  HTTP {response.status_code} from {url}, retrying in {delay:.1f}s")
                        await asyncio.sleep(delay)
                        continue

                    response.raise_for_status()

                    try:
                        return response.json()
                    except ValueError as json_err:
                        raise TodoFetchError(response.status_code, f"Invalid JSON response: {json_err}")

                except httpx.TimeoutException:
                    if attempt < self.max_retries:
                        logger.warning(f"  Timeout on {url}, retrying in {delay:.1f}s")
                        await asyncio.sleep(delay)
                        continue
                    logger.error(f"  Request timeout after {self.max_retries + 1} attempts")
                    raise TodoFetchError(0, "Request timeout after retries")
                except httpx.HTTPStatusError as e:
                    logger.error(f"  HTTP error {e.response.status_code}: {e.response.text[:200]}")
                    raise TodoFetchError(e.response.status_code, e.response.text[:200])
                except httpx.RequestError as e:
                    logger.error(f"  Connection error: {e}")
                    raise TodoFetchError(0, f"Connection error: {e}")
                except httpx.InvalidURL as e:
                    logger.error(f"  Invalid URL {url!r}: {e}")
                    raise TodoFetchError(0, f"Invalid URL: {e}")

        raise TodoFetchError(0, "Max retries exceeded")

    async def fetch_todos(self) -> list[Record]:
        """Fetch all todos in API order."""
        data = await self._get_json(self.todos_url)
        if not isinstance(data, list):
            raise TodoFetchError(200, f"Expected a JSON array, got {type(data).__name__}")
        try:
            records = [Record.from_api(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise TodoFetchError(200, f"Malformed todo item: {e}")
        logger.info(f"Todos API Response: {len(records)} records")
        return records


class TodoResource:
    """
    Load lifecycle for one mount.

    state starts Pending and settles once to Ready or Failed. After cancel()
    an in-flight load still completes but its result is dropped.
    """

    def __init__(self, client: TodoClient):
        self.client = client
        self.state = Cell(Pending())
        self._started = False
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def load(self) -> LoadState:
        if self._started:
            return self.state.get()
        self._started = True

        try:
            records = await self.client.fetch_todos()
            result: LoadState = Ready(tuple(records))
        except TodoFetchError as e:
            logger.warning(f"Todos load failed: {e.message}")
            result = Failed(e)
        except Exception as e:
            # Any escape would leave state Pending with no second attempt.
            logger.exception("Todos load failed unexpectedly")
            result = Failed(TodoFetchError(0, f"{type(e).__name__}: {e}"))

        if self._cancelled:
            logger.info("Todos load finished after cancel; result discarded")
            return self.state.get()

        self.state.set(result)
        return result

    def load_blocking(self) -> LoadState:
        """Synchronous wrapper for load()."""
        return asyncio.run(self.load())

    def cancel(self) -> None:
        self._cancelled = True


@st.cache_resource
def get_todo_client() -> TodoClient:
    """Get cached todos client built from config/app.yaml."""
    api = get_api_config()
    return TodoClient(
        base_url=api["base_url"],
        todos_path=api["todos_path"],
        timeout=api["timeout_seconds"],
        max_retries=api["max_retries"],
        retry_delay=api["retry_delay_seconds"],
    )
