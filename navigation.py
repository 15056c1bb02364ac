"""
URL query-parameter navigation.

A navigator is a stream of query-parameter mappings plus a merge-style write.
Subscribers get the current params immediately and again after every change,
whether the change came from navigate() or from outside (back/forward, deep
link).
"""

import logging
from typing import Callable, Mapping, Optional

import streamlit as st

from errors import TodoViewError

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

QueryParams = dict[str, str]
QueryPatch = Mapping[str, Optional[str]]


class NavigationError(TodoViewError):
    """A query-parameter write did not reach the URL."""

    default_user_message = "The address bar could not be updated."

    def __init__(self, message: str):
        super().__init__(message, recoverable=True)


def merge_query_params(current: Mapping[str, str], patch: QueryPatch) -> QueryParams:
    """Apply a merge patch: None removes a key, anything else sets it."""
    merged = dict(current)
    for key, value in patch.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = str(value)
    return merged


class QueryParamNavigator:
    """Base navigator. Subclasses implement current() and _apply()."""

    def __init__(self):
        self._subscribers: list[Callable[[QueryParams], None]] = []

    def current(self) -> QueryParams:
        raise NotImplementedError

    def _apply(self, params: QueryParams) -> None:
        raise NotImplementedError

    def navigate(self, patch: QueryPatch) -> QueryParams:
        """Merge patch into the current params, then emit the result."""
        merged = merge_query_params(self.current(), patch)
        self._apply(merged)
        logger.debug(f"Navigated to query params {merged}")
        self._emit(merged)
        return merged

    def subscribe(self, callback: Callable[[QueryParams], None]) -> Callable[[], None]:
        self._subscribers.append(callback)
        callback(self.current())

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self, params: QueryParams) -> None:
        for callback in list(self._subscribers):
            callback(dict(params))


class InMemoryNavigator(QueryParamNavigator):
    """Dict-backed navigator; writes are recorded in order."""

    def __init__(self, params: Optional[Mapping[str, str]] = None):
        super().__init__()
        self._params: QueryParams = dict(params or {})
        self.writes: list[dict] = []

    def current(self) -> QueryParams:
        return dict(self._params)

    def _apply(self, params: QueryParams) -> None:
        self._params = dict(params)

    def navigate(self, patch: QueryPatch) -> QueryParams:
        self.writes.append(dict(patch))
        return super().navigate(patch)

    def push(self, params: Mapping[str, str]) -> None:
        """Replace the params as an external navigation would."""
        self._params = dict(params)
        self._emit(self._params)


class StreamlitNavigator(QueryParamNavigator):
    """
    Navigator over st.query_params.

    Streamlit has no URL change event, so the page calls poll() on every
    rerun; it emits when the URL differs from what was last emitted.
    """

    def __init__(self):
        super().__init__()
        self._last_seen: Optional[QueryParams] = None

    def current(self) -> QueryParams:
        # Indexing st.query_params yields the last value of repeated keys
        return {key: st.query_params[key] for key in st.query_params}

    def _apply(self, params: QueryParams) -> None:
        try:
            for key in list(st.query_params):
                if key not in params:
                    del st.query_params[key]
            for key, value in params.items():
                if st.query_params.get(key) != value:
                    st.query_params[key] = value
        except Exception as e:
            raise NavigationError(f"Failed to write query params {params}: {e}") from e

    def _emit(self, params: QueryParams) -> None:
        self._last_seen = dict(params)
        super()._emit(params)

    def subscribe(self, callback: Callable[[QueryParams], None]) -> Callable[[], None]:
        self._last_seen = self.current()
        return super().subscribe(callback)

    def poll(self) -> bool:
        """Emit if the URL changed outside navigate(). Returns True if emitted."""
        params = self.current()
        if params == self._last_seen:
            return False
        logger.info(f"External query param change: {params}")
        self._emit(params)
        return True
