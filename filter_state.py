"""
Filter state store: the live search term and completion filter of a view.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from reactive import Cell, Unsubscribe


class CompletionMode(str, Enum):
    """Completion filter. Values double as the URL literals."""

    ALL = "all"
    COMPLETED = "completed"
    NOT_COMPLETED = "not-completed"


COMPLETION_MODE_LABELS = {
    CompletionMode.ALL: "All",
    CompletionMode.COMPLETED: "Completed",
    CompletionMode.NOT_COMPLETED: "Not completed",
}


def parse_completion_mode(value: Any) -> CompletionMode:
    """Map any external value (including None) to a CompletionMode.

    Unknown literals fall back to ALL.
    """
    if isinstance(value, CompletionMode):
        return value
    if value is None:
        return CompletionMode.ALL
    try:
        return CompletionMode(str(value))
    except ValueError:
        return CompletionMode.ALL


def normalize_search_term(value: Any) -> str:
    """Coerce to string and trim surrounding whitespace."""
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class FilterState:
    """Snapshot of the filter inputs."""

    search_term: str = ""
    completion_mode: CompletionMode = CompletionMode.ALL


class FilterStateStore:
    """
    Holds two reactive cells (search term, completion mode).

    Subscribers receive the new FilterState synchronously after every change.
    Inside batch() notifications are deferred and collapsed into one.
    """

    def __init__(self, initial: FilterState | None = None):
        initial = initial or FilterState()
        self.search_term = Cell(initial.search_term)
        self.completion_mode = Cell(initial.completion_mode)
        self._subscribers: list[Callable[[FilterState], None]] = []
        self._batch_depth = 0
        self._pending = False
        self.search_term.subscribe(self._on_cell_change)
        self.completion_mode.subscribe(self._on_cell_change)

    def read(self) -> FilterState:
        return FilterState(
            search_term=self.search_term.get(),
            completion_mode=self.completion_mode.get(),
        )

    def set_search_term(self, value: Any) -> bool:
        return self.search_term.set(normalize_search_term(value))

    def set_completion_mode(self, mode: Any) -> bool:
        return self.completion_mode.set(parse_completion_mode(mode))

    def subscribe(self, callback: Callable[[FilterState], None]) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @contextmanager
    def batch(self):
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._pending:
                self._pending = False
                self._notify()

    def _on_cell_change(self, _value) -> None:
        if self._batch_depth:
            self._pending = True
            return
        self._notify()

    def _notify(self) -> None:
        state = self.read()
        for callback in list(self._subscribers):
            callback(state)
