"""
Minimal push-based reactive primitives.

Cell holds a value and notifies subscribers synchronously when it changes.
Computed derives a value from one or more sources and recomputes lazily
after any of them notifies.
"""

from typing import Any, Callable

Unsubscribe = Callable[[], None]


class Cell:
    """Mutable value holder with a synchronous subscriber list."""

    def __init__(self, value: Any = None):
        self._value = value
        self._subscribers: list[Callable[[Any], None]] = []

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> bool:
        """Store value and notify subscribers. Returns False if nothing changed."""
        if value == self._value:
            return False
        self._value = value
        for callback in list(self._subscribers):
            callback(value)
        return True

    def subscribe(self, callback: Callable[[Any], None]) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe


class Computed:
    """
    Derived value over any sources exposing subscribe().

    The compute function takes no arguments and reads its sources directly.
    A notification from any source only marks the value dirty; the function
    runs again on the next get().
    """

    def __init__(self, compute: Callable[[], Any], *sources):
        self._compute = compute
        self._dirty = True
        self._value: Any = None
        self._unsubscribers = [source.subscribe(self._invalidate) for source in sources]

    def _invalidate(self, *_args) -> None:
        self._dirty = True

    @property
    def dirty(self) -> bool:
        return self._dirty

    def get(self) -> Any:
        if self._dirty:
            self._value = self._compute()
            self._dirty = False
        return self._value

    def dispose(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
