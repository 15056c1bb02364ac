"""
Query param bridge: keeps a FilterStateStore and the URL query params in sync.

Inbound: every emission of the navigator stream is parsed, remembered as the
last external snapshot, and written into the store.

Outbound: every store change is compared with that snapshot. Only a real
difference produces a merge-style navigation write. The snapshot is never
updated from the bridge's own writes, so a write that the navigator echoes
back (or a burst of writes still in flight) cannot cause another write.
"""

import logging
from typing import Any, Callable, Mapping, Optional

from filter_state import (
    CompletionMode,
    FilterState,
    FilterStateStore,
    normalize_search_term,
    parse_completion_mode,
)
from navigation import NavigationError, QueryParamNavigator

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

SEARCH_PARAM = "q"
COMPLETION_PARAM = "completed"


def _param_value(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        # Repeated key: last one wins
        return str(value[-1]) if value else None
    return str(value)


def parse_query_params(params: Mapping[str, Any]) -> FilterState:
    """Normalize raw query params into a FilterState. Never rejects input."""
    return FilterState(
        search_term=normalize_search_term(_param_value(params, SEARCH_PARAM)),
        completion_mode=parse_completion_mode(_param_value(params, COMPLETION_PARAM)),
    )


def to_query_patch(state: FilterState) -> dict[str, Optional[str]]:
    """Merge patch for state. Defaults (empty term, ALL) remove their key."""
    return {
        SEARCH_PARAM: state.search_term or None,
        COMPLETION_PARAM: (
            state.completion_mode.value
            if state.completion_mode != CompletionMode.ALL
            else None
        ),
    }


class QueryParamBridge:
    """Two one-directional channels between a store and a navigator."""

    def __init__(self, store: FilterStateStore, navigator: QueryParamNavigator):
        self.store = store
        self.navigator = navigator
        self._last_external = FilterState()
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def last_external(self) -> FilterState:
        """Filter state parsed from the most recent inbound params."""
        return self._last_external

    @property
    def connected(self) -> bool:
        return bool(self._unsubscribers)

    def connect(self) -> None:
        if self.connected:
            return
        self._unsubscribers.append(self.store.subscribe(self.reconcile))
        # Navigator emits current params right away
        self._unsubscribers.append(self.navigator.subscribe(self.receive))

    def disconnect(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def receive(self, params: Mapping[str, Any]) -> None:
        """Inbound channel: URL params -> store."""
        incoming = parse_query_params(params)
        self._last_external = incoming
        with self.store.batch():
            self.store.set_search_term(incoming.search_term)
            self.store.set_completion_mode(incoming.completion_mode)

    def reconcile(self, state: Optional[FilterState] = None) -> bool:
        """Outbound channel: store -> URL. Returns True if a write was issued."""
        state = state or self.store.read()
        if state == self._last_external:
            return False

        patch = to_query_patch(state)
        try:
            self.navigator.navigate(patch)
        except NavigationError as e:
            # No rollback and no retry; the next state change writes again
            logger.warning(f"Query param write failed: {e.message}")
            return False
        logger.debug(f"Wrote query params {patch}")
        return True
