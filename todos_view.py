"""
Todos table view model.

Owns the per-mount pieces: filter store, query param bridge, load resource
and the derived visible rows. The Streamlit page keeps one instance per
session and forwards widget input to on_search() / on_filter().
"""

import logging
from typing import Any, Optional

from filter_state import FilterState, FilterStateStore
from filtering import DEFAULT_MARKER, HighlightMarker, VisibleRow, derive_visible_rows
from navigation import QueryParamNavigator
from query_bridge import QueryParamBridge
from reactive import Computed
from todo_client import Failed, LoadState, Pending, Ready, TodoClient, TodoResource

logger = logging.getLogger(__name__)


class TodosView:
    """Mount/unmount lifecycle around the filtering pipeline."""

    def __init__(
        self,
        client: TodoClient,
        navigator: QueryParamNavigator,
        marker: HighlightMarker = DEFAULT_MARKER,
    ):
        self.client = client
        self.navigator = navigator
        self.marker = marker
        self.store: Optional[FilterStateStore] = None
        self.bridge: Optional[QueryParamBridge] = None
        self.resource: Optional[TodoResource] = None
        self._rows: Optional[Computed] = None

    @property
    def mounted(self) -> bool:
        return self.store is not None

    def mount(self) -> None:
        if self.mounted:
            return
        self.store = FilterStateStore()
        self.resource = TodoResource(self.client)
        self._rows = Computed(self._derive_rows, self.store, self.resource.state)
        self.bridge = QueryParamBridge(self.store, self.navigator)
        self.bridge.connect()
        logger.info(f"Todos view mounted with {self.store.read()}")

    def unmount(self) -> None:
        if not self.mounted:
            return
        self.bridge.disconnect()
        self.resource.cancel()
        self._rows.dispose()
        self.store = None
        self.bridge = None
        self.resource = None
        self._rows = None
        logger.info("Todos view unmounted")

    async def load(self) -> LoadState:
        return await self.resource.load()

    def load_blocking(self) -> LoadState:
        return self.resource.load_blocking()

    def _derive_rows(self) -> list[VisibleRow]:
        return derive_visible_rows(self.resource.state.get(), self.store.read(), self.marker)

    # --- Inputs ---

    def on_search(self, value: Any) -> None:
        self.store.set_search_term(value)

    def on_filter(self, value: Any) -> None:
        self.store.set_completion_mode(value)

    # --- Outputs ---

    @property
    def state(self) -> FilterState:
        return self.store.read()

    @property
    def load_state(self) -> LoadState:
        return self.resource.state.get()

    @property
    def is_loading(self) -> bool:
        return isinstance(self.load_state, Pending)

    @property
    def error(self) -> Optional[Exception]:
        load_state = self.load_state
        return load_state.error if isinstance(load_state, Failed) else None

    @property
    def visible_rows(self) -> list[VisibleRow]:
        return self._rows.get()

    @property
    def show_empty_state(self) -> bool:
        """Data loaded but nothing matches the filters."""
        return isinstance(self.load_state, Ready) and not self.visible_rows
