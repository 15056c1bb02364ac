"""
Todos Browser - searchable, filterable task list with URL-synced filters
"""

import streamlit as st

from filter_state import CompletionMode
from filtering import HighlightMarker
from navigation import StreamlitNavigator
from todo_client import get_todo_client
from todos_view import TodosView
from ui_components import (
    inject_base_styles,
    page_header,
    status_badge,
    empty_state,
    skeleton_card,
    todos_table,
    completion_mode_label,
    LAYOUT,
)
from utils import get_highlight_markup, get_page_config

_page = get_page_config()

st.set_page_config(
    page_title=_page["title"],
    page_icon=_page["icon"],
    layout="centered",
)

# Apply design system styles
inject_base_styles()

SEARCH_KEY = "todos_search_input"
FILTER_KEY = "todos_completed_select"


# =============================================================================
# MOUNT (once per session)
# =============================================================================
if "todos_view" not in st.session_state:
    open_tag, close_tag = get_highlight_markup()
    _view = TodosView(
        client=get_todo_client(),
        navigator=StreamlitNavigator(),
        marker=HighlightMarker(open_tag=open_tag, close_tag=close_tag),
    )
    _view.mount()
    st.session_state.todos_view = _view

view: TodosView = st.session_state.todos_view

# Back/forward or an edited URL since the last run
view.navigator.poll()


# =============================================================================
# HEADER
# =============================================================================
_load_state = view.load_state
if view.is_loading:
    _right = None
elif view.error is not None:
    _right = (status_badge("error", "Offline"), "")
else:
    _total = len(_load_state.records)
    _right = (status_badge("info", f"{len(view.visible_rows)} of {_total}"), "tasks shown")

page_header(_page["title"], _page["caption"], right_content=_right)


# =============================================================================
# CONTROLS
# =============================================================================
def _on_search():
    view.on_search(st.session_state[SEARCH_KEY])


def _on_filter():
    view.on_filter(st.session_state[FILTER_KEY])


# Store is the source of truth; widgets are re-seeded from it every run
st.session_state[SEARCH_KEY] = view.state.search_term
st.session_state[FILTER_KEY] = view.state.completion_mode.value

col1, col2 = st.columns(LAYOUT["filters"])
with col1:
    st.text_input(
        "Search",
        key=SEARCH_KEY,
        placeholder="Search by title...",
        on_change=_on_search,
        label_visibility="collapsed",
    )
with col2:
    st.selectbox(
        "Completed",
        options=[mode.value for mode in CompletionMode],
        format_func=completion_mode_label,
        key=FILTER_KEY,
        on_change=_on_filter,
        label_visibility="collapsed",
    )


# =============================================================================
# TABLE
# =============================================================================
if view.is_loading:
    _placeholder = st.empty()
    with _placeholder.container():
        skeleton_card()
    with st.spinner("Loading..."):
        view.load_blocking()
    _placeholder.empty()
    st.rerun()

if view.error is not None:
    empty_state(
        getattr(view.error, "user_message", "Error loading data"),
        hint="Reload the page to try again.",
    )
else:
    todos_table(view.visible_rows)
