"""
Design System - Centralized UI components and styles for the todos browser.

Usage:
    from ui_components import inject_base_styles, page_header, todos_table, empty_state

    # At the start of the page:
    inject_base_styles()

    # Page header:
    page_header("Todos", "Search and filter tasks")

    # Rows from TodosView.visible_rows:
    todos_table(view.visible_rows)
"""

import streamlit as st
from typing import Optional, Literal

from filter_state import COMPLETION_MODE_LABELS, CompletionMode

# =============================================================================
# COLOR PALETTE
# =============================================================================

COLORS = {
    # Primary brand colors
    "primary": "#1976d2",       # Blue-700
    "primary_light": "#42a5f5", # Blue-400

    # Semantic colors
    "success": "#388e3c",       # Green-700
    "success_bg": "#e8f5e9",    # Green-50

    "error": "#d32f2f",         # Red-700
    "error_bg": "#ffebee",      # Red-50

    "info": "#1976d2",
    "info_bg": "#e3f2fd",       # Blue-50

    # Neutral colors
    "bg_primary": "#ffffff",
    "bg_secondary": "#fafbfc",  # Table background
    "bg_tertiary": "#f1f5fa",   # Table header
    "border": "#e3e8ee",
    "border_input": "#bdbdbd",
    "text_primary": "#222222",
    "text_secondary": "#555b66",
    "text_muted": "#888888",
}

# =============================================================================
# TYPOGRAPHY & SPACING
# =============================================================================

SPACING = {
    "xs": "0.25rem",   # 4px
    "sm": "0.5rem",    # 8px
    "md": "1rem",      # 16px
    "lg": "1.5rem",    # 24px
    "xl": "2rem",      # 32px
}

FONT_SIZES = {
    "xs": "0.75rem",   # 12px
    "sm": "0.875rem",  # 14px
    "base": "1rem",    # 16px
    "3xl": "1.875rem", # 30px
}

# =============================================================================
# LAYOUT PRESETS
# =============================================================================

LAYOUT = {
    "header": [3, 1],           # Title + right content
    "filters": [3, 1],          # Search input + completion select
}

# =============================================================================
# BASE STYLES
# =============================================================================

def inject_base_styles():
    """
    Inject base CSS styles. Call once at the start of the page.
    Styles the filter widgets, the todos table and the completion pills.
    """
    st.markdown(f"""
<style>
    :root {{
        --radius: 12px;
        --transition: 0.2s ease;
    }}

    .block-container {{
        max-width: 760px;
        padding-top: 1.25rem;
    }}

    h1 {{
        font-weight: 800 !important;
        font-size: {FONT_SIZES['3xl']} !important;
    }}

    /* Search input as a pill */
    div[data-testid="stTextInput"] input {{
        border-radius: 999px !important;
        border: 1.5px solid {COLORS['border_input']} !important;
        background: {COLORS['bg_secondary']} !important;
        padding: 0.5rem 1.2rem !important;
        transition: border-color var(--transition) !important;
    }}

    div[data-testid="stTextInput"] input:focus {{
        border-color: {COLORS['primary']} !important;
        background: {COLORS['bg_primary']} !important;
    }}

    div[data-testid="stSelectbox"] > div > div {{
        border-radius: 999px !important;
        border-color: {COLORS['border_input']} !important;
    }}

    /* Todos table */
    .todos-table {{
        width: 100%;
        border-collapse: separate;
        border-spacing: 0;
        background: {COLORS['bg_secondary']};
        border-radius: var(--radius);
        overflow: hidden;
        box-shadow: 0 2px 8px rgba(25, 118, 210, 0.06);
    }}

    .todos-table thead th {{
        background: {COLORS['bg_tertiary']};
        color: {COLORS['primary']};
        font-weight: 600;
        letter-spacing: 0.03em;
        padding: 0.85rem 1.3rem;
        text-align: left;
        border-bottom: 2px solid {COLORS['border']};
    }}

    .todos-table tbody td {{
        padding: 0.85rem 1.3rem;
        border-bottom: 1.5px solid {COLORS['border']};
        color: {COLORS['text_primary']};
    }}

    .todos-table tbody tr:last-child td {{
        border-bottom: none;
    }}

    .todos-table td.empty {{
        text-align: center;
        color: {COLORS['text_muted']};
    }}

    /* Status pill */
    .status-pill {{
        display: inline-block;
        padding: 0.25em 0.9em;
        border-radius: 999px;
        font-size: 0.95em;
        font-weight: 500;
        transition: background var(--transition), color var(--transition);
    }}

    .status-pill-success {{
        background: {COLORS['success_bg']};
        color: {COLORS['success']};
    }}

    .status-pill-error {{
        background: {COLORS['error_bg']};
        color: {COLORS['error']};
    }}

    .status-pill-info {{
        background: {COLORS['info_bg']};
        color: {COLORS['info']};
    }}

    /* Shimmer animation for skeleton loading */
    @keyframes shimmer {{
        0% {{ background-position: 200% 0; }}
        100% {{ background-position: -200% 0; }}
    }}
</style>
""", unsafe_allow_html=True)


# =============================================================================
# PAGE HEADER
# =============================================================================

def page_header(
    title: str,
    caption: Optional[str] = None,
    right_content: Optional[tuple[str, str]] = None,
) -> None:
    """
    Render a consistent page header with optional right content.

    Args:
        title: The page title
        caption: Optional subtitle/description
        right_content: Optional tuple of (badge_html, caption) to display on right side
                       Example: (status_badge("info", "200 tasks"), "Loaded")
    """
    col1, col2 = st.columns(LAYOUT["header"])

    with col1:
        st.title(title)
        if caption:
            st.caption(caption)

    with col2:
        if right_content:
            badge_html, right_caption = right_content
            st.markdown("")  # Align vertically with title
            st.markdown(badge_html, unsafe_allow_html=True)
            if right_caption:
                st.caption(right_caption)

    st.markdown("---")


# =============================================================================
# STATUS BADGE
# =============================================================================

StatusType = Literal["success", "error", "info"]

def status_badge(
    status: StatusType,
    label: str,
) -> str:
    """
    Create a colored status pill.

    Returns:
        HTML string for the badge

    Usage:
        st.markdown(status_badge("success", "Yes"), unsafe_allow_html=True)
    """
    return f'<span class="status-pill status-pill-{status}" role="status">{label}</span>'


def completion_badge(completed: bool) -> str:
    """Yes/No pill for the Completed column."""
    return status_badge("success", "Yes") if completed else status_badge("error", "No")


def completion_mode_label(mode: str) -> str:
    """Select box label for a CompletionMode value."""
    return COMPLETION_MODE_LABELS.get(CompletionMode(mode), mode)


# =============================================================================
# EMPTY / LOADING STATES
# =============================================================================

def empty_state(
    message: str,
    hint: Optional[str] = None,
) -> None:
    """
    Render a centered message block with optional hint (load errors).
    """
    hint_html = f'<p style="color: {COLORS["text_muted"]}; font-size: {FONT_SIZES["sm"]}; margin-top: 0.25rem;">{hint}</p>' if hint else ""
    st.markdown(
        f'''<div style="text-align: center; padding: {SPACING["xl"]} 0 {SPACING["lg"]};">
            <p style="color: {COLORS["text_secondary"]}; margin: 0;">{message}</p>
            {hint_html}
        </div>''',
        unsafe_allow_html=True,
    )


def skeleton_card(height: int = 48, count: int = 5) -> None:
    """
    Display skeleton loading placeholders.

    Args:
        height: Height of each skeleton row in pixels
        count: Number of skeleton rows to show
    """
    for _ in range(count):
        st.markdown(
            f'''
            <div style="
                background: linear-gradient(90deg, {COLORS['bg_secondary']} 0%, {COLORS['bg_tertiary']} 50%, {COLORS['bg_secondary']} 100%);
                background-size: 200% 100%;
                animation: shimmer 1.5s infinite;
                border-radius: 8px;
                height: {height}px;
                margin-bottom: {SPACING['sm']};
            "></div>
            ''',
            unsafe_allow_html=True
        )

    # Shimmer keyframe is defined in inject_base_styles()


# =============================================================================
# TODOS TABLE
# =============================================================================

TODOS_COLUMNS = ["ID", "Title", "Completed"]


def todos_table_html(rows: list) -> str:
    """
    Build the todos table markup.

    Args:
        rows: VisibleRow list; titles are inserted with their highlight markup

    Returns:
        HTML string. With no rows the body holds a single "No results found" row.
    """
    header_html = "".join(f"<th>{label}</th>" for label in TODOS_COLUMNS)

    body_html = ""
    for row in rows:
        record = row.record
        body_html += (
            f'<tr data-completed="{str(record.completed).lower()}">'
            f"<td>{record.id}</td>"
            f"<td>{row.highlighted_title}</td>"
            f"<td>{completion_badge(record.completed)}</td>"
            f"</tr>"
        )
    if not rows:
        body_html = f'<tr><td class="empty" colspan="{len(TODOS_COLUMNS)}">No results found</td></tr>'

    return f'<table class="todos-table"><thead><tr>{header_html}</tr></thead><tbody>{body_html}</tbody></table>'


def todos_table(rows: list) -> None:
    """Render the todos table."""
    st.markdown(todos_table_html(rows), unsafe_allow_html=True)
