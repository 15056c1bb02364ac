"""
Filtering and highlight pipeline.

Pure derivation from (load state, search term, completion mode) to the rows
the table renders. Input order is preserved; nothing here mutates its inputs.
"""

import re
from dataclasses import dataclass
from typing import Iterable

from filter_state import CompletionMode, FilterState
from todo_client import LoadState, Ready, Record


@dataclass(frozen=True)
class HighlightMarker:
    """Opening/closing markup wrapped around each match."""

    open_tag: str = '<mark style="background: #ffe066;">'
    close_tag: str = "</mark>"


DEFAULT_MARKER = HighlightMarker()


@dataclass(frozen=True)
class VisibleRow:
    record: Record
    highlighted_title: str


def matches_title(record: Record, search_term: str) -> bool:
    """Case-insensitive substring match. Empty term matches everything."""
    return search_term.lower() in record.title.lower()


def matches_mode(record: Record, mode: CompletionMode) -> bool:
    if mode == CompletionMode.COMPLETED:
        return record.completed
    if mode == CompletionMode.NOT_COMPLETED:
        return not record.completed
    return True


def filter_records(
    records: Iterable[Record],
    search_term: str,
    mode: CompletionMode,
) -> list[Record]:
    """Stable filter on title and completion mode."""
    return [
        record for record in records
        if matches_title(record, search_term) and matches_mode(record, mode)
    ]


def highlight(text: str, search_term: str, marker: HighlightMarker = DEFAULT_MARKER) -> str:
    """Wrap every case-insensitive, non-overlapping match of search_term in marker.

    Matched text keeps its original casing. Unmatched text is passed through
    as-is; escaping it for the render surface is the caller's job.
    """
    if not search_term:
        return text
    pattern = re.compile(re.escape(search_term), re.IGNORECASE)
    return pattern.sub(lambda m: f"{marker.open_tag}{m.group(0)}{marker.close_tag}", text)


def derive_visible_rows(
    load_state: LoadState,
    state: FilterState,
    marker: HighlightMarker = DEFAULT_MARKER,
) -> list[VisibleRow]:
    """Rows to render for the current inputs.

    Pending and Failed both yield no rows; telling them apart is up to the page.
    """
    if not isinstance(load_state, Ready):
        return []
    return [
        VisibleRow(record=record, highlighted_title=highlight(record.title, state.search_term, marker))
        for record in filter_records(load_state.records, state.search_term, state.completion_mode)
    ]
