"""
Tests for query-param navigators.

Run with: pytest tests/test_navigation.py -v
"""

import pytest
from unittest.mock import patch

from errors import TodoViewError
from navigation import (
    InMemoryNavigator,
    NavigationError,
    StreamlitNavigator,
    merge_query_params,
)


class TestMergeQueryParams:
    """Tests for merge-patch semantics."""

    def test_sets_keys(self):
        assert merge_query_params({}, {"q": "a"}) == {"q": "a"}

    def test_none_removes_key(self):
        assert merge_query_params({"q": "a", "completed": "completed"}, {"q": None}) == {
            "completed": "completed"
        }

    def test_none_for_missing_key_is_noop(self):
        assert merge_query_params({"page": "2"}, {"q": None}) == {"page": "2"}

    def test_unrelated_keys_preserved(self):
        merged = merge_query_params(
            {"page": "2", "q": "old"},
            {"q": "new", "completed": None},
        )
        assert merged == {"page": "2", "q": "new"}

    def test_does_not_mutate_input(self):
        current = {"q": "a"}
        merge_query_params(current, {"q": None})
        assert current == {"q": "a"}


class TestInMemoryNavigator:

    def test_subscribe_emits_current_immediately(self):
        nav = InMemoryNavigator({"q": "a"})
        seen = []
        nav.subscribe(seen.append)
        assert seen == [{"q": "a"}]

    def test_navigate_merges_and_emits(self):
        nav = InMemoryNavigator({"page": "3"})
        seen = []
        nav.subscribe(seen.append)
        nav.navigate({"q": "x", "completed": None})
        assert nav.current() == {"page": "3", "q": "x"}
        assert seen[-1] == {"page": "3", "q": "x"}
        assert nav.writes == [{"q": "x", "completed": None}]

    def test_push_replaces_and_emits(self):
        nav = InMemoryNavigator({"q": "a"})
        seen = []
        nav.subscribe(seen.append)
        nav.push({"completed": "completed"})
        assert nav.current() == {"completed": "completed"}
        assert seen[-1] == {"completed": "completed"}
        assert nav.writes == []

    def test_unsubscribe(self):
        nav = InMemoryNavigator()
        seen = []
        unsubscribe = nav.subscribe(seen.append)
        unsubscribe()
        nav.push({"q": "b"})
        assert seen == [{}]


class FakeQueryParams(dict):
    """Stands in for st.query_params (a str -> str mutable mapping)."""


class TestStreamlitNavigator:
    """Tests for the st.query_params adapter."""

    @patch("navigation.st")
    def test_current_reads_query_params(self, mock_st):
        mock_st.query_params = FakeQueryParams(q="veniam", completed="completed")
        assert StreamlitNavigator().current() == {"q": "veniam", "completed": "completed"}

    @patch("navigation.st")
    def test_navigate_writes_merge(self, mock_st):
        mock_st.query_params = FakeQueryParams(page="2", q="old")
        nav = StreamlitNavigator()
        nav.navigate({"q": None, "completed": "not-completed"})
        assert dict(mock_st.query_params) == {"page": "2", "completed": "not-completed"}

    @patch("navigation.st")
    def test_poll_emits_only_on_external_change(self, mock_st):
        mock_st.query_params = FakeQueryParams()
        nav = StreamlitNavigator()
        seen = []
        nav.subscribe(seen.append)
        assert nav.poll() is False

        mock_st.query_params["q"] = "back"
        assert nav.poll() is True
        assert seen[-1] == {"q": "back"}
        assert nav.poll() is False

    @patch("navigation.st")
    def test_own_write_is_not_reported_by_poll(self, mock_st):
        mock_st.query_params = FakeQueryParams()
        nav = StreamlitNavigator()
        seen = []
        nav.subscribe(seen.append)
        nav.navigate({"q": "mine"})
        assert len(seen) == 2
        assert nav.poll() is False

    @patch("navigation.st")
    def test_write_failure_raises_navigation_error(self, mock_st):
        class BrokenQueryParams(FakeQueryParams):
            def __setitem__(self, key, value):
                raise RuntimeError("not in a script run")

        mock_st.query_params = BrokenQueryParams()
        nav = StreamlitNavigator()
        with pytest.raises(NavigationError) as exc_info:
            nav.navigate({"q": "x"})
        assert isinstance(exc_info.value, TodoViewError)
        assert exc_info.value.recoverable is True
