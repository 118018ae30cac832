"""Tests for listing.py - filter cycling and scrolling."""

import pytest

from zvault.controllers.listing import FilterCycle, scroll_window, visible_rows

BUCKETS = ("all", "password", "apikey", "sshkey", "note")


def _period(cycle: FilterCycle, tags: tuple[str, ...]) -> int:
    steps = 0
    while True:
        cycle = cycle.advance(tags)
        steps += 1
        if cycle.index == 0 and not cycle.by_tag:
            return steps


class TestFilterCycle:
    """Tests for FilterCycle."""

    @pytest.mark.parametrize("tags", [("a",), ("a", "b"), ("dev", "home", "work")])
    def test_period_with_tags(self, tags: tuple[str, ...]) -> None:
        n = len(BUCKETS) - 1
        assert _period(FilterCycle(BUCKETS), tags) == len(tags) + n + 1

    def test_period_without_tags(self) -> None:
        n = len(BUCKETS) - 1
        assert _period(FilterCycle(BUCKETS), ()) == n + 1

    def test_tag_mode_starts_at_first_tag(self) -> None:
        cycle = FilterCycle(("all", "pending", "done"), index=2)
        cycle = cycle.advance(("alpha", "beta"))
        assert cycle.by_tag
        assert cycle.tag(("alpha", "beta")) == "alpha"
        assert cycle.label(("alpha", "beta")) == "#alpha"

    def test_reconcile_leaves_tag_mode_when_tags_vanish(self) -> None:
        cycle = FilterCycle(("all", "pending", "done"), index=3)
        assert cycle.reconcile(()).index == 0
        cycle = FilterCycle(("all", "pending", "done"), index=3, tag_index=4)
        assert cycle.reconcile(("a", "b")).tag_index == 1


class TestScrolling:
    """Tests for visible_rows and scroll_window."""

    def test_visible_rows_floor(self) -> None:
        assert visible_rows(0) == 3
        assert visible_rows(40) == 30

    def test_window_follows_cursor(self) -> None:
        assert scroll_window(0, 20, 5) == (0, 5)
        assert scroll_window(4, 20, 5) == (0, 5)
        assert scroll_window(5, 20, 5) == (1, 6)
        assert scroll_window(19, 20, 5) == (15, 20)

    def test_short_list(self) -> None:
        assert scroll_window(1, 2, 5) == (0, 2)
