"""Cursor, scrolling and filter-cycling helpers shared by the list views."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from zvault.config import LIST_CHROME_ROWS, MIN_VISIBLE_ROWS


def visible_rows(height: int) -> int:
    """Rows available for records once chrome is subtracted."""
    return max(MIN_VISIBLE_ROWS, height - LIST_CHROME_ROWS)


def scroll_window(cursor: int, total: int, rows: int) -> tuple[int, int]:
    """[start, end) slice that keeps the cursor on screen."""
    start = max(0, cursor - rows + 1)
    end = min(total, start + rows)
    start = max(0, min(start, end - rows))
    return start, end


def clamp(cursor: int, total: int) -> int:
    return max(0, min(cursor, total - 1))


def collect_tags(records: Iterable) -> tuple[str, ...]:
    """Sorted distinct tags across records."""
    return tuple(sorted({tag for r in records for tag in r.tags}))


@dataclass(frozen=True)
class FilterCycle:
    """
    Position in an ordered set of filter buckets followed by a "by tag" state.

    buckets[0] is "all". index == len(buckets) means tag mode, where
    tag_index selects one of the currently known tags. Tag mode is skipped
    when there are no tags.
    """

    buckets: tuple[str, ...]
    index: int = 0
    tag_index: int = 0

    @property
    def by_tag(self) -> bool:
        return self.index == len(self.buckets)

    @property
    def bucket(self) -> str:
        """Active ordinary bucket; "all" while in tag mode."""
        if self.by_tag:
            return self.buckets[0]
        return self.buckets[self.index]

    def tag(self, tags: tuple[str, ...]) -> str | None:
        if self.by_tag and tags:
            return tags[min(self.tag_index, len(tags) - 1)]
        return None

    def advance(self, tags: tuple[str, ...]) -> FilterCycle:
        if self.by_tag:
            if self.tag_index + 1 >= len(tags):
                return replace(self, index=0, tag_index=0)
            return replace(self, tag_index=self.tag_index + 1)

        nxt = self.index + 1
        if nxt == len(self.buckets) and not tags:
            nxt = 0
        return replace(self, index=nxt, tag_index=0)

    def reconcile(self, tags: tuple[str, ...]) -> FilterCycle:
        """Fit the tag position to a freshly collected tag set."""
        if not self.by_tag:
            return self
        if not tags:
            return replace(self, index=0, tag_index=0)
        if self.tag_index >= len(tags):
            return replace(self, tag_index=len(tags) - 1)
        return self

    def label(self, tags: tuple[str, ...]) -> str:
        tag = self.tag(tags)
        if tag is not None:
            return "#" + tag
        return self.bucket
