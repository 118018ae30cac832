"""Sorted, filterable task list."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum

from rich.text import Text

from zvault.controllers.base import ViewController
from zvault.controllers.listing import (
    FilterCycle,
    clamp,
    collect_tags,
    scroll_window,
    visible_rows,
)
from zvault.dates import format_due, is_overdue
from zvault.errors import ZvaultError
from zvault.messages import Effect, KeyPress, Message, Navigate, ViewID, navigate, report
from zvault.providers import Filter, FilterStatus, Priority, Task
from zvault.views.style import (
    MUTED,
    RED,
    SAPPHIRE,
    STATUS_OK,
    STATUS_WARN,
    TEXT,
    YELLOW,
    cursor,
    muted,
    status_line,
)

logger = logging.getLogger(__name__)

BUCKETS = tuple(s.value for s in FilterStatus)


class Confirm(Enum):
    NONE = "none"
    DELETE = "delete"
    CLEAR_DONE = "clear_done"


def sort_tasks(tasks) -> list[Task]:
    """
    Pending before done, then priority high to none, then soonest due date
    with undated tasks last. Stable, so equal tasks keep store order.
    """
    return sorted(
        tasks,
        key=lambda t: (t.done, -t.priority.rank, t.due is None, t.due or date.min),
    )


@dataclass(frozen=True)
class TaskListController(ViewController):
    records: tuple[Task, ...] = ()
    tags: tuple[str, ...] = ()
    filter: FilterCycle = field(default_factory=lambda: FilterCycle(BUCKETS))
    cursor: int = 0
    done_count: int = 0
    confirm: Confirm = Confirm.NONE
    status: str = ""

    @property
    def selected(self) -> Task | None:
        if 0 <= self.cursor < len(self.records):
            return self.records[self.cursor]
        return None

    def store_filter(self, tags: tuple[str, ...]) -> Filter:
        tag = self.filter.tag(tags)
        if tag is not None:
            return Filter(tag=tag)
        return Filter(status=FilterStatus(self.filter.bucket))

    def reload(self) -> tuple[TaskListController, list[Effect]]:
        if self.vault is None:
            return replace(self, records=(), tags=(), cursor=0, done_count=0), []
        try:
            everything = self.vault.tasks.list(Filter())
            tags = collect_tags(everything)
            m = replace(self, filter=self.filter.reconcile(tags), tags=tags)
            rows = sort_tasks(self.vault.tasks.list(m.store_filter(tags)))
        except ZvaultError as e:
            logger.warning("load tasks: %s", e)
            return replace(self, records=(), cursor=0), [report(f"load tasks: {e}")]

        return replace(
            m,
            records=tuple(rows),
            done_count=sum(1 for t in everything if t.done),
            cursor=clamp(m.cursor, len(rows)),
        ), []

    def update(self, msg: Message) -> tuple[TaskListController, list[Effect]]:
        if isinstance(msg, Navigate):
            return replace(self, confirm=Confirm.NONE, status="").reload()
        if not isinstance(msg, KeyPress):
            return self, []
        if self.confirm != Confirm.NONE:
            return self._confirm(msg)
        return self._key(msg)

    def _confirm(self, msg: KeyPress) -> tuple[TaskListController, list[Effect]]:
        if msg.key in ("n", "N", "escape"):
            return replace(self, confirm=Confirm.NONE), []
        if msg.key not in ("y", "Y"):
            return self, []

        m = replace(self, confirm=Confirm.NONE)
        if m.vault is None:
            return m, []
        try:
            if self.confirm == Confirm.DELETE:
                target = m.selected
                if target is None:
                    return m, []
                m.vault.tasks.delete(target.id)
                logger.info("deleted task %s", target.id)
                status = f"deleted '{target.title}'"
            else:
                removed = m.vault.tasks.clear_done()
                logger.info("cleared %d done tasks", removed)
                status = f"cleared {removed} done tasks"
        except ZvaultError as e:
            logger.warning("task list: %s", e)
            return m, [report(e)]
        return replace(m, status=status).reload()

    def _key(self, msg: KeyPress) -> tuple[TaskListController, list[Effect]]:
        key = msg.key
        if key in ("up", "k"):
            return replace(self, cursor=max(0, self.cursor - 1)), []
        if key in ("down", "j"):
            return replace(self, cursor=clamp(self.cursor + 1, len(self.records))), []
        if key == "escape":
            return self, [navigate(ViewID.TASK_LIST.parent)]
        if key == "tab":
            m = replace(self, filter=self.filter.advance(self.tags), status="")
            return m.reload()
        if key == "n":
            return self, [navigate(ViewID.TASK_FORM)]
        if key == "x":
            if self.done_count > 0:
                return replace(self, confirm=Confirm.CLEAR_DONE, status=""), []
            return self, []

        target = self.selected
        if target is None:
            return self, []
        if key == "enter":
            return self, [navigate(ViewID.TASK_DETAIL, target.id)]
        if key == "space":
            return self._toggle(target)
        if key == "d":
            return replace(self, confirm=Confirm.DELETE, status=""), []
        return self, []

    def _toggle(self, target: Task) -> tuple[TaskListController, list[Effect]]:
        try:
            self.vault.tasks.update(target.toggled(self.clock.now()))
        except ZvaultError as e:
            logger.warning("toggle task %s: %s", target.id, e)
            return self, [report(e)]
        return replace(self, status="").reload()

    def filter_label(self) -> str:
        return "filter: " + self.filter.label(self.tags)

    def render(self) -> Text:
        out = Text("\n")
        out.append_text(muted(f"  {self.filter_label()}\n\n"))

        if not self.records:
            out.append_text(muted("  no tasks\n"))
        else:
            rows = visible_rows(self.height)
            start, end = scroll_window(self.cursor, len(self.records), rows)
            today = self.clock.now().date()
            for i in range(start, end):
                out.append_text(self._row(self.records[i], i == self.cursor, today))
            if len(self.records) > rows:
                out.append_text(
                    muted(f"\n  ({self.cursor + 1} of {len(self.records)})\n")
                )

        if self.confirm == Confirm.DELETE and self.selected is not None:
            out.append_text(
                status_line(f'Delete "{self.selected.title}"? (y/n)', STATUS_WARN)
            )
        elif self.confirm == Confirm.CLEAR_DONE:
            out.append_text(
                status_line(f"Clear {self.done_count} done tasks? (y/n)", STATUS_WARN)
            )
        if self.status:
            out.append_text(status_line(self.status, STATUS_OK))
        return out

    def _row(self, t: Task, selected: bool, today) -> Text:
        row = Text("  ")
        row.append_text(cursor(selected))
        row.append("[x] " if t.done else "[ ] ")
        if t.priority == Priority.HIGH:
            row.append("!!", style=f"bold {RED}")
        elif t.priority == Priority.MEDIUM:
            row.append(" !", style=YELLOW)
        else:
            row.append("  ")
        row.append(" ")
        row.append(t.title, style=f"strike {MUTED}" if t.done else TEXT)
        if t.due is not None:
            overdue = not t.done and is_overdue(t.due, today)
            row.append("  due: " + format_due(t.due, today), style=RED if overdue else MUTED)
        if t.tags:
            row.append("  " + " ".join("#" + tag for tag in t.tags), style=SAPPHIRE)
        row.append("\n")
        return row
