"""Full view of one task."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from rich.text import Text

from zvault.controllers.base import ViewController
from zvault.dates import format_relative, is_overdue
from zvault.errors import ZvaultError
from zvault.messages import Effect, KeyPress, Message, Navigate, ViewID, navigate, report
from zvault.providers import Priority, Task
from zvault.views.style import (
    GREEN,
    MUTED,
    RED,
    SAPPHIRE,
    STATUS_WARN,
    TEXT,
    YELLOW,
    muted,
    status_line,
)

logger = logging.getLogger(__name__)

LABEL_WIDTH = 12
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

_PRIORITY_COLORS = {Priority.HIGH: RED, Priority.MEDIUM: YELLOW}


def format_due_detail(task: Task, today) -> str:
    """"relative (YYYY-MM-DD)", or empty when the task has no due date."""
    if task.due is None:
        return ""
    return f"{format_relative(task.due, today)} ({task.due.isoformat()})"


@dataclass(frozen=True)
class TaskDetailController(ViewController):
    task: Task | None = None
    confirm_delete: bool = False

    def update(self, msg: Message) -> tuple[TaskDetailController, list[Effect]]:
        if isinstance(msg, Navigate):
            if isinstance(msg.payload, str):
                return self.load(msg.payload)
            return self, []
        if not isinstance(msg, KeyPress):
            return self, []
        if self.confirm_delete:
            return self._confirm(msg)
        return self._key(msg)

    def load(self, task_id: str) -> tuple[TaskDetailController, list[Effect]]:
        m = replace(self, task=None, confirm_delete=False)
        if m.vault is None:
            return m, []
        try:
            return replace(m, task=m.vault.tasks.get(task_id)), []
        except ZvaultError as e:
            logger.warning("load task %s: %s", task_id, e)
            return m, [report(e)]

    def _confirm(self, msg: KeyPress) -> tuple[TaskDetailController, list[Effect]]:
        if msg.key in ("n", "N", "escape"):
            return replace(self, confirm_delete=False), []
        if msg.key not in ("y", "Y"):
            return self, []
        m = replace(self, confirm_delete=False)
        try:
            m.vault.tasks.delete(m.task.id)
        except ZvaultError as e:
            logger.warning("delete task %s: %s", m.task.id, e)
            return m, [report(e)]
        logger.info("deleted task %s", m.task.id)
        return m, [navigate(ViewID.TASK_LIST)]

    def _key(self, msg: KeyPress) -> tuple[TaskDetailController, list[Effect]]:
        if msg.key == "escape":
            return self, [navigate(ViewID.TASK_DETAIL.parent)]
        if self.task is None or self.vault is None:
            return self, []
        if msg.key == "e":
            return self, [navigate(ViewID.TASK_FORM, self.task)]
        if msg.key == "space":
            try:
                stored = self.vault.tasks.update(self.task.toggled(self.clock.now()))
            except ZvaultError as e:
                logger.warning("toggle task %s: %s", self.task.id, e)
                return self, [report(e)]
            return replace(self, task=stored), []
        if msg.key == "d":
            return replace(self, confirm_delete=True), []
        return self, []

    def _line(self, label: str, value: Text) -> Text:
        return Text.assemble("  ", (label.ljust(LABEL_WIDTH), MUTED), value, "\n")

    def render(self) -> Text:
        t = self.task
        if t is None:
            return Text.assemble("\n", muted("  no task selected"), "\n")

        today = self.clock.now().date()
        out = Text("\n")
        out.append(f"  {t.title}\n\n", style=f"bold {TEXT}")
        out.append_text(
            self._line("status", Text("done", GREEN) if t.done else Text("pending", YELLOW))
        )
        out.append_text(
            self._line("priority", Text(t.priority.label, _PRIORITY_COLORS.get(t.priority, TEXT)))
        )
        if t.due is not None:
            overdue = not t.done and is_overdue(t.due, today)
            out.append_text(
                self._line("due", Text(format_due_detail(t, today), RED if overdue else TEXT))
            )
        if t.tags:
            out.append_text(
                self._line("tags", Text(" ".join("#" + tag for tag in t.tags), SAPPHIRE))
            )
        out.append_text(self._line("created", muted(t.created_at.strftime(TIMESTAMP_FORMAT))))
        if t.completed_at is not None:
            out.append_text(
                self._line("completed", muted(t.completed_at.strftime(TIMESTAMP_FORMAT)))
            )

        if self.confirm_delete:
            out.append_text(status_line(f'delete "{t.title}"? (y/n)', STATUS_WARN))
        return out
