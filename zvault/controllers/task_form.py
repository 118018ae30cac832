"""Create/edit form for tasks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum

from rich.text import Text

from zvault.controllers.base import ViewController
from zvault.controllers.text_input import TextInput
from zvault.dates import ACCEPTED_FORMS, format_for_edit, parse_relative
from zvault.errors import ValidationError, ZvaultError
from zvault.messages import Effect, KeyPress, Message, Navigate, ViewID, navigate, report
from zvault.providers import Priority, Task, new_task, parse_tags
from zvault.views.style import (
    ACCENT_BOLD,
    RED,
    STATUS_ERR,
    SUBTEXT,
    TEXT,
    YELLOW,
    cursor,
    muted,
    status_line,
)

logger = logging.getLogger(__name__)


class FormField(IntEnum):
    TITLE = 0
    PRIORITY = 1
    DUE = 2
    TAGS = 3


_PRIORITY_STYLES = {Priority.HIGH: f"bold {RED}", Priority.MEDIUM: YELLOW}


def _title_input() -> TextInput:
    return TextInput(placeholder="task title", focused=True)


def _due_input() -> TextInput:
    return TextInput(placeholder=ACCEPTED_FORMS.removeprefix("use "))


def _tags_input() -> TextInput:
    return TextInput(placeholder="comma-separated tags")


@dataclass(frozen=True)
class TaskFormController(ViewController):
    editing: Task | None = None
    title: TextInput = field(default_factory=_title_input)
    due: TextInput = field(default_factory=_due_input)
    tags: TextInput = field(default_factory=_tags_input)
    priority: Priority = Priority.NONE
    focused: FormField = FormField.TITLE
    error: str = ""

    @property
    def captures_text(self) -> bool:
        return True

    def _focus(self, target: FormField) -> TaskFormController:
        return replace(
            self,
            focused=target,
            title=self.title.focus() if target == FormField.TITLE else self.title.blur(),
            due=self.due.focus() if target == FormField.DUE else self.due.blur(),
            tags=self.tags.focus() if target == FormField.TAGS else self.tags.blur(),
        )

    def _step(self, delta: int) -> TaskFormController:
        return self._focus(FormField((self.focused + delta) % len(FormField)))

    def update(self, msg: Message) -> tuple[TaskFormController, list[Effect]]:
        if isinstance(msg, Navigate):
            if isinstance(msg.payload, Task):
                return self.for_edit(msg.payload), []
            return self.for_create(), []
        if not isinstance(msg, KeyPress):
            return self, []
        return replace(self, error="")._key(msg)

    def for_create(self) -> TaskFormController:
        return replace(
            self,
            editing=None,
            title=self.title.set(""),
            due=self.due.set(""),
            tags=self.tags.set(""),
            priority=Priority.NONE,
            error="",
        )._focus(FormField.TITLE)

    def for_edit(self, task: Task) -> TaskFormController:
        return replace(
            self,
            editing=task,
            title=self.title.set(task.title),
            due=self.due.set(format_for_edit(task.due)),
            tags=self.tags.set(", ".join(task.tags)),
            priority=task.priority,
            error="",
        )._focus(FormField.TITLE)

    def _key(self, msg: KeyPress) -> tuple[TaskFormController, list[Effect]]:
        key = msg.key
        if key == "escape":
            return self, [navigate(ViewID.TASK_LIST)]
        if key == "ctrl+s":
            return self.save()
        if key == "tab":
            return self._step(1), []
        if key == "shift+tab":
            return self._step(-1), []

        if self.focused == FormField.PRIORITY:
            if key in ("enter", "space"):
                return replace(self, priority=self.priority.next()), []
            return self, []
        if key == "enter":
            if self.focused == FormField.TAGS:
                return self.save()
            return self._step(1), []

        if self.focused == FormField.TITLE:
            return replace(self, title=self.title.handle(msg)), []
        if self.focused == FormField.DUE:
            return replace(self, due=self.due.handle(msg)), []
        return replace(self, tags=self.tags.handle(msg)), []

    def save(self) -> tuple[TaskFormController, list[Effect]]:
        title = self.title.value.strip()
        if not title:
            return replace(self, error="title is required"), []
        try:
            due = parse_relative(self.due.value, self.clock.now().date())
        except ValidationError as e:
            return replace(self, error=str(e)), []
        tags = parse_tags(self.tags.value)

        if self.vault is None:
            return replace(self, error="vault not available"), []
        try:
            if self.editing is not None:
                self.vault.tasks.update(
                    replace(self.editing, title=title, priority=self.priority, due=due, tags=tags)
                )
                logger.info("updated task %s", self.editing.id)
            else:
                task = replace(
                    new_task(title, self.clock.now()),
                    priority=self.priority,
                    due=due,
                    tags=tags,
                )
                self.vault.tasks.add(task)
                logger.info("added task %s", task.id)
        except ZvaultError as e:
            logger.warning("save task: %s", e)
            return self, [report(f"save task: {e}")]
        return self, [navigate(ViewID.TASK_LIST)]

    def _label(self, text: str, target: FormField) -> Text:
        style = ACCENT_BOLD if self.focused == target else SUBTEXT
        return Text.assemble("  ", (text, style), "\n")

    def render(self) -> Text:
        out = Text("\n")
        mode = "edit task" if self.editing is not None else "new task"
        out.append(f"  {mode}\n\n", style=ACCENT_BOLD)

        out.append_text(self._label("title", FormField.TITLE))
        out.append_text(Text.assemble("  ", self.title.render(), "\n\n"))

        out.append_text(self._label("priority", FormField.PRIORITY))
        out.append_text(self._priority_selector())
        out.append("\n\n")

        out.append_text(self._label("due date", FormField.DUE))
        out.append_text(Text.assemble("  ", self.due.render(), "\n\n"))

        out.append_text(self._label("tags", FormField.TAGS))
        out.append_text(Text.assemble("  ", self.tags.render(), "\n"))

        if self.error:
            out.append_text(status_line(self.error, STATUS_ERR))
        return out

    def _priority_selector(self) -> Text:
        style = _PRIORITY_STYLES.get(self.priority, TEXT)
        out = Text("  ")
        out.append_text(cursor(self.focused == FormField.PRIORITY))
        out.append(self.priority.label, style=style)
        if self.focused == FormField.PRIORITY:
            out.append(" ")
            out.append_text(muted("(enter/space to cycle)"))
        return out
