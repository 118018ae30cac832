"""
Messages consumed by the controllers and effects they return.

A message is created by input, a timer or finished background work, and is
handled exactly once by Root.update. Effects are descriptions of work for
the runtime; controllers never perform them inline.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class ViewID(Enum):
    """Identifies the active view."""

    UNLOCK = "unlock"
    MENU = "menu"
    SECRET_LIST = "secret_list"
    SECRET_DETAIL = "secret_detail"
    SECRET_FORM = "secret_form"
    TASK_LIST = "task_list"
    TASK_DETAIL = "task_detail"
    TASK_FORM = "task_form"

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def parent(self) -> ViewID:
        """Logical parent for back-navigation."""
        return _PARENTS.get(self, ViewID.MENU)


_TITLES = {
    ViewID.UNLOCK: "Unlock",
    ViewID.MENU: "Menu",
    ViewID.SECRET_LIST: "Secrets",
    ViewID.SECRET_DETAIL: "Secret",
    ViewID.SECRET_FORM: "Edit Secret",
    ViewID.TASK_LIST: "Tasks",
    ViewID.TASK_DETAIL: "Task",
    ViewID.TASK_FORM: "Edit Task",
}

_PARENTS = {
    ViewID.SECRET_LIST: ViewID.MENU,
    ViewID.TASK_LIST: ViewID.MENU,
    ViewID.SECRET_DETAIL: ViewID.SECRET_LIST,
    ViewID.SECRET_FORM: ViewID.SECRET_LIST,
    ViewID.TASK_DETAIL: ViewID.TASK_LIST,
    ViewID.TASK_FORM: ViewID.TASK_LIST,
}


# Messages


class Message:
    """Base class for everything Root.update accepts."""


_NAMED_CHARACTERS = {"space": " "}


@dataclass(frozen=True)
class KeyPress(Message):
    """A keystroke. character is set for printable input."""

    key: str
    character: str | None = None

    @classmethod
    def named(cls, key: str) -> KeyPress:
        """Build a keypress from a key name ("a", "enter", "space", "ctrl+s")."""
        if len(key) == 1:
            return cls(key, key)
        return cls(key, _NAMED_CHARACTERS.get(key))

    @property
    def printable(self) -> bool:
        return self.character is not None and self.character.isprintable()


@dataclass(frozen=True)
class Resize(Message):
    width: int
    height: int


@dataclass(frozen=True)
class Navigate(Message):
    """Request a view transition. payload is a secret id, a Task, or None."""

    view: ViewID
    payload: Any = None


@dataclass(frozen=True)
class TransientError(Message):
    error: str


@dataclass(frozen=True)
class VaultReady(Message):
    vault: Any


@dataclass(frozen=True)
class CopyRequested(Message):
    """A view wants field's value on the clipboard."""

    field: str
    value: str = dataclasses.field(repr=False)


@dataclass(frozen=True)
class ClipboardCopied(Message):
    field: str


@dataclass(frozen=True)
class ClipboardCleared(Message):
    pass


@dataclass(frozen=True)
class ClipboardClearDue(Message):
    """The auto-clear timer for copy number `generation` fired."""

    generation: int


@dataclass(frozen=True)
class TotpTick(Message):
    generation: int


# Effects


class Effect:
    """Base class for work the runtime performs on a controller's behalf."""


@dataclass(frozen=True)
class Post(Effect):
    """Enqueue a message behind the one being handled."""

    message: Message


@dataclass(frozen=True)
class OpenVault(Effect):
    directory: Path
    password: str = dataclasses.field(repr=False)


@dataclass(frozen=True)
class CopyToClipboard(Effect):
    field: str
    value: str = dataclasses.field(repr=False)


@dataclass(frozen=True)
class ClearClipboard(Effect):
    pass


@dataclass(frozen=True)
class OpenURL(Effect):
    url: str


@dataclass(frozen=True)
class Schedule(Effect):
    """Deliver message after delay seconds."""

    delay: float
    message: Message


@dataclass(frozen=True)
class Quit(Effect):
    pass


def navigate(view: ViewID, payload: Any = None) -> Post:
    return Post(Navigate(view, payload))


def report(error: Exception | str) -> Post:
    """Surface an error as a transient banner."""
    return Post(TransientError(str(error)))
