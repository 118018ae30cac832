"""
Root controller: owns the active view and one state per sub-controller.

Global messages (resize, navigation, vault-ready, errors, clipboard and
timer traffic, quit keys) are handled here; everything else goes to the
active sub-controller, whose returned state replaces the old one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from rich.text import Text

from zvault.clipboard import ClipboardSchedule
from zvault.controllers.base import ViewController
from zvault.controllers.menu import MenuController
from zvault.controllers.secret_detail import SecretDetailController
from zvault.controllers.secret_form import SecretFormController
from zvault.controllers.secret_list import SecretListController
from zvault.controllers.task_detail import TaskDetailController
from zvault.controllers.task_form import TaskFormController
from zvault.controllers.task_list import TaskListController
from zvault.controllers.unlock import UnlockController
from zvault.messages import (
    ClipboardClearDue,
    ClipboardCleared,
    ClipboardCopied,
    CopyRequested,
    Effect,
    KeyPress,
    Message,
    Navigate,
    Quit,
    Resize,
    TotpTick,
    TransientError,
    VaultReady,
    ViewID,
)
from zvault.providers import Clock, SystemClock
from zvault.views.chrome import render_footer, render_header, render_rule
from zvault.views.style import STATUS_ERR

logger = logging.getLogger(__name__)

FORCE_QUIT = "ctrl+c"
QUIT = "q"

_SLOTS = {
    ViewID.UNLOCK: "unlock",
    ViewID.MENU: "menu",
    ViewID.SECRET_LIST: "secret_list",
    ViewID.SECRET_DETAIL: "secret_detail",
    ViewID.SECRET_FORM: "secret_form",
    ViewID.TASK_LIST: "task_list",
    ViewID.TASK_DETAIL: "task_detail",
    ViewID.TASK_FORM: "task_form",
}


@dataclass(frozen=True)
class Root:
    unlock: UnlockController
    menu: MenuController
    secret_list: SecretListController
    secret_detail: SecretDetailController
    secret_form: SecretFormController
    task_list: TaskListController
    task_detail: TaskDetailController
    task_form: TaskFormController
    view: ViewID = ViewID.UNLOCK
    width: int = 0
    height: int = 0
    vault: Any = field(default=None, compare=False, repr=False)
    error: str = ""
    clipboard: ClipboardSchedule = field(default_factory=ClipboardSchedule)

    @classmethod
    def create(cls, vault_dir: Path, clock: Clock | None = None, **kwargs) -> Root:
        clock = clock or SystemClock()
        return cls(
            unlock=UnlockController.for_dir(Path(vault_dir), clock=clock),
            menu=MenuController(clock=clock),
            secret_list=SecretListController(clock=clock),
            secret_detail=SecretDetailController(clock=clock),
            secret_form=SecretFormController(clock=clock),
            task_list=TaskListController(clock=clock),
            task_detail=TaskDetailController(clock=clock),
            task_form=TaskFormController(clock=clock),
            **kwargs,
        )

    @property
    def active(self) -> ViewController:
        return getattr(self, _SLOTS[self.view])

    def controller(self, view: ViewID) -> ViewController:
        return getattr(self, _SLOTS[view])

    def _forward(self, view: ViewID, msg: Message) -> tuple[Root, list[Effect]]:
        slot = _SLOTS[view]
        state, effects = getattr(self, slot).update(msg)
        return replace(self, **{slot: state}), effects

    def _each(self, fn) -> Root:
        return replace(self, **{slot: fn(getattr(self, slot)) for slot in _SLOTS.values()})

    def update(self, msg: Message) -> tuple[Root, list[Effect]]:
        if isinstance(msg, KeyPress):
            return self._key(msg)

        if isinstance(msg, Resize):
            m = replace(self, width=msg.width, height=msg.height)
            return m._each(lambda c: c.resized(msg.width, msg.height)), []

        if isinstance(msg, Navigate):
            m, effects = replace(self, view=msg.view, error="")._forward(msg.view, msg)
            if msg.view == ViewID.MENU:
                m = replace(m, menu=m.menu.refresh_counts())
            return m, effects

        if isinstance(msg, VaultReady):
            logger.info("vault ready")
            m = replace(self, vault=msg.vault, view=ViewID.MENU, error="")
            m = m._each(lambda c: c.with_vault(msg.vault))
            return replace(m, menu=m.menu.refresh_counts()), []

        if isinstance(msg, TransientError):
            if self.view == ViewID.UNLOCK:
                return self._forward(ViewID.UNLOCK, msg)
            return replace(self, error=msg.error), []

        if isinstance(msg, CopyRequested):
            schedule, effects = self.clipboard.copy(msg.field, msg.value)
            return replace(self, clipboard=schedule), effects

        if isinstance(msg, ClipboardClearDue):
            schedule, effects = self.clipboard.expire(msg.generation)
            return replace(self, clipboard=schedule), effects

        if isinstance(msg, (ClipboardCopied, ClipboardCleared)):
            return self._forward(ViewID.SECRET_DETAIL, msg)

        if isinstance(msg, TotpTick):
            # a tick that outlived its view stops the chain here
            if self.view != ViewID.SECRET_DETAIL:
                return self, []
            return self._forward(ViewID.SECRET_DETAIL, msg)

        return self._forward(self.view, msg)

    def _key(self, msg: KeyPress) -> tuple[Root, list[Effect]]:
        if msg.key == FORCE_QUIT:
            return self, [Quit()]
        if msg.key == QUIT and not self.active.captures_text:
            return self, [Quit()]
        return self._forward(self.view, msg)

    def render(self) -> Text:
        out = Text("\n")
        out.append_text(render_header(self.view))
        out.append("\n")
        out.append_text(render_rule(self.width))
        out.append("\n")
        out.append_text(self.active.render())
        if self.error and self.view != ViewID.UNLOCK:
            out.append("\n")
            out.append("  " + self.error, style=STATUS_ERR)
            out.append("\n")
        out.append("\n")
        out.append_text(render_footer(self.view))
        out.append("\n")
        return out
