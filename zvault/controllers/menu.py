"""Main menu with live record counts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from rich.text import Text

from zvault.controllers.base import ViewController
from zvault.errors import ZvaultError
from zvault.messages import Effect, KeyPress, Message, ViewID, navigate
from zvault.providers import Filter, FilterStatus
from zvault.views.style import ACCENT_BOLD, MUTED, TEXT, cursor

logger = logging.getLogger(__name__)

ITEMS = (
    ("Secrets", ViewID.SECRET_LIST),
    ("Tasks", ViewID.TASK_LIST),
)


@dataclass(frozen=True)
class MenuController(ViewController):
    cursor: int = 0
    secret_count: int = 0
    pending_count: int = 0

    def refresh_counts(self) -> MenuController:
        """Reload counts from the vault; store errors keep the old counts."""
        if self.vault is None:
            return self
        m = self
        try:
            m = replace(m, secret_count=len(self.vault.secrets.list()))
            pending = self.vault.tasks.list(Filter(status=FilterStatus.PENDING))
            m = replace(m, pending_count=len(pending))
        except ZvaultError as e:
            logger.warning("menu counts: %s", e)
        return m

    def update(self, msg: Message) -> tuple[MenuController, list[Effect]]:
        if not isinstance(msg, KeyPress):
            return self, []
        if msg.key in ("up", "k"):
            return replace(self, cursor=max(0, self.cursor - 1)), []
        if msg.key in ("down", "j"):
            return replace(self, cursor=min(len(ITEMS) - 1, self.cursor + 1)), []
        if msg.key == "enter":
            return self, [navigate(ITEMS[self.cursor][1])]
        return self, []

    def render(self) -> Text:
        counts = (f"({self.secret_count})", f"({self.pending_count} pending)")
        out = Text("\n")
        for i, ((label, _), count) in enumerate(zip(ITEMS, counts)):
            selected = i == self.cursor
            out.append("  ")
            out.append_text(cursor(selected))
            out.append(label, style=ACCENT_BOLD if selected else TEXT)
            out.append(" " + count + "\n", style=MUTED)
        return out
