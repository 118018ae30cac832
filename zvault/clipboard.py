"""Clipboard primitive and the auto-clear schedule."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

import pyperclip

from zvault.config import CLIPBOARD_CLEAR_SECONDS
from zvault.errors import ClipboardError
from zvault.messages import (
    ClearClipboard,
    ClipboardClearDue,
    CopyToClipboard,
    Effect,
    Schedule,
)

logger = logging.getLogger(__name__)


class SystemClipboard:
    """Clipboard backed by pyperclip."""

    def copy(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(str(e)) from e

    def clear(self) -> None:
        try:
            pyperclip.copy("")
        except pyperclip.PyperclipException as e:
            logger.debug("clipboard clear failed: %s", e)


@dataclass(frozen=True)
class ClipboardSchedule:
    """
    Tracks the single pending clear deadline.

    Every copy bumps the generation and arms a fresh timer tagged with it.
    Only the timer carrying the latest generation clears the clipboard, so
    a second copy always gets its full window.
    """

    generation: int = 0
    delay: float = CLIPBOARD_CLEAR_SECONDS

    def copy(self, field: str, value: str) -> tuple[ClipboardSchedule, list[Effect]]:
        nxt = replace(self, generation=self.generation + 1)
        return nxt, [
            CopyToClipboard(field, value),
            Schedule(self.delay, ClipboardClearDue(nxt.generation)),
        ]

    def expire(self, generation: int) -> tuple[ClipboardSchedule, list[Effect]]:
        if generation != self.generation:
            return self, []
        return self, [ClearClipboard()]


def copied_message(field: str, delay: float = CLIPBOARD_CLEAR_SECONDS) -> str:
    return f"copied {field} (clears in {delay:g}s)"
