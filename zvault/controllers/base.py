"""State shared by every view controller."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Self

from rich.text import Text

from zvault.messages import Effect, Message
from zvault.providers import Clock, SystemClock


@dataclass(frozen=True)
class ViewController:
    """Viewport size, the vault handle (None until unlock) and the clock."""

    width: int = 0
    height: int = 0
    vault: Any = field(default=None, compare=False, repr=False)
    clock: Clock = field(default_factory=SystemClock, compare=False, repr=False)

    @property
    def captures_text(self) -> bool:
        """True while a free-text field has focus (q must type, not quit)."""
        return False

    def resized(self, width: int, height: int) -> Self:
        return replace(self, width=width, height=height)

    def with_vault(self, vault: Any) -> Self:
        return replace(self, vault=vault)

    def update(self, msg: Message) -> tuple[Self, list[Effect]]:
        raise NotImplementedError

    def render(self) -> Text:
        raise NotImplementedError
