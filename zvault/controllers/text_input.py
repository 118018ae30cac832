"""Single-line text field."""

from __future__ import annotations

from dataclasses import dataclass, replace

from rich.text import Text

from zvault.messages import KeyPress
from zvault.views.style import ACCENT, MUTED, TEXT

ECHO_CHARACTER = "•"


@dataclass(frozen=True)
class TextInput:
    value: str = ""
    placeholder: str = ""
    masked: bool = False
    focused: bool = False

    def handle(self, key: KeyPress) -> TextInput:
        """Apply an editing key; unrelated keys return self unchanged."""
        if key.key == "backspace":
            return replace(self, value=self.value[:-1])
        if key.key == "ctrl+u":
            return replace(self, value="")
        if key.printable:
            return replace(self, value=self.value + key.character)
        return self

    def set(self, value: str) -> TextInput:
        return replace(self, value=value)

    def focus(self) -> TextInput:
        return replace(self, focused=True)

    def blur(self) -> TextInput:
        return replace(self, focused=False)

    def render(self) -> Text:
        out = Text("> ", style=ACCENT)
        if not self.value and self.placeholder:
            out.append(self.placeholder, style=MUTED)
        elif self.masked:
            out.append(ECHO_CHARACTER * len(self.value), style=TEXT)
        else:
            out.append(self.value, style=TEXT)
        if self.focused:
            out.append("█", style=ACCENT)
        return out
