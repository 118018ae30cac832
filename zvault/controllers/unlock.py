"""Unlock screen: opens an existing vault or creates one on first run."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

from rich.text import Text

from zvault.controllers.base import ViewController
from zvault.controllers.text_input import TextInput
from zvault.messages import Effect, KeyPress, Message, OpenVault, TransientError
from zvault.views.style import ACCENT_BOLD, STATUS_ERR, SUBTEXT, muted, status_line

PASSWORD = 0
CONFIRM = 1


def _password_input(placeholder: str, focused: bool = False) -> TextInput:
    return TextInput(placeholder=placeholder, masked=True, focused=focused)


@dataclass(frozen=True)
class UnlockController(ViewController):
    vault_dir: Path = field(default_factory=Path)
    first_run: bool = False
    password: TextInput = field(default_factory=lambda: _password_input("master password", True))
    confirm: TextInput = field(default_factory=lambda: _password_input("confirm password"))
    focused: int = PASSWORD
    error: str = ""
    opening: bool = False

    @classmethod
    def for_dir(cls, vault_dir: Path, **kwargs) -> UnlockController:
        """First-run mode when the vault directory does not exist yet."""
        return cls(vault_dir=vault_dir, first_run=not vault_dir.exists(), **kwargs)

    @property
    def captures_text(self) -> bool:
        return True

    def update(self, msg: Message) -> tuple[UnlockController, list[Effect]]:
        if isinstance(msg, TransientError):
            # failed open: keep what was typed, show why
            return replace(self, error=msg.error, opening=False), []
        if not isinstance(msg, KeyPress):
            return self, []

        m = replace(self, error="")
        if msg.key == "enter":
            return m._submit()
        if msg.key == "tab":
            if m.first_run:
                return m._switch_field(), []
            return m, []

        if m.focused == PASSWORD:
            return replace(m, password=m.password.handle(msg)), []
        return replace(m, confirm=m.confirm.handle(msg)), []

    def _submit(self) -> tuple[UnlockController, list[Effect]]:
        if self.opening:
            return self, []
        pw = self.password.value
        if not pw:
            return replace(self, error="password cannot be empty"), []

        if self.first_run:
            if self.focused == PASSWORD:
                return self._switch_field(), []
            if pw != self.confirm.value:
                return replace(
                    self, error="passwords do not match", confirm=self.confirm.set("")
                ), []

        return replace(self, opening=True), [OpenVault(self.vault_dir, pw)]

    def _switch_field(self) -> UnlockController:
        if self.focused == PASSWORD:
            return replace(
                self,
                focused=CONFIRM,
                password=self.password.blur(),
                confirm=self.confirm.focus(),
            )
        return replace(
            self,
            focused=PASSWORD,
            confirm=self.confirm.blur(),
            password=self.password.focus(),
        )

    def render(self) -> Text:
        out = Text("\n")
        if self.first_run:
            out.append("  Create New Vault\n\n", style=ACCENT_BOLD)
            out.append_text(muted("  Choose a master password to protect your vault.\n\n"))
        else:
            out.append("  Unlock Vault\n\n", style=ACCENT_BOLD)
            out.append_text(muted("  Enter your master password.\n\n"))

        out.append("  Password\n", style=SUBTEXT)
        out.append_text(Text.assemble("  ", self.password.render(), "\n"))

        if self.first_run:
            out.append("\n  Confirm\n", style=SUBTEXT)
            out.append_text(Text.assemble("  ", self.confirm.render(), "\n"))

        if self.opening:
            out.append_text(muted("\n  opening vault...\n"))
        if self.error:
            out.append_text(status_line(self.error, STATUS_ERR))
        return out
