"""Read-only view of one secret with copy, reveal and a live TOTP code."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from rich.text import Text

from zvault import totp
from zvault.clipboard import copied_message
from zvault.config import TOTP_TICK_SECONDS
from zvault.controllers.base import ViewController
from zvault.errors import TotpSecretError, ZvaultError
from zvault.messages import (
    ClipboardCleared,
    ClipboardCopied,
    CopyRequested,
    Effect,
    KeyPress,
    Message,
    Navigate,
    OpenURL,
    Post,
    Schedule,
    TotpTick,
    ViewID,
    navigate,
    report,
)
from zvault.providers import Secret, SecretType
from zvault.views.style import (
    ACCENT,
    ACCENT_BOLD,
    GREEN,
    LAVENDER,
    MASK,
    MUTED,
    PEACH,
    STATUS_OK,
    STATUS_WARN,
    SUBTEXT,
    SURFACE,
    TEXT,
    badge,
    cursor,
    muted,
    status_line,
)

logger = logging.getLogger(__name__)

LABEL_WIDTH = 14
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


class FieldAction(Enum):
    NONE = "none"
    COPY = "copy"
    OPEN = "open"


@dataclass(frozen=True)
class DetailField:
    label: str
    value: str = ""
    sensitive: bool = False
    live: bool = False
    action: FieldAction = FieldAction.NONE
    color: str = LAVENDER


def _sensitive(label: str, value: str, action: FieldAction = FieldAction.COPY) -> DetailField:
    return DetailField(label, value, sensitive=True, action=action, color=PEACH)


def build_detail_fields(s: Secret) -> tuple[DetailField, ...]:
    """Ordered display fields for a secret: name, type, typed fields, metadata."""
    fields = [
        DetailField("name", s.name, color=ACCENT),
        DetailField("type", s.type.value),
    ]

    if s.type == SecretType.PASSWORD:
        fields.append(DetailField("url", s.field("url"), action=FieldAction.OPEN))
        fields.append(DetailField("username", s.field("username"), action=FieldAction.COPY))
        fields.append(_sensitive("password", s.field("password")))
        if s.has_totp:
            fields.append(_sensitive("totp secret", s.totp_secret, FieldAction.NONE))
            fields.append(
                DetailField("totp code", live=True, action=FieldAction.COPY, color=GREEN)
            )
    elif s.type == SecretType.API_KEY:
        fields.append(DetailField("service", s.field("service")))
        fields.append(_sensitive("key", s.field("key")))
    elif s.type == SecretType.SSH_KEY:
        fields.append(DetailField("label", s.field("label")))
        fields.append(_sensitive("private key", s.field("private_key")))
        fields.append(DetailField("public key", s.field("public_key"), action=FieldAction.COPY))
        if s.field("passphrase"):
            fields.append(_sensitive("passphrase", s.field("passphrase")))
    elif s.type == SecretType.NOTE:
        fields.append(DetailField("content", s.field("content")))

    if s.field("notes"):
        fields.append(DetailField("notes", s.field("notes")))
    if s.tags:
        fields.append(DetailField("tags", ", ".join(s.tags)))
    fields.append(DetailField("created", s.created_at.strftime(TIMESTAMP_FORMAT), color=SUBTEXT))
    fields.append(DetailField("updated", s.updated_at.strftime(TIMESTAMP_FORMAT), color=SUBTEXT))
    return tuple(fields)


@dataclass(frozen=True)
class SecretDetailController(ViewController):
    secret_id: str = ""
    secret: Secret | None = None
    fields: tuple[DetailField, ...] = ()
    cursor: int = 0
    show_sensitive: bool = False
    confirm_delete: bool = False
    clipboard_message: str = ""
    totp_code: str = ""
    totp_remaining: int = 0
    totp_error: str = ""
    totp_generation: int = 0

    @property
    def ticking(self) -> bool:
        """A live code is on screen and can be regenerated."""
        return self.secret is not None and self.secret.has_totp and not self.totp_error

    def update(self, msg: Message) -> tuple[SecretDetailController, list[Effect]]:
        if isinstance(msg, Navigate):
            if not isinstance(msg.payload, str):
                return self, []
            return self._open(msg.payload)
        if isinstance(msg, TotpTick):
            return self._tick(msg)
        if isinstance(msg, ClipboardCopied):
            return replace(self, clipboard_message=copied_message(msg.field)), []
        if isinstance(msg, ClipboardCleared):
            return replace(self, clipboard_message=""), []
        if isinstance(msg, KeyPress):
            if self.confirm_delete:
                return self._confirm(msg)
            return self._key(msg)
        return self, []

    def _open(self, secret_id: str) -> tuple[SecretDetailController, list[Effect]]:
        m = replace(
            self,
            secret_id=secret_id,
            secret=None,
            fields=(),
            cursor=0,
            show_sensitive=False,
            confirm_delete=False,
            clipboard_message="",
            totp_code="",
            totp_remaining=0,
            totp_error="",
            totp_generation=self.totp_generation + 1,
        )
        if m.vault is None:
            return m, []
        try:
            s = m.vault.secrets.get(secret_id)
        except ZvaultError as e:
            logger.warning("load secret %s: %s", secret_id, e)
            return m, [report(e)]

        m = replace(m, secret=s, fields=build_detail_fields(s)).refresh_totp()
        if not m.ticking:
            return m, []
        return m, [Schedule(TOTP_TICK_SECONDS, TotpTick(m.totp_generation))]

    def refresh_totp(self) -> SecretDetailController:
        if self.secret is None or not self.secret.has_totp:
            return self
        try:
            code, remaining = totp.generate(
                self.secret.totp_secret, self.clock.now().timestamp()
            )
        except TotpSecretError as e:
            return replace(self, totp_code="", totp_remaining=0, totp_error=str(e))
        return replace(self, totp_code=code, totp_remaining=remaining, totp_error="")

    def _tick(self, msg: TotpTick) -> tuple[SecretDetailController, list[Effect]]:
        # ticks armed for an earlier visit die here without re-arming
        if msg.generation != self.totp_generation or not self.ticking:
            return self, []
        m = self.refresh_totp()
        if not m.ticking:
            return m, []
        return m, [Schedule(TOTP_TICK_SECONDS, TotpTick(m.totp_generation))]

    def _confirm(self, msg: KeyPress) -> tuple[SecretDetailController, list[Effect]]:
        if msg.key in ("n", "N", "escape"):
            return replace(self, confirm_delete=False), []
        if msg.key not in ("y", "Y"):
            return self, []

        m = replace(self, confirm_delete=False)
        if m.vault is None or m.secret is None:
            return m, []
        try:
            m.vault.secrets.delete(m.secret_id)
        except ZvaultError as e:
            logger.warning("delete secret %s: %s", m.secret_id, e)
            return m, [report(e)]
        logger.info("deleted secret %s", m.secret_id)
        return m, [navigate(ViewID.SECRET_LIST)]

    def _key(self, msg: KeyPress) -> tuple[SecretDetailController, list[Effect]]:
        key = msg.key
        if key == "escape":
            return self, [navigate(ViewID.SECRET_DETAIL.parent)]
        if self.secret is None:
            return self, []
        if key in ("up", "k"):
            return replace(self, cursor=max(0, self.cursor - 1)), []
        if key in ("down", "j"):
            return replace(self, cursor=min(len(self.fields) - 1, self.cursor + 1)), []
        if key in ("enter", "c"):
            return self, self._field_action(key)
        if key == "s":
            return replace(self, show_sensitive=not self.show_sensitive), []
        if key == "e":
            return self, [navigate(ViewID.SECRET_FORM, self.secret_id)]
        if key == "d":
            return replace(self, confirm_delete=True), []
        return self, []

    def _field_action(self, key: str) -> list[Effect]:
        f = self.fields[self.cursor]
        if f.action == FieldAction.OPEN and key == "enter":
            return [OpenURL(f.value)] if f.value else []
        if f.action == FieldAction.NONE:
            return []
        value = self.totp_code if f.live else f.value
        if not value:
            return []
        return [Post(CopyRequested(f.label, value))]

    def render(self) -> Text:
        if self.secret is None:
            return Text.assemble("\n", muted("  no secret selected"), "\n")

        out = Text("\n")
        for i, f in enumerate(self.fields):
            label_style = f"bold {f.color}" if f.label == "name" else f.color
            out.append("  ")
            out.append_text(cursor(i == self.cursor))
            out.append(f.label.ljust(LABEL_WIDTH), style=label_style)
            out.append("  ")
            out.append_text(self._value(f))
            out.append("\n")

        if self.confirm_delete:
            out.append_text(
                status_line(f"delete '{self.secret.name}'? (y/n)", STATUS_WARN)
            )
        if self.clipboard_message:
            out.append_text(status_line(self.clipboard_message, STATUS_OK))
        return out

    def _value(self, f: DetailField) -> Text:
        if f.live:
            if self.totp_error:
                return Text(self.totp_error, style=STATUS_WARN)
            if not self.totp_code:
                return Text("generating...", style=SURFACE)
            return Text.assemble(
                (self.totp_code, GREEN), " ", (f"({self.totp_remaining}s)", MUTED)
            )
        if f.label == "type":
            return badge(SecretType(f.value))
        if f.sensitive and not self.show_sensitive:
            return Text(MASK, style=SURFACE)
        if f.label == "name":
            return Text(f.value, style=ACCENT_BOLD)
        return Text(f.value, style=TEXT)
