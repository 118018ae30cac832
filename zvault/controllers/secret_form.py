"""Create/edit form for secrets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from rich.text import Text

from zvault.controllers.base import ViewController
from zvault.controllers.text_input import TextInput
from zvault.errors import ZvaultError
from zvault.messages import Effect, KeyPress, Message, Navigate, ViewID, navigate, report
from zvault.providers import (
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
    Secret,
    SecretType,
    new_secret,
    parse_tags,
)
from zvault.views.style import (
    ACCENT_BOLD,
    MUTED,
    STATUS_ERR,
    STATUS_WARN,
    SUBTEXT,
    SURFACE,
    cursor,
    muted,
    status_line,
)

logger = logging.getLogger(__name__)

TYPE_OPTIONS = tuple(SecretType)

# Focus position of the type selector in create mode.
TYPE_SELECTOR = -1

MASKED_KEYS = frozenset({"password", "totp_secret", "key", "private_key", "passphrase"})

_LABELS = {
    "totp_secret": "totp secret",
    "private_key": "private key",
    "public_key": "public key",
}


@dataclass(frozen=True)
class FormInput:
    key: str
    input: TextInput

    @property
    def label(self) -> str:
        return _LABELS.get(self.key, self.key)

    @property
    def value(self) -> str:
        return self.input.value


def form_keys(secret_type: SecretType) -> tuple[str, ...]:
    """name, the type's fields in display order, tags."""
    return ("name",) + REQUIRED_FIELDS[secret_type] + OPTIONAL_FIELDS[secret_type] + ("tags",)


def build_inputs(secret_type: SecretType, s: Secret | None = None) -> tuple[FormInput, ...]:
    inputs = []
    for key in form_keys(secret_type):
        if s is None:
            value = ""
        elif key == "name":
            value = s.name
        elif key == "tags":
            value = ", ".join(s.tags)
        else:
            value = s.field(key)
        label = _LABELS.get(key, key)
        inputs.append(
            FormInput(key, TextInput(value, placeholder=label, masked=key in MASKED_KEYS))
        )
    return tuple(inputs)


@dataclass(frozen=True)
class SecretFormController(ViewController):
    editing: bool = False
    edit_id: str = ""
    loaded: bool = False
    secret_type: SecretType = SecretType.PASSWORD
    inputs: tuple[FormInput, ...] = ()
    focused: int = TYPE_SELECTOR
    dirty: bool = False
    confirm_discard: bool = False
    error: str = ""

    @property
    def captures_text(self) -> bool:
        return True

    @property
    def min_focus(self) -> int:
        return 0 if self.editing else TYPE_SELECTOR

    def values(self) -> dict[str, str]:
        return {i.key: i.value for i in self.inputs}

    def _focus(self, index: int) -> SecretFormController:
        inputs = tuple(
            replace(i, input=i.input.focus() if n == index else i.input.blur())
            for n, i in enumerate(self.inputs)
        )
        return replace(self, inputs=inputs, focused=index)

    def update(self, msg: Message) -> tuple[SecretFormController, list[Effect]]:
        if isinstance(msg, Navigate):
            if msg.payload is None:
                return self.for_create(), []
            if isinstance(msg.payload, str):
                return self.for_edit(msg.payload)
            return self, []
        if not isinstance(msg, KeyPress):
            return self, []
        if self.confirm_discard:
            return self._confirm(msg)
        return replace(self, error="")._key(msg)

    def for_create(self) -> SecretFormController:
        return replace(
            self,
            editing=False,
            edit_id="",
            loaded=True,
            secret_type=TYPE_OPTIONS[0],
            inputs=build_inputs(TYPE_OPTIONS[0]),
            dirty=False,
            confirm_discard=False,
            error="",
        )._focus(TYPE_SELECTOR)

    def for_edit(self, secret_id: str) -> tuple[SecretFormController, list[Effect]]:
        m = replace(
            self,
            editing=True,
            edit_id=secret_id,
            loaded=False,
            inputs=(),
            dirty=False,
            confirm_discard=False,
            error="",
        )
        if m.vault is None:
            return m, []
        try:
            s = m.vault.secrets.get(secret_id)
        except ZvaultError as e:
            logger.warning("load secret %s for edit: %s", secret_id, e)
            return m, [report(e)]
        m = replace(m, loaded=True, secret_type=s.type, inputs=build_inputs(s.type, s))
        return m._focus(0), []

    def _confirm(self, msg: KeyPress) -> tuple[SecretFormController, list[Effect]]:
        if msg.key in ("y", "Y"):
            return replace(self, confirm_discard=False), [navigate(ViewID.SECRET_LIST)]
        if msg.key in ("n", "N", "escape"):
            return replace(self, confirm_discard=False), []
        return self, []

    def _key(self, msg: KeyPress) -> tuple[SecretFormController, list[Effect]]:
        key = msg.key
        if key == "escape":
            if self.dirty:
                return replace(self, confirm_discard=True), []
            return self, [navigate(ViewID.SECRET_LIST)]
        if not self.loaded:
            return self, []
        if key == "ctrl+s":
            return self.save()
        if key == "shift+tab":
            return self._focus(max(self.min_focus, self.focused - 1)), []
        if key == "tab":
            return self._focus(min(len(self.inputs) - 1, self.focused + 1)), []
        if key == "enter":
            if self.focused == len(self.inputs) - 1:
                return self.save()
            return self._focus(self.focused + 1), []

        if self.focused == TYPE_SELECTOR:
            if key == "left":
                return self._change_type(-1), []
            if key == "right":
                return self._change_type(1), []
            return self, []

        current = self.inputs[self.focused]
        edited = current.input.handle(msg)
        if edited == current.input:
            return self, []
        inputs = list(self.inputs)
        inputs[self.focused] = replace(current, input=edited)
        return replace(self, inputs=tuple(inputs), dirty=True), []

    def _change_type(self, step: int) -> SecretFormController:
        """Cycle the type, rebuild inputs and keep only the typed name."""
        index = (TYPE_OPTIONS.index(self.secret_type) + step) % len(TYPE_OPTIONS)
        secret_type = TYPE_OPTIONS[index]
        inputs = list(build_inputs(secret_type))
        inputs[0] = replace(inputs[0], input=inputs[0].input.set(self.values().get("name", "")))
        m = replace(self, secret_type=secret_type, inputs=tuple(inputs), dirty=True)
        return m._focus(TYPE_SELECTOR)

    def save(self) -> tuple[SecretFormController, list[Effect]]:
        vals = self.values()
        name = vals.pop("name", "").strip()
        if not name:
            return replace(self, error="name is required"), []
        tags = parse_tags(vals.pop("tags", ""))

        if self.vault is None:
            return self, [navigate(ViewID.SECRET_LIST)]
        try:
            if self.editing:
                self._save_edit(name, vals, tags)
            else:
                s = new_secret(self.secret_type, name, vals, self.clock.now(), tags)
                self.vault.secrets.add(s)
                logger.info("added secret %s", s.id)
        except ZvaultError as e:
            logger.warning("save secret: %s", e)
            return self, [report(e)]
        return replace(self, dirty=False), [navigate(ViewID.SECRET_LIST)]

    def _save_edit(self, name: str, vals: dict[str, str], tags: tuple[str, ...]) -> None:
        current = self.vault.secrets.get(self.edit_id)
        fields = dict(current.fields)
        for key in REQUIRED_FIELDS[current.type]:
            fields[key] = vals.get(key, "")
        for key in OPTIONAL_FIELDS[current.type]:
            if vals.get(key):
                fields[key] = vals[key]
            else:
                fields.pop(key, None)
        self.vault.secrets.update(replace(current, name=name, fields=fields, tags=tags))
        logger.info("updated secret %s", current.id)

    def render(self) -> Text:
        if not self.loaded:
            return Text.assemble("\n", muted("  no secret selected"), "\n")

        out = Text("\n")
        if not self.editing:
            selected = self.focused == TYPE_SELECTOR
            out.append("  ")
            out.append_text(cursor(selected))
            out.append("type  ", style=SUBTEXT)
            for i, t in enumerate(TYPE_OPTIONS):
                if i:
                    out.append(" | ", style=SURFACE)
                out.append(t.label, style=ACCENT_BOLD if t == self.secret_type else MUTED)
            if selected:
                out.append("  (←/→ to change)", style=MUTED)
            out.append("\n\n")

        for i, inp in enumerate(self.inputs):
            if i:
                out.append("\n")
            out.append("  ")
            out.append_text(cursor(i == self.focused))
            out.append(inp.label + "\n", style=SUBTEXT)
            out.append_text(Text.assemble("    ", inp.input.render(), "\n"))

        if self.confirm_discard:
            out.append_text(status_line("Discard changes? (y/n)", STATUS_WARN))
        if self.error:
            out.append_text(status_line(self.error, STATUS_ERR))
        return out
