"""Filterable, searchable list of secrets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from rich.text import Text

from zvault.controllers.base import ViewController
from zvault.controllers.listing import (
    FilterCycle,
    clamp,
    collect_tags,
    scroll_window,
    visible_rows,
)
from zvault.controllers.text_input import TextInput
from zvault.errors import ZvaultError
from zvault.messages import (
    Effect,
    KeyPress,
    Message,
    Navigate,
    ViewID,
    navigate,
    report,
)
from zvault.providers import Secret, SecretType
from zvault.views.style import (
    ACCENT_BOLD,
    MUTED,
    STATUS_OK,
    STATUS_WARN,
    SURFACE,
    TEXT,
    badge,
    cursor,
    muted,
    status_line,
)

logger = logging.getLogger(__name__)

ALL = "all"
BUCKETS = (ALL,) + tuple(t.value for t in SecretType)


def _bucket_label(bucket: str) -> str:
    if bucket == ALL:
        return ALL
    return SecretType(bucket).label


def _search_input() -> TextInput:
    return TextInput(placeholder="search...")


@dataclass(frozen=True)
class SecretListController(ViewController):
    records: tuple[Secret, ...] = ()
    tags: tuple[str, ...] = ()
    filter: FilterCycle = field(default_factory=lambda: FilterCycle(BUCKETS))
    cursor: int = 0
    search: TextInput = field(default_factory=_search_input)
    searching: bool = False
    confirm_delete: bool = False
    status: str = ""

    @property
    def captures_text(self) -> bool:
        return self.searching

    @property
    def selected(self) -> Secret | None:
        if 0 <= self.cursor < len(self.records):
            return self.records[self.cursor]
        return None

    def reload(self) -> tuple[SecretListController, list[Effect]]:
        """
        Re-query the store and re-apply search, type and tag filters.

        Tags always come from the full record set so the tag cycle does not
        shrink while a search is narrowing the rows.
        """
        if self.vault is None:
            return replace(self, records=(), tags=(), cursor=0), []
        query = self.search.value
        try:
            everything = self.vault.secrets.list()
            found = self.vault.secrets.search(query) if query else everything
        except ZvaultError as e:
            logger.warning("load secrets: %s", e)
            return replace(self, records=(), cursor=0), [report(f"load secrets: {e}")]

        tags = collect_tags(everything)
        cycle = self.filter.reconcile(tags)
        tag = cycle.tag(tags)
        if tag is not None:
            rows = [s for s in found if tag in s.tags]
        elif cycle.bucket != ALL:
            rows = [s for s in found if s.type.value == cycle.bucket]
        else:
            rows = list(found)

        return replace(
            self,
            records=tuple(rows),
            tags=tags,
            filter=cycle,
            cursor=clamp(self.cursor, len(rows)),
        ), []

    def update(self, msg: Message) -> tuple[SecretListController, list[Effect]]:
        if isinstance(msg, Navigate):
            return replace(self, confirm_delete=False, status="").reload()
        if not isinstance(msg, KeyPress):
            return self, []
        if self.confirm_delete:
            return self._confirm(msg)
        if self.searching:
            return self._search_key(msg)
        return self._key(msg)

    def _confirm(self, msg: KeyPress) -> tuple[SecretListController, list[Effect]]:
        if msg.key in ("n", "N", "escape"):
            return replace(self, confirm_delete=False), []
        if msg.key not in ("y", "Y"):
            return self, []

        m = replace(self, confirm_delete=False)
        target = m.selected
        if target is None or m.vault is None:
            return m, []
        try:
            m.vault.secrets.delete(target.id)
        except ZvaultError as e:
            logger.warning("delete secret %s: %s", target.id, e)
            return m, [report(e)]
        logger.info("deleted secret %s", target.id)
        m, effects = replace(m, status=f"deleted '{target.name}'").reload()
        return m, effects

    def _search_key(self, msg: KeyPress) -> tuple[SecretListController, list[Effect]]:
        if msg.key == "escape":
            m = replace(self, searching=False, search=self.search.blur().set(""))
            return m.reload()
        if msg.key == "enter":
            return replace(self, searching=False, search=self.search.blur()), []

        edited = self.search.handle(msg)
        if edited == self.search:
            return self, []
        return replace(self, search=edited).reload()

    def _key(self, msg: KeyPress) -> tuple[SecretListController, list[Effect]]:
        key = msg.key
        if key in ("up", "k"):
            return replace(self, cursor=max(0, self.cursor - 1)), []
        if key in ("down", "j"):
            return replace(self, cursor=clamp(self.cursor + 1, len(self.records))), []
        if key == "enter":
            if self.selected is None:
                return self, []
            return self, [navigate(ViewID.SECRET_DETAIL, self.selected.id)]
        if key == "escape":
            return self, [navigate(ViewID.SECRET_LIST.parent)]
        if msg.character == "/":
            return replace(self, searching=True, search=self.search.focus(), status=""), []
        if key == "tab":
            m = replace(self, filter=self.filter.advance(self.tags), status="")
            return m.reload()
        if key == "n":
            return self, [navigate(ViewID.SECRET_FORM)]
        if key == "d" and self.selected is not None:
            return replace(self, confirm_delete=True, status=""), []
        return self, []

    def render(self) -> Text:
        out = Text("\n  ")
        for bucket in BUCKETS:
            active = not self.filter.by_tag and bucket == self.filter.bucket
            out.append(_bucket_label(bucket), style=ACCENT_BOLD if active else MUTED)
            out.append(" | ", style=SURFACE)
        tag = self.filter.tag(self.tags)
        if tag is not None:
            out.append("#" + tag, style=ACCENT_BOLD)
        elif self.tags:
            out.append("tags", style=MUTED)
        out.append("\n")

        if self.searching:
            out.append_text(Text.assemble("  ", self.search.render(), "\n"))
        elif self.search.value:
            out.append_text(muted(f"  search: {self.search.value}\n"))
        out.append("\n")

        if not self.records:
            out.append_text(muted("  no secrets found\n"))
        else:
            start, end = scroll_window(
                self.cursor, len(self.records), visible_rows(self.height)
            )
            for i in range(start, end):
                out.append_text(self._row(i))

        if self.confirm_delete and self.selected is not None:
            out.append_text(
                status_line(f"delete '{self.selected.name}'? (y/n)", STATUS_WARN)
            )
        if self.status:
            out.append_text(status_line(self.status, STATUS_OK))
        return out

    def _row(self, i: int) -> Text:
        s = self.records[i]
        selected = i == self.cursor
        row = Text("  ")
        row.append_text(cursor(selected))
        row.append(s.name, style=ACCENT_BOLD if selected else TEXT)
        row.append(" ")
        row.append_text(badge(s.type))
        if s.tags:
            row.append(" [" + ", ".join(s.tags) + "]", style=MUTED)
        row.append("\n")
        return row
