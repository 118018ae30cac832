"""
Relative-date parsing and formatting.

Every function takes the reference day explicitly; callers derive it
from their clock.
"""

from __future__ import annotations

import re
from datetime import date, timedelta

from zvault.errors import DateFormatError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_OFFSET = re.compile(r"^\+(.*)([dw])$")
_INTEGER = re.compile(r"^[+-]?\d+$")

ACCEPTED_FORMS = "use YYYY-MM-DD, tomorrow, +3d, next week"


def parse_relative(text: str, today: date) -> date | None:
    """
    Parse a due-date string.

    Accepts "" (no date), "today", "tomorrow", "next week", "+Nd", "+Nw"
    and "YYYY-MM-DD". Keywords are case-insensitive.
    """
    s = text.strip()
    if not s:
        return None

    lower = s.lower()
    if lower == "today":
        return today
    if lower == "tomorrow":
        return today + timedelta(days=1)
    if lower == "next week":
        return today + timedelta(days=7)

    m = _OFFSET.match(lower)
    if m:
        unit = "day" if m.group(2) == "d" else "week"
        if not _INTEGER.match(m.group(1)):
            raise DateFormatError(f"invalid {unit} offset: {s}")
        n = int(m.group(1))
        try:
            return today + timedelta(days=n if unit == "day" else n * 7)
        except OverflowError:
            raise DateFormatError(f"invalid {unit} offset: {s}") from None

    if _ISO_DATE.match(s):
        try:
            return date.fromisoformat(s)
        except ValueError:
            pass
    raise DateFormatError(f"invalid date format: {s} ({ACCEPTED_FORMS})")


def format_relative(d: date, today: date) -> str:
    """Human-readable distance from today, e.g. "tomorrow", "overdue by 2 days"."""
    days = (d - today).days
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days == -1:
        return "yesterday"
    if 1 < days <= 7:
        return f"in {days} days"
    if 7 < days <= 14:
        return "next week"
    if days < -1:
        return f"overdue by {-days} days"
    return f"{d:%b} {d.day}"


def format_due(d: date | None, today: date) -> str:
    """List-view due string; empty when there is no due date."""
    if d is None:
        return ""
    return format_relative(d, today)


def is_overdue(d: date | None, today: date) -> bool:
    return d is not None and d < today


def format_for_edit(d: date | None) -> str:
    """YYYY-MM-DD for pre-filling a form, empty when unset."""
    if d is None:
        return ""
    return d.isoformat()
