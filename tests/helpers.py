"""Test doubles and key-driving helpers."""

from datetime import date, datetime, timedelta, timezone

from zvault.errors import ClipboardError
from zvault.messages import KeyPress, Post

REFERENCE_TIME = datetime(2026, 2, 18, 12, 0, 0, tzinfo=timezone.utc)
TODAY = date(2026, 2, 18)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = REFERENCE_TIME) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class FakeClipboard:
    def __init__(self, fail: bool = False) -> None:
        self.value = ""
        self.fail = fail
        self.clears = 0

    def copy(self, text: str) -> None:
        if self.fail:
            raise ClipboardError("no clipboard")
        self.value = text

    def clear(self) -> None:
        self.value = ""
        self.clears += 1


def key(name: str) -> KeyPress:
    return KeyPress.named(name)


def press(controller, *keys: str):
    """Feed named keys in order; return the final state and all effects."""
    effects = []
    for name in keys:
        controller, emitted = controller.update(KeyPress.named(name))
        effects.extend(emitted)
    return controller, effects


def type_text(controller, text: str):
    """Type text one character at a time."""
    return press(controller, *["space" if c == " " else c for c in text])


def send_keys(runtime, *keys: str) -> None:
    for name in keys:
        runtime.send(KeyPress.named(name))


def send_text(runtime, text: str) -> None:
    send_keys(runtime, *["space" if c == " " else c for c in text])


def posted(effects, kind):
    """Messages of a given type carried by Post effects."""
    return [e.message for e in effects if isinstance(e, Post) and isinstance(e.message, kind)]
