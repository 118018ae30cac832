"""Tests for clipboard.py - the auto-clear schedule."""

from zvault.clipboard import ClipboardSchedule, copied_message
from zvault.messages import ClearClipboard, ClipboardClearDue, CopyToClipboard, Schedule


class TestClipboardSchedule:
    """Tests for ClipboardSchedule."""

    def test_copy_arms_ten_second_clear(self) -> None:
        schedule, effects = ClipboardSchedule().copy("password", "hunter2")
        assert effects == [
            CopyToClipboard("password", "hunter2"),
            Schedule(10.0, ClipboardClearDue(1)),
        ]
        assert schedule.generation == 1

    def test_latest_copy_owns_the_deadline(self) -> None:
        schedule, _ = ClipboardSchedule().copy("username", "me")
        schedule, _ = schedule.copy("password", "hunter2")

        _, stale = schedule.expire(1)
        assert stale == []
        _, current = schedule.expire(2)
        assert current == [ClearClipboard()]

    def test_value_not_in_repr(self) -> None:
        _, effects = ClipboardSchedule().copy("password", "hunter2")
        assert "hunter2" not in repr(effects)


def test_copied_message() -> None:
    assert copied_message("password") == "copied password (clears in 10s)"
