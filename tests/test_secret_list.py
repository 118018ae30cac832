"""Tests for the secret list controller."""

import pytest

from helpers import REFERENCE_TIME, FixedClock, press, posted, type_text
from zvault.controllers.secret_list import SecretListController
from zvault.errors import StoreError
from zvault.memory_provider import MemoryVault
from zvault.messages import Navigate, TransientError, ViewID
from zvault.providers import new_api_key, new_note, new_password


@pytest.fixture
def seeded(vault: MemoryVault) -> MemoryVault:
    vault.secrets.add(new_password("github", "u", "me", "pw", REFERENCE_TIME, tags=("dev",)))
    vault.secrets.add(new_api_key("stripe", "stripe.com", "sk", REFERENCE_TIME, tags=("work",)))
    vault.secrets.add(new_note("wifi", "hunter2", REFERENCE_TIME, tags=("home", "dev")))
    return vault


def _opened(vault: MemoryVault, clock: FixedClock) -> SecretListController:
    m, _ = SecretListController(vault=vault, clock=clock, height=40).update(
        Navigate(ViewID.SECRET_LIST)
    )
    return m


def _names(m: SecretListController) -> list[str]:
    return [s.name for s in m.records]


class TestLoading:
    """Tests for reload and rendering."""

    def test_loads_on_navigate(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m = _opened(seeded, clock)
        assert _names(m) == ["github", "stripe", "wifi"]
        assert m.tags == ("dev", "home", "work")

    def test_rows_show_badge_and_tags(self, seeded: MemoryVault, clock: FixedClock) -> None:
        text = _opened(seeded, clock).render().plain
        assert "github [pw] [dev]" in text
        assert "stripe [api] [work]" in text
        assert "wifi [note] [home, dev]" in text

    def test_empty(self, vault: MemoryVault, clock: FixedClock) -> None:
        assert "no secrets found" in _opened(vault, clock).render().plain

    def test_store_failure_is_banner(self, vault: MemoryVault, clock: FixedClock, monkeypatch) -> None:
        def boom():
            raise StoreError("disk gone")

        monkeypatch.setattr(vault.secrets, "list", boom)
        m, effects = SecretListController(vault=vault, clock=clock).update(
            Navigate(ViewID.SECRET_LIST)
        )
        assert posted(effects, TransientError) == [TransientError("load secrets: disk gone")]
        assert m.records == ()


class TestFilter:
    """Tests for type and tag filter cycling."""

    def test_type_buckets(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m = _opened(seeded, clock)
        m, _ = press(m, "tab")
        assert _names(m) == ["github"]
        m, _ = press(m, "tab")
        assert _names(m) == ["stripe"]
        m, _ = press(m, "tab")
        assert _names(m) == []
        m, _ = press(m, "tab")
        assert _names(m) == ["wifi"]

    def test_tag_cycle_then_wrap(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_opened(seeded, clock), "tab", "tab", "tab", "tab", "tab")
        assert m.filter.by_tag
        assert _names(m) == ["github", "wifi"]
        assert "#dev" in m.render().plain
        m, _ = press(m, "tab")
        assert _names(m) == ["wifi"]
        m, _ = press(m, "tab")
        assert _names(m) == ["stripe"]
        m, _ = press(m, "tab")
        assert not m.filter.by_tag
        assert _names(m) == ["github", "stripe", "wifi"]

    def test_no_tags_skips_tag_mode(self, vault: MemoryVault, clock: FixedClock) -> None:
        vault.secrets.add(new_note("plain", "x", REFERENCE_TIME))
        m, _ = press(_opened(vault, clock), "tab", "tab", "tab", "tab", "tab")
        assert m.filter.index == 0
        assert _names(m) == ["plain"]


class TestSearch:
    """Tests for search mode."""

    def test_live_search(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_opened(seeded, clock), "/")
        assert m.searching and m.captures_text
        m, _ = type_text(m, "git")
        assert _names(m) == ["github"]

    def test_search_matches_tag_and_type(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_opened(seeded, clock), "/")
        m, _ = type_text(m, "dev")
        assert _names(m) == ["github", "wifi"]
        m, _ = press(m, "ctrl+u")
        m, _ = type_text(m, "note")
        assert _names(m) == ["wifi"]

    def test_escape_clears(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_opened(seeded, clock), "/")
        m, _ = type_text(m, "git")
        m, _ = press(m, "escape")
        assert not m.searching
        assert m.search.value == ""
        assert len(m.records) == 3

    def test_enter_keeps_query(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_opened(seeded, clock), "/")
        m, _ = type_text(m, "git")
        m, _ = press(m, "enter")
        assert not m.searching
        assert _names(m) == ["github"]
        assert "search: git" in m.render().plain

    def test_tags_come_from_everything(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_opened(seeded, clock), "/")
        m, _ = type_text(m, "stripe")
        assert m.tags == ("dev", "home", "work")


class TestActions:
    """Tests for open, new, delete and back."""

    def test_enter_opens_detail(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, effects = press(_opened(seeded, clock), "down", "enter")
        assert posted(effects, Navigate) == [Navigate(ViewID.SECRET_DETAIL, m.records[1].id)]

    def test_new_opens_create_form(self, seeded: MemoryVault, clock: FixedClock) -> None:
        _, effects = press(_opened(seeded, clock), "n")
        assert posted(effects, Navigate) == [Navigate(ViewID.SECRET_FORM, None)]

    def test_escape_goes_to_menu(self, seeded: MemoryVault, clock: FixedClock) -> None:
        _, effects = press(_opened(seeded, clock), "escape")
        assert posted(effects, Navigate) == [Navigate(ViewID.MENU)]

    def test_delete_confirmed(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_opened(seeded, clock), "d")
        assert "delete 'github'? (y/n)" in m.render().plain
        m, _ = press(m, "y")
        assert _names(m) == ["stripe", "wifi"]
        assert m.status == "deleted 'github'"
        assert len(seeded.secrets.list()) == 2

    @pytest.mark.parametrize("answer", ["n", "N", "escape"])
    def test_delete_cancelled(self, seeded: MemoryVault, clock: FixedClock, answer: str) -> None:
        m, _ = press(_opened(seeded, clock), "d", answer)
        assert not m.confirm_delete
        assert len(seeded.secrets.list()) == 3

    def test_cursor_clamped_after_delete(self, seeded: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_opened(seeded, clock), "down", "down", "d", "y")
        assert m.cursor == 1

    def test_empty_list_actions_are_noops(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, effects = press(_opened(vault, clock), "enter", "d")
        assert effects == []
        assert not m.confirm_delete
