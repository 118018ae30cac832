"""Tests for the secret form controller."""

import pytest

from helpers import REFERENCE_TIME, FixedClock, press, posted, type_text
from zvault.controllers.secret_form import TYPE_SELECTOR, SecretFormController, form_keys
from zvault.memory_provider import MemoryVault
from zvault.messages import Navigate, TransientError, ViewID
from zvault.providers import SecretType, new_api_key, new_password


def _create(vault: MemoryVault, clock: FixedClock) -> SecretFormController:
    m, _ = SecretFormController(vault=vault, clock=clock).update(Navigate(ViewID.SECRET_FORM))
    return m


def _edit(vault: MemoryVault, clock: FixedClock, secret_id: str) -> tuple:
    return SecretFormController(vault=vault, clock=clock).update(
        Navigate(ViewID.SECRET_FORM, secret_id)
    )


class TestCreateMode:
    """Tests for the create flow."""

    def test_starts_on_type_selector(self, vault: MemoryVault, clock: FixedClock) -> None:
        m = _create(vault, clock)
        assert m.focused == TYPE_SELECTOR
        assert m.secret_type == SecretType.PASSWORD
        assert [i.key for i in m.inputs] == list(form_keys(SecretType.PASSWORD))
        assert m.captures_text

    def test_field_orders(self) -> None:
        assert form_keys(SecretType.PASSWORD) == (
            "name", "url", "username", "password", "totp_secret", "notes", "tags",
        )
        assert form_keys(SecretType.API_KEY) == ("name", "service", "key", "notes", "tags")
        assert form_keys(SecretType.SSH_KEY) == (
            "name", "label", "private_key", "public_key", "passphrase", "notes", "tags",
        )
        assert form_keys(SecretType.NOTE) == ("name", "content", "tags")

    def test_type_cycle_keeps_name(self, vault: MemoryVault, clock: FixedClock) -> None:
        m = _create(vault, clock)
        m, _ = press(m, "tab")
        m, _ = type_text(m, "github")
        m, _ = press(m, "tab")
        m, _ = type_text(m, "https://x")
        m, _ = press(m, "shift+tab", "shift+tab", "right")
        assert m.secret_type == SecretType.API_KEY
        assert m.values() == {"name": "github", "service": "", "key": "", "notes": "", "tags": ""}
        m, _ = press(m, "left", "left")
        assert m.secret_type == SecretType.NOTE
        assert m.values()["name"] == "github"

    def test_arrows_ignored_off_selector(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_create(vault, clock), "tab", "right")
        assert m.secret_type == SecretType.PASSWORD

    def test_focus_does_not_wrap(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_create(vault, clock), "shift+tab")
        assert m.focused == TYPE_SELECTOR
        m, _ = press(m, *["tab"] * 20)
        assert m.focused == len(m.inputs) - 1

    def test_masked_inputs(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_create(vault, clock), "tab", "tab", "tab", "tab")
        m, _ = type_text(m, "hunter2")
        assert m.values()["password"] == "hunter2"
        assert "hunter2" not in m.render().plain

    def test_save_creates(self, vault: MemoryVault, clock: FixedClock) -> None:
        m = _create(vault, clock)
        m, _ = press(m, "tab")
        m, _ = type_text(m, "github")
        m, _ = press(m, "tab")
        m, _ = type_text(m, "https://github.com")
        m, _ = press(m, "tab")
        m, _ = type_text(m, "me")
        m, _ = press(m, "tab")
        m, _ = type_text(m, "pw")
        m, _ = press(m, "tab", "tab", "tab")
        m, _ = type_text(m, "dev, work,")
        m, effects = press(m, "ctrl+s")

        assert posted(effects, Navigate) == [Navigate(ViewID.SECRET_LIST)]
        [s] = vault.secrets.list()
        assert s.name == "github"
        assert s.type == SecretType.PASSWORD
        assert s.fields == {"url": "https://github.com", "username": "me", "password": "pw"}
        assert s.tags == ("dev", "work")
        assert s.created_at == REFERENCE_TIME

    def test_enter_on_last_field_saves(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_create(vault, clock), "right", "right", "right")
        assert m.secret_type == SecretType.NOTE
        m, _ = press(m, "enter")
        m, _ = type_text(m, "wifi")
        m, _ = press(m, "enter")
        m, _ = type_text(m, "hunter2")
        m, effects = press(m, "enter", "enter")
        assert posted(effects, Navigate) == [Navigate(ViewID.SECRET_LIST)]
        assert vault.secrets.list()[0].field("content") == "hunter2"

    def test_name_required(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_create(vault, clock), "tab", "space", "space")
        m, effects = press(m, "ctrl+s")
        assert effects == []
        assert m.error == "name is required"
        assert "name is required" in m.render().plain
        m, _ = press(m, "a")
        assert m.error == ""
        assert vault.secrets.list() == []


class TestEditMode:
    """Tests for the edit flow."""

    def test_loads_record(self, vault: MemoryVault, clock: FixedClock) -> None:
        s = new_api_key("stripe", "stripe.com", "sk", REFERENCE_TIME, tags=("a", "b"))
        vault.secrets.add(s)
        m, _ = _edit(vault, clock, s.id)
        assert m.focused == 0
        assert m.secret_type == SecretType.API_KEY
        assert m.values() == {
            "name": "stripe", "service": "stripe.com", "key": "sk", "notes": "", "tags": "a, b",
        }
        m, _ = press(m, "shift+tab")
        assert m.focused == 0
        assert "type" not in m.render().plain.split("\n")[1]

    def test_save_merges_fields(self, vault: MemoryVault, clock: FixedClock) -> None:
        s = new_password("github", "u", "me", "old", REFERENCE_TIME, totp_secret="JBSWY3DP")
        vault.secrets.add(s)
        clock.advance(hours=1)
        m, _ = _edit(vault, clock, s.id)
        m, _ = press(m, "tab", "tab", "tab", "ctrl+u")
        m, _ = type_text(m, "new")
        m, _ = press(m, "tab", "ctrl+u")
        m, effects = press(m, "ctrl+s")

        assert posted(effects, Navigate) == [Navigate(ViewID.SECRET_LIST)]
        stored = vault.secrets.get(s.id)
        assert stored.field("password") == "new"
        assert "totp_secret" not in stored.fields
        assert stored.created_at == s.created_at
        assert stored.updated_at > s.updated_at

    def test_missing_record(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, effects = _edit(vault, clock, "deadbeef")
        assert len(posted(effects, TransientError)) == 1
        assert "no secret selected" in m.render().plain

    def test_record_deleted_before_save(self, vault: MemoryVault, clock: FixedClock) -> None:
        s = new_password("github", "u", "me", "pw", REFERENCE_TIME)
        vault.secrets.add(s)
        m, _ = _edit(vault, clock, s.id)
        vault.secrets.delete(s.id)
        m, effects = press(m, "ctrl+s")
        assert len(posted(effects, TransientError)) == 1
        assert posted(effects, Navigate) == []


class TestDiscard:
    """Tests for the discard confirmation."""

    def test_clean_escape_leaves(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, effects = press(_create(vault, clock), "tab", "tab", "escape")
        assert not m.dirty
        assert posted(effects, Navigate) == [Navigate(ViewID.SECRET_LIST)]

    def test_dirty_escape_confirms(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_create(vault, clock), "tab", "x")
        m, effects = press(m, "escape")
        assert effects == []
        assert m.confirm_discard
        assert "Discard changes? (y/n)" in m.render().plain

    @pytest.mark.parametrize("answer", ["n", "escape"])
    def test_cancel_discard_keeps_editing(
        self, vault: MemoryVault, clock: FixedClock, answer: str
    ) -> None:
        m, _ = press(_create(vault, clock), "tab", "x", "escape", answer)
        assert not m.confirm_discard
        m, _ = press(m, "y")
        assert m.values()["name"] == "xy"

    def test_confirm_discard(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_create(vault, clock), "tab", "x", "escape")
        _, effects = press(m, "y")
        assert posted(effects, Navigate) == [Navigate(ViewID.SECRET_LIST)]
        assert vault.secrets.list() == []

    def test_type_change_is_dirty(self, vault: MemoryVault, clock: FixedClock) -> None:
        m, _ = press(_create(vault, clock), "right")
        assert m.dirty
