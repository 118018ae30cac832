"""Shared fixtures: a controllable clock, an in-memory vault, a wired runtime."""

from pathlib import Path

import pytest

from helpers import FakeClipboard, FixedClock
from zvault.controllers.root import Root
from zvault.memory_provider import MemoryVault
from zvault.messages import Resize, VaultReady
from zvault.runtime import ManualScheduler, Runtime


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def vault(clock: FixedClock) -> MemoryVault:
    return MemoryVault(clock)


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def opened_urls() -> list:
    return []


@pytest.fixture
def runtime(
    tmp_path: Path,
    clock: FixedClock,
    vault: MemoryVault,
    clipboard: FakeClipboard,
    opened_urls: list,
) -> Runtime:
    """Runtime on an unlocked in-memory vault, viewport 80x40, at the menu."""
    rt = Runtime(
        Root.create(tmp_path / "vault", clock),
        opener=lambda directory, password: vault,
        clipboard=clipboard,
        url_opener=opened_urls.append,
        scheduler=ManualScheduler(),
    )
    rt.send(Resize(80, 40))
    rt.send(VaultReady(vault))
    return rt
