"""
Effect driver.

Runtime owns the root state and a FIFO message queue. Each message is run
through Root.update; the effects it returns are executed here, never inside
a controller. Hosts plug in through two hooks:

- scheduler(delay, message): deliver message after delay seconds
- submit(job, deliver): run job (possibly off-thread) and hand its result
  message to deliver on the loop thread

The defaults run jobs inline and park timers in a ManualScheduler, which
is what the tests drive.
"""

from __future__ import annotations

import logging
import webbrowser
from collections import deque
from typing import Callable

from zvault.clipboard import SystemClipboard
from zvault.controllers.root import Root
from zvault.errors import ClipboardError, StoreError, ZvaultError
from zvault.file_provider import open_vault
from zvault.messages import (
    ClearClipboard,
    ClipboardCleared,
    ClipboardCopied,
    CopyToClipboard,
    Effect,
    Message,
    OpenURL,
    OpenVault,
    Post,
    Quit,
    Schedule,
    TransientError,
    VaultReady,
)
from zvault.providers import Clipboard, VaultOpener

logger = logging.getLogger(__name__)

Job = Callable[[], "Message | None"]
Deliver = Callable[["Message | None"], None]


class ManualScheduler:
    """Records timers instead of running them; tests fire them by hand."""

    def __init__(self) -> None:
        self.pending: list[tuple[float, Message]] = []

    def __call__(self, delay: float, message: Message) -> None:
        self.pending.append((delay, message))

    def take(self, kind: type | None = None) -> list[Message]:
        """Remove and return parked messages, optionally only of one type."""
        taken = [m for _, m in self.pending if kind is None or isinstance(m, kind)]
        self.pending = [(d, m) for d, m in self.pending if m not in taken]
        return taken


def run_inline(job: Job, deliver: Deliver) -> None:
    deliver(job())


class Runtime:
    def __init__(
        self,
        root: Root,
        opener: VaultOpener = open_vault,
        clipboard: Clipboard | None = None,
        url_opener: Callable[[str], object] = webbrowser.open,
        scheduler: Callable[[float, Message], None] | None = None,
        submit: Callable[[Job, Deliver], None] = run_inline,
        on_quit: Callable[[], None] | None = None,
    ) -> None:
        self.root = root
        self._opener = opener
        self._clipboard = clipboard if clipboard is not None else SystemClipboard()
        self._url_opener = url_opener
        self._scheduler = scheduler if scheduler is not None else ManualScheduler()
        self._submit = submit
        self._on_quit = on_quit
        self._queue: deque[Message] = deque()
        self._draining = False
        self.quit_requested = False

    @property
    def scheduler(self):
        return self._scheduler

    def send(self, message: Message) -> None:
        """Enqueue a message and process the queue until it is empty."""
        self._queue.append(message)
        self.drain()

    def drain(self) -> None:
        # effects that deliver synchronously land back here; the outer loop picks them up
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue and not self.quit_requested:
                message = self._queue.popleft()
                self.root, effects = self.root.update(message)
                for effect in effects:
                    self.execute(effect)
        finally:
            self._draining = False

    def _deliver(self, message: Message | None) -> None:
        if message is not None:
            self.send(message)

    def execute(self, effect: Effect) -> None:
        logger.debug("effect %r", effect)
        if isinstance(effect, Post):
            self._queue.append(effect.message)
        elif isinstance(effect, OpenVault):
            self._submit(lambda: self._open_vault(effect), self._deliver)
        elif isinstance(effect, CopyToClipboard):
            self._submit(lambda: self._copy(effect), self._deliver)
        elif isinstance(effect, ClearClipboard):
            self._clipboard.clear()
            logger.debug("clipboard cleared")
            self._queue.append(ClipboardCleared())
        elif isinstance(effect, OpenURL):
            self._submit(lambda: self._open_url(effect.url), self._deliver)
        elif isinstance(effect, Schedule):
            self._scheduler(effect.delay, effect.message)
        elif isinstance(effect, Quit):
            self.quit()
        else:
            raise TypeError(f"unknown effect: {effect!r}")

    def _open_vault(self, effect: OpenVault) -> Message:
        try:
            vault = self._opener(effect.directory, effect.password)
        except ZvaultError as e:
            logger.warning("open vault %s: %s", effect.directory, e)
            return TransientError(str(e))
        logger.info("opened vault %s", effect.directory)
        return VaultReady(vault)

    def _copy(self, effect: CopyToClipboard) -> Message:
        try:
            self._clipboard.copy(effect.value)
        except ClipboardError as e:
            logger.warning("copy %s: %s", effect.field, e)
            return TransientError("copy to clipboard failed")
        return ClipboardCopied(effect.field)

    def _open_url(self, url: str) -> None:
        try:
            self._url_opener(url)
        except webbrowser.Error as e:
            logger.debug("open url: %s", e)
        return None

    def quit(self) -> None:
        self.quit_requested = True
        self._queue.clear()
        vault = self.root.vault
        if vault is not None:
            try:
                vault.close()
            except StoreError as e:
                logger.warning("close vault: %s", e)
        if self._on_quit is not None:
            self._on_quit()
