"""
zvault TUI application.

Textual hosts the event loop: keys, resizes, timers and worker results are
turned into messages for the Runtime, and the single body widget is redrawn
from Root.render() after every message.
"""

from __future__ import annotations

import logging
from pathlib import Path

from textual import events
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Static

from zvault.config import APP_NAME
from zvault.controllers.root import Root
from zvault.messages import KeyPress, Message, Resize
from zvault.providers import Clock
from zvault.runtime import Deliver, Job, Runtime

logger = logging.getLogger(__name__)


class VaultScreen(Screen, inherit_bindings=False):
    """Single screen; every key goes to the controllers."""

    DEFAULT_CSS = """
    VaultScreen {
        background: #1e1e2e;
    }

    VaultScreen #body {
        padding: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        with VerticalScroll():
            yield Static(id="body")


class ZvaultApp(App, inherit_bindings=False):
    """Main zvault TUI application."""

    TITLE = APP_NAME
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        vault_dir: Path,
        clock: Clock | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._runtime = Runtime(
            Root.create(vault_dir, clock),
            scheduler=self._schedule_message,
            submit=self._submit_job,
            on_quit=self.exit,
        )

    @property
    def runtime(self) -> Runtime:
        return self._runtime

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen(VaultScreen())
        self.call_after_refresh(self._feed, Resize(self.size.width, self.size.height))

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        character = event.character if event.is_printable else None
        self._feed(KeyPress(event.key, character))

    def on_resize(self, event: events.Resize) -> None:
        self._feed(Resize(event.size.width, event.size.height))

    def _feed(self, message: Message) -> None:
        self._runtime.send(message)
        if not self._runtime.quit_requested:
            self._redraw_body()

    def _redraw_body(self) -> None:
        if not isinstance(self.screen, VaultScreen):
            return
        self.screen.query_one("#body", Static).update(self._runtime.root.render())

    def _schedule_message(self, delay: float, message: Message) -> None:
        self.set_timer(delay, lambda: self._feed(message))

    def _submit_job(self, job: Job, deliver: Deliver) -> None:
        """Run job in a worker thread; its result is delivered on the app thread."""

        def work() -> None:
            result = job()
            self.call_from_thread(self._finish_job, deliver, result)

        self.run_worker(work, thread=True, exclusive=False)

    def _finish_job(self, deliver: Deliver, result: Message | None) -> None:
        deliver(result)
        if not self._runtime.quit_requested:
            self._redraw_body()


def run(vault_dir: Path, clock: Clock | None = None) -> None:
    """Run the TUI application."""
    app = ZvaultApp(vault_dir, clock=clock)
    app.run()
