"""
Configuration and logging setup.

Constants live at module level; anything a user can override comes in
through Settings, built from CLI flags first and the environment second.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_NAME = "zvault"

# Seconds before a copied value is wiped from the clipboard
CLIPBOARD_CLEAR_SECONDS = 10.0

# One-time-password refresh interval while a secret detail is open
TOTP_TICK_SECONDS = 1.0

# Rows taken by header, rule, filter bar, footer and padding in list views
LIST_CHROME_ROWS = 10
MIN_VISIBLE_ROWS = 3

ENV_DIR = "ZVAULT_DIR"
ENV_LOG_LEVEL = "ZVAULT_LOG_LEVEL"

LOG_MAX_BYTES = 2_000_000
LOG_BACKUPS = 3


def default_vault_dir() -> Path:
    """Vault directory following the XDG data-home convention."""
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def default_log_file() -> Path:
    """Log file under the XDG state directory."""
    xdg = os.environ.get("XDG_STATE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "state"
    return base / APP_NAME / f"{APP_NAME}.log"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    vault_dir: Path
    log_level: str = "WARNING"
    log_file: Path | None = None


def load_settings(
    vault_dir: str | None = None,
    log_level: str | None = None,
) -> Settings:
    """Build settings: explicit arguments win over environment variables."""
    if vault_dir is None:
        vault_dir = os.environ.get(ENV_DIR)
    if log_level is None:
        log_level = os.environ.get(ENV_LOG_LEVEL, "WARNING")
    return Settings(
        vault_dir=Path(vault_dir).expanduser() if vault_dir else default_vault_dir(),
        log_level=log_level.upper(),
        log_file=default_log_file(),
    )


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure the package logger.

    The TUI owns the terminal, so records go to a rotating file instead of
    stderr. Calling this twice does not stack handlers.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(settings.log_level)

    if not logger.handlers and settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            settings.log_file,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)

    return logger
