"""Palette and small Text builders used by the controllers' render()."""

from rich.text import Text

from zvault.providers import SecretType

ACCENT = "#cba6f7"
TEXT = "#cdd6f4"
SUBTEXT = "#bac2de"
MUTED = "#7f849c"
SURFACE = "#585b70"
LAVENDER = "#b4befe"
BLUE = "#89b4fa"
SAPPHIRE = "#74c7ec"
GREEN = "#a6e3a1"
YELLOW = "#f9e2af"
PEACH = "#fab387"
RED = "#f38ba8"

ACCENT_BOLD = f"bold {ACCENT}"
STATUS_OK = GREEN
STATUS_ERR = RED
STATUS_WARN = PEACH

CURSOR = "▸ "
NO_CURSOR = "  "
MASK = "••••••••"

_BADGES = {
    SecretType.PASSWORD: ("pw", BLUE),
    SecretType.API_KEY: ("api", PEACH),
    SecretType.SSH_KEY: ("ssh", GREEN),
    SecretType.NOTE: ("note", YELLOW),
}


def muted(text: str) -> Text:
    return Text(text, style=MUTED)


def cursor(selected: bool) -> Text:
    if selected:
        return Text(CURSOR, style=ACCENT)
    return Text(NO_CURSOR)


def badge(secret_type: SecretType) -> Text:
    """Short coloured tag for a secret type, e.g. [pw]."""
    label, color = _BADGES.get(secret_type, (str(secret_type.value), MUTED))
    return Text(f"[{label}]", style=color)


def status_line(message: str, style: str) -> Text:
    """Indented message block separated by a blank line."""
    return Text.assemble("\n  ", (message, style), "\n")
