"""Header, rule and footer rendered around the active view."""

from rich.text import Text

from zvault.config import APP_NAME
from zvault.messages import ViewID
from zvault.views.style import ACCENT_BOLD, MUTED, SUBTEXT, SURFACE

DEFAULT_WIDTH = 60

# Keybinding help for each view, shown in the footer.
HELP: dict[ViewID, list[tuple[str, str]]] = {
    ViewID.UNLOCK: [("enter", "submit"), ("tab", "next field"), ("ctrl+c", "quit")],
    ViewID.MENU: [("enter", "select"), ("q", "quit")],
    ViewID.SECRET_LIST: [
        ("enter", "open"),
        ("n", "new"),
        ("d", "delete"),
        ("/", "search"),
        ("tab", "filter"),
        ("esc", "back"),
    ],
    ViewID.SECRET_DETAIL: [
        ("enter", "copy/open"),
        ("s", "show/hide"),
        ("e", "edit"),
        ("d", "delete"),
        ("esc", "back"),
    ],
    ViewID.SECRET_FORM: [
        ("tab", "next"),
        ("shift+tab", "prev"),
        ("ctrl+s", "save"),
        ("esc", "cancel"),
    ],
    ViewID.TASK_LIST: [
        ("enter", "detail"),
        ("n", "new"),
        ("space", "done"),
        ("d", "delete"),
        ("x", "clear"),
        ("tab", "filter"),
        ("esc", "back"),
    ],
    ViewID.TASK_DETAIL: [
        ("e", "edit"),
        ("space", "done"),
        ("d", "delete"),
        ("esc", "back"),
    ],
    ViewID.TASK_FORM: [
        ("tab", "next field"),
        ("ctrl+s", "save"),
        ("esc", "cancel"),
    ],
}


def render_header(view: ViewID) -> Text:
    return Text.assemble(("  " + APP_NAME, ACCENT_BOLD), (" › ", MUTED), (view.title, SUBTEXT))


def render_rule(width: int) -> Text:
    return Text("─" * (width if width > 0 else DEFAULT_WIDTH), style=SURFACE)


def render_footer(view: ViewID) -> Text:
    out = Text("  ")
    pairs = HELP.get(view, [("q", "quit")])
    for i, (key, desc) in enumerate(pairs):
        if i:
            out.append(" • ", style=SURFACE)
        out.append(key, style=SUBTEXT)
        out.append(" " + desc, style=MUTED)
    return out
