"""Key bindings and the help text generated from them."""

from __future__ import annotations

from enum import Enum, auto


class Keys(Enum):
    # Global
    APP_QUIT = auto()
    APP_HELP = auto()
    APP_INFO = auto()
    OPEN_TUI_CONFIG_DIR = auto()
    OPEN_CLASH_CONFIG_DIR = auto()
    LOG_CAT = auto()
    SOFT_RESTART = auto()
    # Navigation
    UP = auto()
    DOWN = auto()
    SELECT = auto()
    ESC = auto()
    TAB_NEXT = auto()
    TAB_PREV = auto()
    # Profile tab
    PROFILE_UPDATE = auto()
    PROFILE_UPDATE_ALL = auto()
    PROFILE_DELETE = auto()
    PROFILE_TEST = auto()
    # Confirm prompt
    YES = auto()
    NO = auto()


KEYMAP: dict[str, Keys] = {
    "q": Keys.APP_QUIT,
    "?": Keys.APP_HELP,
    "I": Keys.APP_INFO,
    "H": Keys.OPEN_TUI_CONFIG_DIR,
    "G": Keys.OPEN_CLASH_CONFIG_DIR,
    "L": Keys.LOG_CAT,
    "R": Keys.SOFT_RESTART,
    "up": Keys.UP,
    "k": Keys.UP,
    "down": Keys.DOWN,
    "j": Keys.DOWN,
    "enter": Keys.SELECT,
    "escape": Keys.ESC,
    "tab": Keys.TAB_NEXT,
    "shift+tab": Keys.TAB_PREV,
    "u": Keys.PROFILE_UPDATE,
    "a": Keys.PROFILE_UPDATE_ALL,
    "d": Keys.PROFILE_DELETE,
    "t": Keys.PROFILE_TEST,
    "y": Keys.YES,
    "n": Keys.NO,
}

# (keys, description) rows of the help popup
HELP_ENTRIES: list[tuple[str, str]] = [
    ("q", "Quit"),
    ("?", "Show this help"),
    ("I", "Show version info"),
    ("H", "Open clashtui config dir"),
    ("G", "Open clash config dir"),
    ("L", "Show recent clashtui logs"),
    ("R", "Restart clash service"),
    ("Tab / S-Tab / 1-9", "Switch tab"),
    ("j k / Up Down", "Move cursor / scroll"),
    ("Enter", "Select profile / run operation"),
    ("Esc", "Close popup"),
    ("u", "Update profile"),
    ("a", "Update profile, all providers"),
    ("d", "Delete profile"),
    ("t", "Test profile config"),
]


def key_of(code: str | None) -> Keys | None:
    if code is None:
        return None
    return KEYMAP.get(code)
