"""Input events and the status every handler returns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class UnreachableError(RuntimeError):
    """An invariant of the event/render protocol was broken (a bug, not user error)."""


class EventState(Enum):
    """Result of offering an event to a handler."""

    NOT_CONSUMED = "not_consumed"
    WORK_DONE = "work_done"
    # Answers of a yes/no prompt; resolved by the prompt's owner
    YES = "yes"
    CANCEL = "cancel"

    def is_consumed(self) -> bool:
        return self is not EventState.NOT_CONSUMED

    def is_not_consumed(self) -> bool:
        return self is EventState.NOT_CONSUMED


class KeyKind(Enum):
    PRESS = "press"
    REPEAT = "repeat"
    RELEASE = "release"


@dataclass(frozen=True)
class KeyEvent:
    """A key, named like Textual keys: "q", "?", "enter", "escape", "shift+tab"."""

    code: str
    kind: KeyKind = KeyKind.PRESS

    @property
    def is_press(self) -> bool:
        return self.kind is KeyKind.PRESS


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


@dataclass(frozen=True)
class FocusEvent:
    gained: bool


@dataclass(frozen=True)
class PasteEvent:
    text: str


Event = Union[KeyEvent, ResizeEvent, FocusEvent, PasteEvent]


def pressed_key(ev: object) -> str | None:
    """Return the key code if `ev` is a key press, else None."""
    if isinstance(ev, KeyEvent) and ev.is_press:
        return ev.code
    return None
