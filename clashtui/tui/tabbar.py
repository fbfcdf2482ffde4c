"""Tab bar: owns the selected tab and turns keys into selection changes."""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text

from .events import EventState, pressed_key
from .frame import Frame, Rect
from .keys import Keys, key_of


class TabBar:
    def __init__(self, names: list[str]) -> None:
        self.names = names
        self.index = 0

    def selected(self) -> str | None:
        if 0 <= self.index < len(self.names):
            return self.names[self.index]
        return None

    def select(self, index: int) -> bool:
        if 0 <= index < len(self.names):
            self.index = index
            return True
        return False

    def event(self, ev: object) -> EventState:
        code = pressed_key(ev)
        if code is None or not self.names:
            return EventState.NOT_CONSUMED

        key = key_of(code)
        if key is Keys.TAB_NEXT:
            self.index = (self.index + 1) % len(self.names)
        elif key is Keys.TAB_PREV:
            self.index = (self.index - 1) % len(self.names)
        elif not (code.isdecimal() and self.select(int(code) - 1)):
            return EventState.NOT_CONSUMED
        return EventState.WORK_DONE

    def draw(self, frame: Frame, area: Rect) -> None:
        line = Text()
        for i, name in enumerate(self.names):
            style = "bold black on cyan" if i == self.index else "cyan"
            line.append(f" {i + 1}:{name} ", style=style)
            line.append(" ")
        frame.render(Panel(line, border_style="blue"), area)
