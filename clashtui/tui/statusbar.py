"""Status bar: read-only view of the shared State."""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text

from ..state import State
from .frame import Frame, Rect


class StatusBar:
    def __init__(self, state: State) -> None:
        self.state = state

    def draw(self, frame: Frame, area: Rect) -> None:
        text = Text(self.state.render(), no_wrap=True, overflow="ellipsis")
        frame.render(Panel(text, border_style="blue"), area)
