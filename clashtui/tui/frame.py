"""Immediate-mode render target.

A Frame is a grid of rich segments. Widgets paint rich renderables into
rectangles of it; a later paint covers whatever was there, which is how
popups overlay the tabs. The Textual host turns each row into a Strip.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console, RenderableType
from rich.segment import Segment


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def split_vertical(self, *heights: int | None) -> list[Rect]:
        """Split into horizontal bands, top to bottom.

        Integers are fixed heights; at most one None takes the remaining
        rows. Bands are clipped at the bottom edge of this rect.
        """
        fixed = sum(h for h in heights if h is not None)
        flexible = max(0, self.height - fixed)
        bands = []
        y = self.y
        bottom = self.y + self.height
        for h in heights:
            size = flexible if h is None else h
            size = max(0, min(size, bottom - y))
            bands.append(Rect(self.x, y, self.width, size))
            y += size
        return bands


def centered_percent_rect(percent_x: int, percent_y: int, area: Rect) -> Rect:
    """A rect of `percent_x`% x `percent_y`% of `area`, centered in it."""
    width = area.width * percent_x // 100
    height = area.height * percent_y // 100
    return Rect(
        area.x + (area.width - width) // 2,
        area.y + (area.height - height) // 2,
        width,
        height,
    )


class Frame:
    """One screenful of segments, `height` rows of `width` cells."""

    def __init__(self, width: int, height: int, console: Console | None = None) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self.console = console or Console(width=self.width or 1, height=self.height or 1, legacy_windows=False)
        self.area = Rect(0, 0, self.width, self.height)
        self._rows: list[list[Segment]] = [
            [Segment(" " * self.width)] for _ in range(self.height)
        ]

    def render(self, renderable: RenderableType, area: Rect) -> None:
        """Paint `renderable` into `area`, replacing what was there."""
        area = self._clip(area)
        if area.is_empty:
            return
        options = self.console.options.update_dimensions(area.width, area.height)
        lines = self.console.render_lines(renderable, options, pad=True)
        for offset in range(area.height):
            line = lines[offset] if offset < len(lines) else []
            line = Segment.adjust_line_length(line, area.width)
            row_y = area.y + offset
            parts = list(Segment.divide(self._rows[row_y], [area.x, area.x + area.width, self.width]))
            left = parts[0] if parts else []
            right = parts[2] if len(parts) > 2 else []
            self._rows[row_y] = [*left, *line, *right]

    def _clip(self, area: Rect) -> Rect:
        x = max(0, area.x)
        y = max(0, area.y)
        right = min(self.width, area.x + area.width)
        bottom = min(self.height, area.y + area.height)
        return Rect(x, y, max(0, right - x), max(0, bottom - y))

    def row(self, y: int) -> list[Segment]:
        if 0 <= y < self.height:
            return self._rows[y]
        return [Segment(" " * self.width)]

    def plain_lines(self) -> list[str]:
        """Text of every row without styles (used by tests and debug dumps)."""
        return ["".join(seg.text for seg in row) for row in self._rows]
