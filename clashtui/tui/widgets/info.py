"""Help and Info popups."""

from __future__ import annotations

from ... import __version__
from ..keys import HELP_ENTRIES
from .popup import ListPopup


def _rows(entries: list[tuple[str, str]]) -> list[str]:
    width = max((len(k) for k, _ in entries), default=0)
    return [f"{k.ljust(width)}  {v}" for k, v in entries]


class HelpPopup(ListPopup):
    def __init__(self) -> None:
        super().__init__("Help", _rows(HELP_ENTRIES))


class InfoPopup(ListPopup):
    def __init__(self, items: list[tuple[str, str]]) -> None:
        super().__init__("Info", _rows(items))

    @classmethod
    def with_items(cls, clash_version: str) -> InfoPopup:
        return cls([
            ("clashtui", f"v{__version__}"),
            ("clash core", clash_version),
        ])
