"""Base class for all dashboard tabs."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..events import EventState
from ..frame import Frame, Rect, centered_percent_rect
from ..widgets import MsgPopup, MsgPopupMixin


class TabBase(MsgPopupMixin, ABC):
    """A top-level mode of the dashboard.

    The App offers every event to every tab in order. A hidden tab is not
    drawn, but still sees events and late events; subclasses ignore
    navigation keys while hidden.
    """

    name: str = ""

    def __init__(self) -> None:
        self.visible = False
        self.msgpopup = MsgPopup()

    def set_visible(self, visible: bool) -> None:
        self.visible = visible

    def popup_event(self, ev: object) -> EventState:
        """Offer an event to this tab's popups. Override to add more popups."""
        return self.msgpopup.event(ev)

    @abstractmethod
    def event(self, ev: object) -> EventState:
        """Handle an event no popup or global shortcut consumed."""

    def late_event(self) -> None:
        """Run deferred work after the screen has been redrawn."""

    def draw(self, frame: Frame, area: Rect) -> None:
        if not self.visible:
            return
        self.draw_content(frame, area)
        self.draw_popups(frame, centered_percent_rect(60, 60, frame.area))

    @abstractmethod
    def draw_content(self, frame: Frame, area: Rect) -> None:
        """Paint the tab body."""

    def draw_popups(self, frame: Frame, area: Rect) -> None:
        self.msgpopup.draw(frame, area)
