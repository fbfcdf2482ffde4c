"""Textual host: feeds terminal input to the App and paints its frames.

Textual only supplies the event loop and the screen here. Routing, focus
and popups all live in the App; the host forwards every key as a press,
paints the App's Frame line by line, and runs the late event after the
repaint that follows each routed event.
"""

from __future__ import annotations

import logging

from textual import events
from textual.app import App as TextualApp
from textual.app import ComposeResult
from textual.screen import Screen
from textual.strip import Strip
from textual.widget import Widget

from ..app import App
from .events import EventState, FocusEvent, KeyEvent, PasteEvent, ResizeEvent
from .frame import Frame

logger = logging.getLogger(__name__)

# Seconds between render passes when no input arrives
TICK_RATE = 0.25


def key_event(event: events.Key) -> KeyEvent:
    """Translate a Textual key into a press, named like `tui.keys.KEYMAP`."""
    code = event.character if event.is_printable and event.character else event.key
    return KeyEvent(code)


class FrameView(Widget):
    """Full-screen widget painting the last Frame the App drew."""

    DEFAULT_CSS = """
    FrameView {
        width: 100%;
        height: 100%;
    }
    """

    def __init__(self, core: App, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._core = core
        self._frame: Frame | None = None

    def redraw(self) -> None:
        self._frame = Frame(self.size.width, self.size.height, console=self.app.console)
        self._core.draw(self._frame)
        self.refresh()

    def render_line(self, y: int) -> Strip:
        width = self.size.width
        if self._frame is None or self._frame.width != width:
            return Strip.blank(width)
        return Strip(self._frame.row(y), width)


class DashboardScreen(Screen):
    # Tab / shift+tab belong to the App's tab bar, not focus navigation
    inherit_bindings = False

    def __init__(self, core: App, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self._core = core

    def compose(self) -> ComposeResult:
        yield FrameView(self._core, id="frame")


class ClashTuiHost(TextualApp):
    """Runs the dashboard in the terminal until the App asks to quit."""

    TITLE = "clashtui"

    def __init__(self, core: App, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.core = core
        self._last_ev = EventState.NOT_CONSUMED

    def on_mount(self) -> None:
        self.push_screen(DashboardScreen(self.core))
        self.set_interval(TICK_RATE, self._tick)
        self.call_after_refresh(self._tick)

    def _tick(self) -> None:
        # Empty until DashboardScreen is mounted
        for view in self.screen.query(FrameView):
            view.redraw()

    def route_event(self, ev: object) -> None:
        """Route one event, repaint, then run the late event."""
        try:
            self._last_ev = self.core.event(ev)
        except OSError as e:
            logger.exception("Event handling failed")
            self.core.popup_txt_msg(str(e))
            self._last_ev = EventState.WORK_DONE

        if self.core.should_quit:
            self.exit()
            return
        self._tick()
        self.call_after_refresh(self._late_event)

    def _late_event(self) -> None:
        self._last_ev = self.core.handle_last_ev(self._last_ev)
        self._tick()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.route_event(key_event(event))

    def on_resize(self, event: events.Resize) -> None:
        self.route_event(ResizeEvent(event.size.width, event.size.height))

    def on_app_focus(self, event: events.AppFocus) -> None:
        self.route_event(FocusEvent(True))

    def on_app_blur(self, event: events.AppBlur) -> None:
        self.route_event(FocusEvent(False))

    def on_paste(self, event: events.Paste) -> None:
        self.route_event(PasteEvent(event.text))
