"""The App: owns every widget, routes events, composes the screen.

Event routing is a chain where the first consumer wins:

    message popup -> help popup -> info popup -> tab popups
    -> global shortcuts -> tab bar -> tabs

Only key presses reach the shortcut stage and beyond.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .api import ClashError
from .exceptions import ClashTuiError, ConfigError, ServiceError
from .flags import Flag
from .state import State
from .tui.events import EventState, KeyEvent, UnreachableError
from .tui.frame import Frame, centered_percent_rect
from .tui.keys import Keys, key_of
from .tui.statusbar import StatusBar
from .tui.tabbar import TabBar
from .tui.tabs import ProfileTab, ServiceTab, TabBase
from .tui.widgets import HelpPopup, InfoPopup, MsgPopup, MsgPopupMixin
from .util import ClashTuiUtil

logger = logging.getLogger(__name__)

RECENT_LOG_LINES = 20


class App(MsgPopupMixin):
    """Dashboard core, independent of the terminal host.

    Args:
        util: Daemon-facing client
        flags: Startup flags
        errors: Config problems found while building `util`, shown at start
        tabs: Override the tab list (tests inject stub tabs)
    """

    def __init__(
        self,
        util: ClashTuiUtil,
        flags: Flag = Flag(0),
        errors: list[ConfigError] | None = None,
        tabs: list[TabBase] | None = None,
    ) -> None:
        self.util = util
        self.should_quit = False
        self.state = State(util)
        if tabs is None:
            tabs = [
                ProfileTab(util, self.state),
                ServiceTab(util, self.state),
            ]
        self.tabs = tabs
        self.tabbar = TabBar([tab.name for tab in tabs])
        self.statusbar = StatusBar(self.state)
        self.help_popup: HelpPopup | None = None
        self.info_popup = InfoPopup.with_items(util.clash_version())
        self.msgpopup = MsgPopup()

        if Flag.FIRST_INIT in flags:
            self.popup_list_msg([
                "Welcome to clashtui!",
                f"Edit {util.clashtui_dir / 'config.yaml'} to point at your clash setup,",
                f"then put profiles in {util.profile_dir}.",
            ])
        elif errors:
            self.popup_list_msg(str(e) for e in errors)

    def _help(self) -> HelpPopup:
        if self.help_popup is None:
            self.help_popup = HelpPopup()
        return self.help_popup

    def _popup_event(self, ev: object) -> EventState:
        event_state = EventState.NOT_CONSUMED
        if self.help_popup is not None:
            event_state = self.help_popup.event(ev)
        if event_state.is_not_consumed():
            event_state = self.info_popup.event(ev)
        for tab in self.tabs:
            if event_state.is_consumed():
                break
            event_state = tab.popup_event(ev)
        return event_state

    def event(self, ev: object) -> EventState:
        """Route one input event; returns the resulting status.

        Raises:
            OSError: A widget failed with a domain error while handling it
        """
        try:
            return self._route(ev)
        except (ClashTuiError, ClashError) as e:
            raise OSError(f"Event handling failed: {e}") from e

    def _route(self, ev: object) -> EventState:
        event_state = self.msgpopup.event(ev)
        if event_state.is_not_consumed():
            event_state = self._popup_event(ev)
        if event_state.is_consumed():
            return event_state

        if not isinstance(ev, KeyEvent) or not ev.is_press:
            return EventState.NOT_CONSUMED

        event_state = self._shortcut(key_of(ev.code))
        if event_state.is_not_consumed():
            event_state = self.tabbar.event(ev)
        for tab in self.tabs:
            if event_state.is_consumed():
                break
            event_state = tab.event(ev)
        return event_state

    def _shortcut(self, key: Keys | None) -> EventState:
        if key is Keys.APP_QUIT:
            self.should_quit = True
        elif key is Keys.APP_HELP:
            self._help().show()
        elif key is Keys.APP_INFO:
            self.info_popup.show()
        elif key is Keys.OPEN_TUI_CONFIG_DIR:
            self._open_dir(self.util.clashtui_dir)
        elif key is Keys.OPEN_CLASH_CONFIG_DIR:
            self._open_dir(Path(self.util.tui_cfg.clash_cfg_dir))
        elif key is Keys.LOG_CAT:
            self.popup_list_msg(self.util.fetch_recent_logs(RECENT_LOG_LINES))
        elif key is Keys.SOFT_RESTART:
            try:
                output = self.util.restart_clash()
                self.popup_list_msg(line.strip() for line in output.splitlines())
            except (ServiceError, OSError) as e:
                self.popup_txt_msg(str(e))
        else:
            return EventState.NOT_CONSUMED
        return EventState.WORK_DONE

    def _open_dir(self, path: Path) -> None:
        try:
            self.util.open_dir(path)
        except OSError as e:
            logger.error("ODIR: %s", e)

    def late_event(self) -> None:
        for tab in self.tabs:
            tab.late_event()

    def handle_last_ev(self, last_ev: EventState) -> EventState:
        """Give tabs a chance to run deferred work after a redraw.

        Called with the status of the previous event. YES/CANCEL must have
        been resolved by the prompt that produced them; seeing one here is
        a bug.
        """
        if last_ev in (EventState.YES, EventState.CANCEL):
            raise UnreachableError(f"{last_ev} reached the top-level event loop")
        self.late_event()
        return EventState.NOT_CONSUMED

    def update_tabbar(self) -> None:
        tabname = self.tabbar.selected()
        if tabname is None:
            raise UnreachableError(f"selected tab {self.tabbar.index} out of bound")
        for tab in self.tabs:
            tab.set_visible(tab.name == tabname)

    def draw(self, frame: Frame) -> None:
        header, body, footer = frame.area.split_vertical(3, None, 3)

        self.update_tabbar()
        self.tabbar.draw(frame, header)
        for tab in self.tabs:
            tab.draw(frame, body)
        self.statusbar.draw(frame, footer)

        popup_area = centered_percent_rect(60, 60, frame.area)
        if self.help_popup is not None:
            self.help_popup.draw(frame, popup_area)
        self.info_popup.draw(frame, popup_area)
        self.msgpopup.draw(frame, popup_area)

    def save(self, config_path: Path) -> None:
        """Persist the tui config. Any failure is raised as OSError."""
        try:
            self.util.tui_cfg.to_file(config_path)
        except yaml.YAMLError as e:
            raise OSError(f"Failed to save {config_path}: {e}") from e
