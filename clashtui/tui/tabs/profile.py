"""Profile tab: list, select, update, test and delete profiles."""

from __future__ import annotations

import logging
from enum import Enum

from rich.panel import Panel
from rich.text import Text

from ...api import ClashError
from ...exceptions import ClashTuiError
from ...state import State
from ...util import ClashTuiUtil
from ..events import EventState, pressed_key
from ..frame import Frame, Rect
from ..keys import Keys, key_of
from ..widgets import ConfirmPopup
from .base import TabBase

logger = logging.getLogger(__name__)


class ProfileOp(Enum):
    SELECT = "Selecting"
    UPDATE = "Updating"
    UPDATE_ALL = "Updating all providers of"
    TEST = "Testing"


class ProfileTab(TabBase):
    """Scrollable profile list.

    Blocking operations are deferred: the key press only records the
    operation and shows a wait message, late_event() runs it after the
    message has been drawn.
    """

    name = "Profile"

    def __init__(self, util: ClashTuiUtil, state: State) -> None:
        super().__init__()
        self.util = util
        self.state = state
        self.confirm = ConfirmPopup()
        self.profiles: list[str] = []
        self.cursor = 0
        self._pending: tuple[ProfileOp, str] | None = None
        self._pending_delete: str | None = None
        self.reload_profiles()

    def reload_profiles(self) -> None:
        try:
            self.profiles = self.util.get_profile_names()
        except OSError as e:
            logger.error("Listing profiles: %s", e)
            self.profiles = []
        self.cursor = min(self.cursor, max(0, len(self.profiles) - 1))

    def selected_profile(self) -> str | None:
        if 0 <= self.cursor < len(self.profiles):
            return self.profiles[self.cursor]
        return None

    def popup_event(self, ev: object) -> EventState:
        event_state = self.msgpopup.event(ev)
        if event_state.is_not_consumed():
            event_state = self.confirm.event(ev)
            if event_state is EventState.YES:
                self._delete_confirmed()
                event_state = EventState.WORK_DONE
            elif event_state is EventState.CANCEL:
                self._pending_delete = None
                event_state = EventState.WORK_DONE
        return event_state

    def event(self, ev: object) -> EventState:
        if not self.visible:
            return EventState.NOT_CONSUMED
        code = pressed_key(ev)
        if code is None:
            return EventState.NOT_CONSUMED

        key = key_of(code)
        if key is Keys.UP:
            self.cursor = max(0, self.cursor - 1)
        elif key is Keys.DOWN:
            self.cursor = min(max(0, len(self.profiles) - 1), self.cursor + 1)
        elif key is Keys.SELECT:
            self._schedule(ProfileOp.SELECT)
        elif key is Keys.PROFILE_UPDATE:
            self._schedule(ProfileOp.UPDATE)
        elif key is Keys.PROFILE_UPDATE_ALL:
            self._schedule(ProfileOp.UPDATE_ALL)
        elif key is Keys.PROFILE_TEST:
            self._schedule(ProfileOp.TEST)
        elif key is Keys.PROFILE_DELETE:
            name = self.selected_profile()
            if name is None:
                self.popup_txt_msg("No profile selected")
            else:
                self._pending_delete = name
                self.confirm.popup_msg(f"Delete profile '{name}'?")
        else:
            return EventState.NOT_CONSUMED
        return EventState.WORK_DONE

    def _schedule(self, op: ProfileOp) -> None:
        name = self.selected_profile()
        if name is None:
            self.popup_txt_msg("No profile selected")
            return
        self._pending = (op, name)
        self.popup_txt_msg(f"{op.value} {name}, please wait...")

    def late_event(self) -> None:
        if self._pending is None:
            return
        op, name = self._pending
        self._pending = None
        try:
            if op is ProfileOp.SELECT:
                self.state.set_profile(name)
                self.popup_txt_msg(f"Selected: {name}")
            elif op is ProfileOp.TEST:
                output = self.util.test_profile_config(self.util.get_profile_config_path(name))
                self.popup_list_msg(output.splitlines() or [f"{name}: no output"])
            else:
                results = self.util.update_local_profile(name, op is ProfileOp.UPDATE_ALL)
                self.popup_list_msg(results or [f"{name}: nothing to update"])
        except (ClashTuiError, ClashError, OSError) as e:
            logger.error("%s %s: %s", op.value, name, e)
            self.popup_txt_msg(str(e))

    def _delete_confirmed(self) -> None:
        name = self._pending_delete
        self._pending_delete = None
        if name is None:
            return
        try:
            self.util.delete_profile(name)
        except (ClashTuiError, OSError) as e:
            logger.error("Deleting %s: %s", name, e)
            self.popup_txt_msg(str(e))
            return
        self.reload_profiles()
        self.popup_txt_msg(f"Deleted: {name}")

    def draw_content(self, frame: Frame, area: Rect) -> None:
        body = Text(no_wrap=True, overflow="ellipsis")
        if not self.profiles:
            body.append(f"No profiles in {self.util.profile_dir}", style="dim")
        # Keep the cursor row on screen
        rows = max(1, area.height - 2)
        start = max(0, self.cursor - rows + 1)
        for i, name in enumerate(self.profiles[start:start + rows], start=start):
            marker = "*" if name == self.state.profile else " "
            style = "reverse" if i == self.cursor else ""
            if i > start:
                body.append("\n")
            body.append(f"{marker} {name}", style=style)
        frame.render(Panel(body, title="Profiles", border_style="blue"), area)

    def draw_popups(self, frame: Frame, area: Rect) -> None:
        self.confirm.draw(frame, area)
        self.msgpopup.draw(frame, area)
