"""Service control tab: restart/stop the clash service and switch proxy mode."""

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
from .base import TabBase

logger = logging.getLogger(__name__)


class ServiceOp(Enum):
    RESTART = "Restart clash service"
    STOP = "Stop clash service"
    MODE_RULE = "Switch mode: rule"
    MODE_GLOBAL = "Switch mode: global"
    MODE_DIRECT = "Switch mode: direct"
    TEST_CONFIG = "Test clash config"
    REFRESH = "Refresh status"


_MODES = {
    ServiceOp.MODE_RULE: "rule",
    ServiceOp.MODE_GLOBAL: "global",
    ServiceOp.MODE_DIRECT: "direct",
}


class ServiceTab(TabBase):
    name = "Service"

    def __init__(self, util: ClashTuiUtil, state: State) -> None:
        super().__init__()
        self.util = util
        self.state = state
        self.ops = list(ServiceOp)
        self.cursor = 0
        self._pending: ServiceOp | None = None

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
            self.cursor = min(len(self.ops) - 1, self.cursor + 1)
        elif key is Keys.SELECT:
            self._pending = self.ops[self.cursor]
            self.popup_txt_msg(f"{self._pending.value}, please wait...")
        else:
            return EventState.NOT_CONSUMED
        return EventState.WORK_DONE

    def late_event(self) -> None:
        if self._pending is None:
            return
        op = self._pending
        self._pending = None
        try:
            self.popup_list_msg(self._run(op))
        except (ClashTuiError, ClashError, OSError) as e:
            logger.error("%s: %s", op.value, e)
            self.popup_txt_msg(str(e))

    def _run(self, op: ServiceOp) -> list[str]:
        if op is ServiceOp.RESTART:
            output = self.util.restart_clash()
        elif op is ServiceOp.STOP:
            output = self.util.stop_clash()
        elif op in _MODES:
            self.state.set_mode(_MODES[op])
            return [f"Mode switched to {_MODES[op]}"]
        elif op is ServiceOp.TEST_CONFIG:
            output = self.util.test_profile_config(self.util.tui_cfg.clash_cfg_path)
        else:
            self.state.refresh()
            return [self.state.render()]
        self.state.refresh()
        return [line.strip() for line in output.splitlines()] or [f"{op.value}: done"]

    def draw_content(self, frame: Frame, area: Rect) -> None:
        body = Text(no_wrap=True, overflow="ellipsis")
        for i, op in enumerate(self.ops):
            if i:
                body.append("\n")
            body.append(f"  {op.value}", style="reverse" if i == self.cursor else "")
        frame.render(Panel(body, title="Clash service", border_style="blue"), area)
