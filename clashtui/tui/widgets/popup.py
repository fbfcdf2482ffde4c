"""Popup widgets: scrolling list popups and the yes/no prompt."""

from __future__ import annotations

from typing import Iterable

from rich.panel import Panel
from rich.text import Text

from ..events import EventState, pressed_key
from ..frame import Frame, Rect
from ..keys import Keys, key_of


class ListPopup:
    """Modal popup showing a scrollable list of lines.

    While visible it consumes every key press: Up/Down scroll, Esc/Enter
    close, anything else is swallowed. Hidden, it consumes nothing.
    """

    def __init__(self, title: str, items: Iterable[str] = ()) -> None:
        self.title = title
        self.items: list[str] = list(items)
        self.offset = 0
        self.visible = False

    def set_items(self, items: Iterable[str]) -> None:
        self.items = list(items)
        self.offset = 0

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def event(self, ev: object) -> EventState:
        if not self.visible:
            return EventState.NOT_CONSUMED
        code = pressed_key(ev)
        if code is None:
            return EventState.NOT_CONSUMED

        key = key_of(code)
        if key is Keys.UP:
            self.offset = max(0, self.offset - 1)
        elif key is Keys.DOWN:
            self.offset = min(max(0, len(self.items) - 1), self.offset + 1)
        elif key in (Keys.ESC, Keys.SELECT):
            self.hide()
        return EventState.WORK_DONE

    def draw(self, frame: Frame, area: Rect) -> None:
        if not self.visible:
            return
        body = Text("\n".join(self.items[self.offset:]), no_wrap=True, overflow="ellipsis")
        frame.render(
            Panel(body, title=self.title, subtitle="Esc to close", border_style="cyan"),
            area,
        )


class MsgPopup(ListPopup):
    """Highest-priority popup, used to report the outcome of an operation."""

    def __init__(self) -> None:
        super().__init__("Msg")

    def push_txt_msg(self, msg: str) -> None:
        self.set_items([msg])

    def push_list_msg(self, msgs: Iterable[str]) -> None:
        self.set_items(msgs)


class MsgPopupMixin:
    """Adds popup_*_msg helpers to anything owning a `msgpopup`."""

    msgpopup: MsgPopup

    def popup_txt_msg(self, msg: str) -> None:
        self.msgpopup.push_txt_msg(msg)
        self.msgpopup.show()

    def popup_list_msg(self, msgs: Iterable[str]) -> None:
        self.msgpopup.push_list_msg(msgs)
        self.msgpopup.show()

    def hide_msgpopup(self) -> None:
        self.msgpopup.hide()


class ConfirmPopup:
    """Yes/no prompt. Answers with EventState.YES or EventState.CANCEL."""

    def __init__(self) -> None:
        self.title = "Confirm"
        self.message = ""
        self.visible = False

    def popup_msg(self, message: str) -> None:
        self.message = message
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def event(self, ev: object) -> EventState:
        if not self.visible:
            return EventState.NOT_CONSUMED
        code = pressed_key(ev)
        if code is None:
            return EventState.NOT_CONSUMED

        key = key_of(code)
        if key is Keys.YES:
            self.hide()
            return EventState.YES
        if key in (Keys.NO, Keys.ESC):
            self.hide()
            return EventState.CANCEL
        return EventState.WORK_DONE

    def draw(self, frame: Frame, area: Rect) -> None:
        if not self.visible:
            return
        body = Text(f"{self.message}\n\n[y] Yes    [n] No")
        frame.render(Panel(body, title=self.title, border_style="yellow"), area)
