"""Event builders and an instrumented tab for routing tests."""

from clashtui.tui.events import EventState, KeyEvent, KeyKind
from clashtui.tui.tabs import TabBase


def press(code: str) -> KeyEvent:
    return KeyEvent(code)


def release(code: str) -> KeyEvent:
    return KeyEvent(code, KeyKind.RELEASE)


def repeat(code: str) -> KeyEvent:
    return KeyEvent(code, KeyKind.REPEAT)


class StubTab(TabBase):
    """Tab that records every call and answers with a fixed status."""

    def __init__(self, name: str, answer: EventState = EventState.NOT_CONSUMED,
                 popup_answer: EventState = EventState.NOT_CONSUMED):
        super().__init__()
        self.name = name
        self.answer = answer
        self.popup_answer = popup_answer
        self.events = []
        self.popup_events = []
        self.late_events = 0
        self.draws = 0

    def popup_event(self, ev):
        self.popup_events.append(ev)
        return self.popup_answer

    def event(self, ev):
        self.events.append(ev)
        return self.answer

    def late_event(self):
        self.late_events += 1

    def draw_content(self, frame, area):
        self.draws += 1
