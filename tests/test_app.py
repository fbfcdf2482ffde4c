"""Tests for the App event router and screen composition.

The tabs are StubTabs that record every call, so the routing order and
the "first consumer wins" rule can be checked without any daemon.
"""

from unittest.mock import patch

import pytest
import yaml

from clashtui.app import RECENT_LOG_LINES, App
from clashtui.exceptions import ConfigError, ProfileError, ServiceError
from clashtui.flags import Flag
from clashtui.tui.events import EventState, FocusEvent, UnreachableError
from clashtui.tui.frame import Frame

from helpers import StubTab, press, release, repeat


@pytest.fixture
def tabs():
    return [StubTab("A"), StubTab("B")]


@pytest.fixture
def app(mock_util, tabs):
    return App(mock_util, tabs=tabs)


class TestRoutingOrder:
    """An event is consumed by at most one stage."""

    def test_unhandled_key_reaches_every_tab(self, app, tabs):
        assert app.event(press("x")) is EventState.NOT_CONSUMED
        assert [len(t.events) for t in tabs] == [1, 1]
        assert [len(t.popup_events) for t in tabs] == [1, 1]

    def test_first_tab_consuming_stops_the_chain(self, app, tabs):
        tabs[0].answer = EventState.WORK_DONE
        assert app.event(press("x")) is EventState.WORK_DONE
        assert len(tabs[0].events) == 1
        assert tabs[1].events == []

    def test_tab_popup_consuming_skips_shortcuts_and_tabs(self, app, tabs):
        tabs[0].popup_answer = EventState.WORK_DONE
        assert app.event(press("q")) is EventState.WORK_DONE
        assert app.should_quit is False
        assert tabs[1].popup_events == []
        assert tabs[0].events == [] and tabs[1].events == []

    def test_msgpopup_comes_first(self, app, tabs):
        app.popup_txt_msg("hello")
        assert app.event(press("x")) is EventState.WORK_DONE
        assert tabs[0].popup_events == []
        assert tabs[0].events == []

    def test_help_popup_before_tab_popups(self, app, tabs):
        app.event(press("?"))
        tabs[0].popup_events.clear()
        assert app.event(press("x")) is EventState.WORK_DONE
        assert tabs[0].popup_events == []

    def test_info_popup_before_tab_popups(self, app, tabs):
        app.event(press("I"))
        assert app.info_popup.visible
        tabs[0].popup_events.clear()
        app.event(press("x"))
        assert tabs[0].popup_events == []

    def test_tabbar_before_tabs(self, app, tabs):
        assert app.event(press("tab")) is EventState.WORK_DONE
        assert app.tabbar.index == 1
        assert tabs[0].events == [] and tabs[1].events == []


class TestNonPressEvents:
    """Release and repeat never reach shortcuts, the tab bar or tabs."""

    @pytest.mark.parametrize("make", [release, repeat])
    def test_quit_key_ignored(self, app, tabs, make):
        assert app.event(make("q")) is EventState.NOT_CONSUMED
        assert app.should_quit is False
        assert tabs[0].events == [] and tabs[1].events == []

    def test_release_still_offered_to_popups(self, app, tabs):
        app.event(release("x"))
        assert len(tabs[0].popup_events) == 1

    def test_release_does_not_switch_tab(self, app):
        app.event(release("tab"))
        assert app.tabbar.index == 0

    def test_focus_event_not_consumed(self, app, tabs):
        assert app.event(FocusEvent(True)) is EventState.NOT_CONSUMED
        assert tabs[0].events == []


class TestShortcuts:
    """Tests for the global keys."""

    def test_quit(self, app, tabs):
        assert app.event(press("q")) is EventState.WORK_DONE
        assert app.should_quit is True
        assert tabs[0].events == [] and tabs[1].events == []

    def test_help_is_created_lazily(self, app):
        assert app.help_popup is None
        app.event(press("?"))
        assert app.help_popup is not None
        assert app.help_popup.visible

    def test_help_created_once(self, app):
        app.event(press("?"))
        first = app.help_popup
        app.event(press("escape"))
        app.event(press("?"))
        assert app.help_popup is first
        assert first.visible

    def test_log_cat(self, app, mock_util):
        mock_util.fetch_recent_logs.return_value = ["[INFO] a - b"]
        app.event(press("L"))
        mock_util.fetch_recent_logs.assert_called_once_with(RECENT_LOG_LINES)
        assert app.msgpopup.visible
        assert app.msgpopup.items == ["[INFO] a - b"]

    def test_soft_restart_shows_output(self, app, mock_util):
        mock_util.restart_clash.return_value = "Restart clash: done\n"
        app.event(press("R"))
        assert app.msgpopup.items == ["Restart clash: done"]

    def test_soft_restart_failure_shown(self, app, mock_util):
        mock_util.restart_clash.side_effect = ServiceError("unit not found")
        assert app.event(press("R")) is EventState.WORK_DONE
        assert app.msgpopup.visible
        assert app.msgpopup.items == ["unit not found"]

    def test_open_dir_failure_is_logged_only(self, app, mock_util, caplog):
        mock_util.open_dir.side_effect = NotADirectoryError("Not a directory: /nope")
        assert app.event(press("H")) is EventState.WORK_DONE
        assert app.msgpopup.visible is False
        assert "ODIR" in caplog.text

    def test_open_clash_dir(self, app, mock_util, tui_cfg):
        app.event(press("G"))
        mock_util.open_dir.assert_called_once()
        assert str(mock_util.open_dir.call_args[0][0]) == tui_cfg.clash_cfg_dir


class TestErrors:
    def test_domain_error_raised_as_oserror(self, mock_util):
        class FailingTab(StubTab):
            def event(self, ev):
                raise ProfileError("broken profile")

        app = App(mock_util, tabs=[FailingTab("A")])
        with pytest.raises(OSError, match="broken profile"):
            app.event(press("x"))

    def test_startup_errors_shown(self, mock_util, tabs):
        app = App(mock_util, errors=[ConfigError("clash_cfg_path is not set")], tabs=tabs)
        assert app.msgpopup.visible
        assert app.msgpopup.items == ["clash_cfg_path is not set"]

    def test_first_init_welcome(self, mock_util, tabs):
        app = App(mock_util, Flag.FIRST_INIT, [ConfigError("ignored")], tabs=tabs)
        assert app.msgpopup.visible
        assert app.msgpopup.items[0] == "Welcome to clashtui!"


class TestHandleLastEv:
    """Tests for the late-event protocol."""

    @pytest.mark.parametrize("state", [EventState.NOT_CONSUMED, EventState.WORK_DONE])
    def test_returns_not_consumed(self, app, state):
        assert app.handle_last_ev(state) is EventState.NOT_CONSUMED

    def test_runs_late_event_on_every_tab(self, app, tabs):
        app.handle_last_ev(EventState.WORK_DONE)
        assert [t.late_events for t in tabs] == [1, 1]

    @pytest.mark.parametrize("state", [EventState.YES, EventState.CANCEL])
    def test_prompt_answers_are_unreachable(self, app, tabs, state):
        with pytest.raises(UnreachableError):
            app.handle_last_ev(state)
        assert tabs[0].late_events == 0


class TestVisibility:
    def test_only_selected_tab_visible_after_draw(self, app, tabs):
        app.draw(Frame(80, 24))
        assert [t.visible for t in tabs] == [True, False]
        app.event(press("2"))
        app.draw(Frame(80, 24))
        assert [t.visible for t in tabs] == [False, True]
        assert [t.draws for t in tabs] == [1, 1]

    def test_hidden_tab_still_gets_popup_and_late_events(self, app, tabs):
        app.draw(Frame(80, 24))
        app.event(press("x"))
        app.handle_last_ev(EventState.NOT_CONSUMED)
        assert len(tabs[1].popup_events) == 1
        assert tabs[1].late_events == 1

    def test_out_of_range_selection_is_unreachable(self, app):
        app.tabbar.index = 5
        with pytest.raises(UnreachableError):
            app.update_tabbar()


class TestDraw:
    def test_composes_tabbar_and_statusbar(self, app):
        frame = Frame(80, 24)
        app.draw(frame)
        lines = frame.plain_lines()
        assert "1:A" in lines[1]
        assert "2:B" in lines[1]
        assert "Mode: rule" in lines[-2]

    def test_msgpopup_drawn_over_tabs(self, app):
        app.popup_txt_msg("over the top")
        frame = Frame(80, 24)
        app.draw(frame)
        assert any("over the top" in line for line in frame.plain_lines())

    def test_tiny_frame_does_not_fail(self, app):
        app.draw(Frame(10, 3))


class TestSave:
    def test_writes_config(self, app, tmp_path):
        path = tmp_path / "config.yaml"
        app.util.tui_cfg.current_profile = "work"
        app.save(path)
        assert yaml.safe_load(path.read_text())["current_profile"] == "work"

    def test_yaml_error_raised_as_oserror(self, app, tmp_path):
        with patch.object(app.util.tui_cfg, "to_file", side_effect=yaml.YAMLError("bad")):
            with pytest.raises(OSError):
                app.save(tmp_path / "config.yaml")

    def test_unwritable_path(self, app, tmp_path):
        with pytest.raises(OSError):
            app.save(tmp_path / "missing" / "config.yaml")
