"""Tests for the shared State and its single-writer guard."""

import pytest

from clashtui.api import ClashAPIError
from clashtui.state import UNKNOWN, BorrowError, State


class TestRefresh:
    def test_reads_remote(self, mock_util):
        mock_util.fetch_remote.return_value = {"mode": "global", "tun": {"enable": True}}
        state = State(mock_util)
        assert state.mode == "global"
        assert state.tun == "on"

    def test_unreachable_controller_keeps_values(self, mock_util):
        state = State(mock_util)
        mock_util.fetch_remote.side_effect = ClashAPIError("connection refused")
        state.refresh()
        assert state.mode == "rule"
        assert state.tun == "off"

    def test_unknown_when_never_reached(self, mock_util):
        mock_util.fetch_remote.side_effect = TimeoutError("timed out")
        state = State(mock_util)
        assert state.mode == UNKNOWN
        assert state.tun == UNKNOWN

    def test_render(self, mock_util):
        mock_util.tui_cfg.current_profile = ""
        assert State(mock_util).render() == "Profile: (none)  |  Mode: rule  |  Tun: off"


class TestBorrowMut:
    def test_nested_borrow_raises(self, mock_util):
        state = State(mock_util)
        with state.borrow_mut():
            with pytest.raises(BorrowError):
                with state.borrow_mut():
                    pass

    def test_released_after_error(self, mock_util):
        state = State(mock_util)
        mock_util.set_mode.side_effect = ClashAPIError("bad mode")
        with pytest.raises(ClashAPIError):
            state.set_mode("bogus")
        state.set_mode("rule")
        assert state.mode == "rule"

    def test_refresh_during_mutation_raises(self, mock_util):
        state = State(mock_util)
        with state.borrow_mut():
            with pytest.raises(BorrowError):
                state.refresh()

    def test_set_profile(self, mock_util):
        state = State(mock_util)
        state.set_profile("work")
        mock_util.select_profile.assert_called_once_with("work")
        assert state.profile == "work"
