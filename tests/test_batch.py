"""Tests for the headless update mode."""

from unittest.mock import MagicMock

import pytest

from clashtui.batch import run_update_only
from clashtui.exceptions import ProfileError
from clashtui.util import ClashTuiUtil


def update(name, does_update_all):
    if name == "B":
        raise ProfileError("Failed to download B: 503")
    return [f"Updated: {name}-provider"]


class TestRunUpdateOnly:
    def test_failure_does_not_abort(self, mock_util):
        mock_util.get_profile_names.return_value = ["A", "B", "C"]
        mock_util.update_local_profile.side_effect = update
        out = []

        assert run_update_only(mock_util, echo=out.append) is True

        assert out == [
            "\nProfile: A",
            "- Updated: A-provider",
            "\nProfile: B",
            "- Error! Failed to download B: 503",
            "\nProfile: C",
            "- Updated: C-provider",
        ]

    def test_never_forces_update_all(self, mock_util):
        mock_util.get_profile_names.return_value = ["A"]
        mock_util.update_local_profile.return_value = []
        run_update_only(mock_util, echo=lambda line: None)
        mock_util.update_local_profile.assert_called_once_with("A", False)

    def test_listing_failure(self, mock_util):
        mock_util.get_profile_names.side_effect = FileNotFoundError("no profiles dir")
        out = []
        assert run_update_only(mock_util, echo=out.append) is False
        assert out == ["- Error! no profiles dir"]
        mock_util.update_local_profile.assert_not_called()


class TestMalformedProfiles:
    """A broken profile on disk is reported and the batch moves on."""

    @pytest.fixture
    def util(self, clashtui_dir, tui_cfg):
        api = MagicMock()
        api.download.return_value = b"proxies: []\n"
        return ClashTuiUtil(clashtui_dir, tui_cfg, api)

    @pytest.mark.parametrize("content", [
        "proxy-providers: [foo]\n",
        "proxy-providers:\n  p:\n    type: http\n    url: https://x/p\n    path: ./p.yaml\n    interval: 'soon'\n",
        "proxy-providers:\n  p:\n    type: http\n    url: https://x/p\n    path: 42\n",
    ])
    def test_next_profile_still_updated(self, util, write_profile, content):
        write_profile("a-broken", content)
        write_profile("b-sub", "https://example.com/sub\n")
        out = []

        assert run_update_only(util, echo=out.append) is True

        assert out[0] == "\nProfile: a-broken"
        assert out[1].startswith(("- Error!", "- Not updated: p"))
        assert out[-2:] == ["\nProfile: b-sub", "- Updated: b-sub"]
