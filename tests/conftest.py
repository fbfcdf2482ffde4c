"""Shared test fixtures for clashtui tests."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from clashtui.config import PROFILE_CACHE_DIR_NAME, PROFILES_DIR_NAME, TuiConfig


@pytest.fixture
def clashtui_dir(tmp_path):
    """A clashtui config dir with an empty profiles tree."""
    d = tmp_path / "clashtui"
    (d / PROFILES_DIR_NAME / PROFILE_CACHE_DIR_NAME).mkdir(parents=True)
    return d


@pytest.fixture
def clash_dir(tmp_path):
    """A clash core config dir holding config.yaml."""
    d = tmp_path / "clash"
    d.mkdir()
    (d / "config.yaml").write_text("external-controller: 127.0.0.1:9090\n")
    return d


@pytest.fixture
def tui_cfg(clash_dir):
    return TuiConfig(
        clash_cfg_dir=str(clash_dir),
        clash_cfg_path=str(clash_dir / "config.yaml"),
        clash_core_path="/usr/bin/mihomo",
        clash_srv_name="clash",
    )


@pytest.fixture
def mock_util(clashtui_dir, tui_cfg):
    """A ClashTuiUtil stand-in with a reachable controller."""
    util = MagicMock()
    util.clashtui_dir = clashtui_dir
    util.profile_dir = clashtui_dir / PROFILES_DIR_NAME
    util.tui_cfg = tui_cfg
    util.fetch_remote.return_value = {"mode": "rule", "tun": {"enable": False}}
    util.clash_version.return_value = "Meta v1.18.1"
    util.get_profile_names.return_value = []
    return util


@pytest.fixture
def restore_logging():
    """Undo basicConfig(force=True) done by the test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_profile(clashtui_dir):
    """Write a profile file and return its path."""
    def _write(name: str, content: str) -> Path:
        path = clashtui_dir / PROFILES_DIR_NAME / f"{name}.yaml"
        path.write_text(content)
        return path
    return _write
