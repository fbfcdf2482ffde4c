"""Shared view of the running service, read by the status bar and tabs."""

import logging
from contextlib import contextmanager
from typing import Iterator

from .api import ClashError
from .util import ClashTuiUtil

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


class BorrowError(RuntimeError):
    """Raised when State is mutated while another mutation is in progress."""


class State:
    """Current profile, proxy mode and tun status.

    One instance exists per process. Holders share it by reference and
    mutate it only inside ``borrow_mut()``, which refuses nesting.
    """

    def __init__(self, util: ClashTuiUtil):
        self._util = util
        self._borrowed = False
        self.profile = util.tui_cfg.current_profile
        self.mode = UNKNOWN
        self.tun = UNKNOWN
        self.refresh()

    @contextmanager
    def borrow_mut(self) -> Iterator["State"]:
        if self._borrowed:
            raise BorrowError("State is already borrowed mutably")
        self._borrowed = True
        try:
            yield self
        finally:
            self._borrowed = False

    def refresh(self) -> None:
        """Re-read mode and tun from the controller; keeps old values on failure."""
        with self.borrow_mut():
            self.profile = self._util.tui_cfg.current_profile
            try:
                remote = self._util.fetch_remote()
            except (ClashError, TimeoutError) as e:
                logger.warning("Fetching remote config: %s", e)
                return
            self.mode = str(remote.get("mode", UNKNOWN))
            tun = remote.get("tun") or {}
            if isinstance(tun, dict) and "enable" in tun:
                self.tun = "on" if tun["enable"] else "off"

    def set_profile(self, name: str) -> None:
        with self.borrow_mut():
            self._util.select_profile(name)
            self.profile = name

    def set_mode(self, mode: str) -> None:
        with self.borrow_mut():
            self._util.set_mode(mode)
            self.mode = mode

    def render(self) -> str:
        profile = self.profile or "(none)"
        return f"Profile: {profile}  |  Mode: {self.mode}  |  Tun: {self.tun}"
