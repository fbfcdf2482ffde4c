"""Startup flags, decoded once from the command line and the filesystem."""

import enum
from pathlib import Path


class Flag(enum.Flag):
    FIRST_INIT = enum.auto()
    UPDATE_ONLY = enum.auto()


def decode_flags(update_only: bool, config_dir: Path) -> Flag:
    """Build the flag set.

    Must run before anything creates `config_dir`, otherwise a first run
    is never detected.
    """
    flags = Flag(0)
    if not config_dir.exists():
        flags |= Flag.FIRST_INIT
    if update_only:
        flags |= Flag.UPDATE_ONLY
    return flags
