"""Helpers for running external commands (service manager, file browser, core)."""

import logging
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# Upper bound for commands that should return promptly
COMMAND_TIMEOUT = 60


def exec_cmd(cmd: list[str], cwd: Path | None = None, timeout: int = COMMAND_TIMEOUT) -> subprocess.CompletedProcess:
    """Run a command to completion and capture its output.

    FileNotFoundError (missing binary) and subprocess.TimeoutExpired
    propagate; both are OSError/SubprocessError for the caller to report.
    """
    logger.debug("exec: %s", " ".join(cmd))
    return subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
    )


def combined_output(result: subprocess.CompletedProcess) -> str:
    """Join stdout and stderr of a finished command."""
    parts = [result.stdout or "", result.stderr or ""]
    return "\n".join(p.strip() for p in parts if p and p.strip())


def spawn(cmd: list[str]) -> None:
    """Start a detached command without waiting for it."""
    logger.debug("spawn: %s", " ".join(cmd))
    subprocess.Popen(
        cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def file_browser_cmd(path: Path) -> list[str]:
    """Command that opens `path` in the platform's file browser."""
    if sys.platform == "darwin":
        return ["open", str(path)]
    if sys.platform.startswith("win"):
        return ["explorer", str(path)]
    return ["xdg-open", str(path)]
