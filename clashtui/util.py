"""Daemon-facing client: profiles, service control and controller access.

ClashTuiUtil is the one handle every tab, the status bar and the headless
batch talk to. All calls are blocking.
"""

import logging
import subprocess
import time
from collections import deque
from pathlib import Path
from typing import Any

import yaml

from .api import ClashError, ClashUtil
from .config import (
    PROFILE_CACHE_DIR_NAME,
    PROFILES_DIR_NAME,
    TuiConfig,
    get_config_path,
    get_controller,
    init_config_dir,
    load_clash_config,
)
from .exceptions import ConfigError, ProfileError, ServiceError
from .ipc import combined_output, exec_cmd, file_browser_cmd, spawn
from .logs import LOG_FILE_NAME

logger = logging.getLogger(__name__)

# Provider refresh interval when a provider does not declare one (seconds)
DEFAULT_PROVIDER_INTERVAL = 86400

PROFILE_SUFFIX = ".yaml"


class ClashTuiUtil:
    """Handle to the clash service, its controller and the local profiles.

    Args:
        clashtui_dir: The clashtui config directory
        tui_cfg: Loaded tui settings
        clash_api: Controller client
    """

    def __init__(self, clashtui_dir: Path, tui_cfg: TuiConfig, clash_api: ClashUtil):
        self.clashtui_dir = clashtui_dir
        self.tui_cfg = tui_cfg
        self.clash_api = clash_api

    @classmethod
    def new(cls, clashtui_dir: Path, is_inited: bool) -> tuple["ClashTuiUtil", list[ConfigError]]:
        """Build the util, collecting config problems instead of failing.

        Args:
            clashtui_dir: The clashtui config directory
            is_inited: False on first run; the directory tree is created

        Returns:
            (util, errors) where errors are shown to the user at startup
        """
        errors: list[ConfigError] = []
        if not is_inited:
            init_config_dir(clashtui_dir)

        try:
            tui_cfg = TuiConfig.from_file(get_config_path(clashtui_dir))
        except ConfigError as e:
            logger.error("Loading config: %s", e)
            errors.append(e)
            tui_cfg = TuiConfig()

        for problem in tui_cfg.check():
            errors.append(ConfigError(problem))

        clash_config: dict[str, Any] = {}
        if tui_cfg.clash_cfg_path:
            try:
                clash_config = load_clash_config(tui_cfg.clash_cfg_path)
            except ConfigError as e:
                logger.error("Loading clash config: %s", e)
                errors.append(e)

        controller, secret = get_controller(clash_config)
        clash_api = ClashUtil(controller, secret=secret, timeout=tui_cfg.timeout or 5)
        return cls(clashtui_dir, tui_cfg, clash_api), errors

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    @property
    def profile_dir(self) -> Path:
        return self.clashtui_dir / PROFILES_DIR_NAME

    @property
    def profile_cache_dir(self) -> Path:
        return self.profile_dir / PROFILE_CACHE_DIR_NAME

    def get_profile_names(self) -> list[str]:
        """List profile names (file stems), sorted.

        Raises FileNotFoundError if the profiles directory is missing.
        """
        return sorted(
            p.stem
            for p in self.profile_dir.iterdir()
            if p.is_file() and p.suffix == PROFILE_SUFFIX
        )

    def get_profile_path(self, name: str) -> Path:
        return self.profile_dir / f"{name}{PROFILE_SUFFIX}"

    def get_profile_cache_path(self, name: str) -> Path:
        return self.profile_cache_dir / f"{name}{PROFILE_SUFFIX}"

    def _read_profile(self, name: str) -> str:
        path = self.get_profile_path(name)
        try:
            return path.read_text()
        except FileNotFoundError:
            raise ProfileError(f"Profile not found: {name}")
        except OSError as e:
            raise ProfileError(f"Failed to read profile {name}: {e}")

    @staticmethod
    def _profile_url(content: str) -> str | None:
        """Return the subscription URL if the profile is a bare URL."""
        lines = [line.strip() for line in content.splitlines() if line.strip()]
        if len(lines) == 1 and lines[0].startswith(("http://", "https://")):
            return lines[0]
        return None

    def update_local_profile(self, name: str, does_update_all: bool) -> list[str]:
        """Refresh the remote parts of a profile.

        A profile that is a bare URL is downloaded whole into the profile
        cache. Otherwise each http proxy-provider is downloaded to its
        `path`, skipping fresh providers unless `does_update_all`.

        Returns:
            One human-readable line per updated (or skipped) item

        Raises:
            ProfileError: If the profile is missing, unparsable, or a URL
                profile fails to download
        """
        content = self._read_profile(name)
        url = self._profile_url(content)
        if url:
            try:
                data = self.clash_api.download(url)
            except (ClashError, TimeoutError) as e:
                raise ProfileError(f"Failed to download {name}: {e}")
            self.profile_cache_dir.mkdir(parents=True, exist_ok=True)
            self.get_profile_cache_path(name).write_bytes(data)
            logger.info("Updated profile %s from %s", name, url)
            return [f"Updated: {name}"]

        try:
            profile = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ProfileError(f"Invalid profile {name}: {e}")
        if not isinstance(profile, dict):
            raise ProfileError(f"Invalid profile {name}: not a mapping")

        results = []
        providers = profile.get("proxy-providers") or {}
        if not isinstance(providers, dict):
            raise ProfileError(f"Invalid profile {name}: proxy-providers must be a mapping")
        for provider_name, provider in providers.items():
            if not isinstance(provider, dict) or provider.get("type") != "http":
                continue
            provider_url = provider.get("url")
            provider_path = provider.get("path")
            if not provider_url or not provider_path:
                continue
            if not isinstance(provider_url, str) or not isinstance(provider_path, str):
                results.append(f"Not updated: {provider_name}, url and path must be strings")
                continue
            target = Path(provider_path)
            if not target.is_absolute():
                target = Path(self.tui_cfg.clash_cfg_dir or self.profile_dir) / target

            try:
                interval = int(provider.get("interval") or DEFAULT_PROVIDER_INTERVAL)
            except (TypeError, ValueError):
                results.append(f"Not updated: {provider_name}, invalid interval {provider.get('interval')!r}")
                continue
            if not does_update_all and _is_fresh(target, interval):
                results.append(f"Not updated: {provider_name} (fresh)")
                continue
            try:
                data = self.clash_api.download(provider_url)
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
                results.append(f"Updated: {provider_name}")
            except (ClashError, TimeoutError, OSError) as e:
                logger.warning("Provider %s of %s: %s", provider_name, name, e)
                results.append(f"Not updated: {provider_name}, {e}")
        return results

    def get_profile_config_path(self, name: str) -> Path:
        """File holding the clash config of a profile (the download for URL profiles)."""
        if self._profile_url(self._read_profile(name)):
            cache = self.get_profile_cache_path(name)
            if not cache.exists():
                raise ProfileError(f"Profile {name} has not been downloaded yet, update it first")
            return cache
        return self.get_profile_path(name)

    def select_profile(self, name: str) -> None:
        """Install a profile as the clash config and reload the core."""
        try:
            content = self.get_profile_config_path(name).read_text()
        except OSError as e:
            raise ProfileError(f"Failed to read profile {name}: {e}")
        if not self.tui_cfg.clash_cfg_path:
            raise ProfileError("clash_cfg_path is not set")

        target = Path(self.tui_cfg.clash_cfg_path)
        try:
            target.write_text(content)
        except OSError as e:
            raise ProfileError(f"Failed to write {target}: {e}")
        try:
            self.clash_api.config_reload(str(target.resolve()))
        except (ClashError, TimeoutError) as e:
            raise ProfileError(f"Profile written but reload failed: {e}")
        self.tui_cfg.current_profile = name
        logger.info("Selected profile %s", name)

    def delete_profile(self, name: str) -> None:
        """Remove a profile and its downloaded cache."""
        path = self.get_profile_path(name)
        if not path.exists():
            raise ProfileError(f"Profile not found: {name}")
        path.unlink()
        self.get_profile_cache_path(name).unlink(missing_ok=True)
        if self.tui_cfg.current_profile == name:
            self.tui_cfg.current_profile = ""
        logger.info("Deleted profile %s", name)

    def test_profile_config(self, path: Path) -> str:
        """Let the core validate a config file; returns the core's output."""
        cmd = [self.tui_cfg.clash_core_path, "-d", self.tui_cfg.clash_cfg_dir, "-f", str(path), "-t"]
        try:
            result = exec_cmd(cmd)
        except (OSError, subprocess.SubprocessError) as e:
            raise ServiceError(f"Failed to run {cmd[0] or 'clash core'}: {e}")
        return combined_output(result)

    # ------------------------------------------------------------------
    # Service and host
    # ------------------------------------------------------------------

    def _systemctl(self, action: str) -> str:
        cmd = ["systemctl"]
        if self.tui_cfg.is_user:
            cmd.append("--user")
        cmd += [action, self.tui_cfg.clash_srv_name]
        try:
            result = exec_cmd(cmd)
        except (OSError, subprocess.SubprocessError) as e:
            raise ServiceError(f"Failed to run systemctl: {e}")
        output = combined_output(result)
        if result.returncode != 0:
            raise ServiceError(
                output or f"systemctl {action} exited with {result.returncode}",
                output=output,
            )
        logger.info("systemctl %s %s", action, self.tui_cfg.clash_srv_name)
        return output or f"{action.capitalize()} {self.tui_cfg.clash_srv_name}: done"

    def restart_clash(self) -> str:
        return self._systemctl("restart")

    def stop_clash(self) -> str:
        return self._systemctl("stop")

    def open_dir(self, path: Path) -> None:
        """Open a directory in the platform file browser.

        Raises OSError if the directory is missing or no browser starts.
        """
        if not Path(path).is_dir():
            raise NotADirectoryError(f"Not a directory: {path}")
        spawn(file_browser_cmd(Path(path)))

    def fetch_recent_logs(self, num_lines: int) -> list[str]:
        """Return the last `num_lines` lines of the clashtui log."""
        log_path = self.clashtui_dir / LOG_FILE_NAME
        try:
            with open(log_path, errors="replace") as f:
                return [line.rstrip("\n") for line in deque(f, maxlen=num_lines)]
        except OSError as e:
            return [f"Failed to read {log_path}: {e}"]

    # ------------------------------------------------------------------
    # Controller
    # ------------------------------------------------------------------

    def clash_version(self) -> str:
        try:
            return self.clash_api.version()
        except (ClashError, TimeoutError) as e:
            logger.warning("Fetching clash version: %s", e)
            return "Unknown"

    def fetch_remote(self) -> dict[str, Any]:
        """Running config from the controller; raises ClashError/TimeoutError."""
        return self.clash_api.config_get()

    def set_mode(self, mode: str) -> None:
        self.clash_api.config_patch({"mode": mode})


def _is_fresh(path: Path, interval: int) -> bool:
    """True if `path` exists and was written less than `interval` seconds ago."""
    try:
        age = time.time() - path.stat().st_mtime
    except OSError:
        return False
    return age < interval
