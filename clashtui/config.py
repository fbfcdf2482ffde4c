"""Configuration loading and paths for clashtui."""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError


CONFIG_FILE_NAME = "config.yaml"
PROFILES_DIR_NAME = "profiles"
PROFILE_CACHE_DIR_NAME = "cache"

# Fallback when the clash config has no external-controller entry
DEFAULT_CONTROLLER = "127.0.0.1:9090"


@dataclass
class TuiConfig:
    """Settings persisted in ``config.yaml`` inside the clashtui dir."""

    clash_cfg_dir: str = ""
    clash_cfg_path: str = ""
    clash_core_path: str = ""
    clash_srv_name: str = "clash"
    is_user: bool = False
    timeout: int | None = None
    current_profile: str = ""

    @classmethod
    def from_file(cls, path: str | Path) -> "TuiConfig":
        """Load a config file.

        Unknown keys are ignored so older clashtui versions can read newer
        files. Raises ConfigError if the file is missing, is not a mapping,
        or holds a value of the wrong type.
        """
        path = Path(path)
        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigError(f"Config not found at {path}")
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read {path}: {e}")

        if not isinstance(raw, dict):
            raise ConfigError(f"{path} must contain a mapping, got {type(raw).__name__}")

        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in raw or raw[f.name] is None:
                continue
            value = raw[f.name]
            if f.name == "is_user":
                if not isinstance(value, bool):
                    raise ConfigError(f"{f.name} must be true or false")
            elif f.name == "timeout":
                if not isinstance(value, int) or isinstance(value, bool):
                    raise ConfigError(f"{f.name} must be an integer")
            else:
                value = str(value)
            values[f.name] = value
        return cls(**values)

    def to_file(self, path: str | Path) -> None:
        """Write the config as YAML. OSError propagates to the caller."""
        with open(path, "w") as f:
            yaml.safe_dump(asdict(self), f, sort_keys=False)

    def check(self) -> list[str]:
        """Return a human-readable problem for each unusable setting."""
        problems = []
        if not self.clash_cfg_dir or not Path(self.clash_cfg_dir).is_dir():
            problems.append(f"clash_cfg_dir is not a directory: '{self.clash_cfg_dir}'")
        if not self.clash_cfg_path:
            problems.append("clash_cfg_path is not set")
        if not self.clash_core_path or not Path(self.clash_core_path).is_file():
            problems.append(f"clash_core_path is not a file: '{self.clash_core_path}'")
        return problems


def get_config_dir() -> Path:
    """Get the clashtui config directory.

    Resolved in this order:
    1. CLASHTUI_CONFIG_DIR env var (used by tests)
    2. $XDG_CONFIG_HOME/clashtui
    3. ~/.config/clashtui
    """
    env_override = os.environ.get("CLASHTUI_CONFIG_DIR")
    if env_override:
        return Path(env_override)
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "clashtui"
    return Path.home() / ".config" / "clashtui"


def get_config_path(config_dir: Path) -> Path:
    """Get path to config.yaml in the clashtui dir."""
    return config_dir / CONFIG_FILE_NAME


def init_config_dir(config_dir: Path) -> None:
    """Create the clashtui directory tree and a default config.yaml.

    An existing config.yaml is left untouched.
    """
    (config_dir / PROFILES_DIR_NAME / PROFILE_CACHE_DIR_NAME).mkdir(parents=True, exist_ok=True)
    config_path = get_config_path(config_dir)
    if not config_path.exists():
        TuiConfig().to_file(config_path)


def load_clash_config(path: str | Path) -> dict[str, Any]:
    """Load the clash core config (the file the service runs with)."""
    try:
        with open(path) as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read clash config {path}: {e}")
    if not isinstance(config, dict):
        raise ConfigError(f"Clash config {path} must contain a mapping")
    return config


def get_controller(clash_config: dict[str, Any]) -> tuple[str, str | None]:
    """Return (external-controller address, secret) from a clash config."""
    controller = clash_config.get("external-controller") or DEFAULT_CONTROLLER
    controller = str(controller)
    # ":9090" means "all interfaces" to the core; talk to loopback
    if controller.startswith(":"):
        controller = f"127.0.0.1{controller}"
    secret = clash_config.get("secret") or None
    return controller, secret
