"""
Configuration for Clearance.

Settings come from three places, later ones winning:
    1. Built-in defaults (cache locations derived from the platform)
    2. ``~/.clearance/config.yaml`` (or the file named by CLEARANCE_CONFIG)
    3. Environment variables, optionally seeded from ``.env`` files

Example config.yaml:
    log_level: INFO
    log_file: ~/.clearance/clearance.log
    command_timeout: 600
    paths:
      npm: D:/caches/npm
    commands:
      docker: podman
"""

import logging
import os
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from clearance.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".clearance"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
ENV_FILE = CONFIG_DIR / ".env"

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_COMMANDS = {
    "npm": "npm",
    "yarn": "yarn",
    "docker": "docker",
    "powershell": "powershell",
}
PATH_KEYS = ("npm", "yarn", "winsxs", "wintemp", "winchunks")
_KNOWN_KEYS = {"log_level", "log_file", "paths", "commands", "command_timeout"}


@dataclass(frozen=True)
class CachePaths:
    """Filesystem locations of the directory-backed caches, one per cache kind."""

    npm: Path
    yarn: Path
    winsxs: Path
    wintemp: Path
    winchunks: Path

    def for_kind(self, name: str) -> Path:
        return getattr(self, name)


def is_windows(platform: Optional[str] = None) -> bool:
    return (platform or sys.platform).startswith("win")


def resolve_cache_paths(
    env: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home: Optional[Path] = None,
) -> CachePaths:
    """Derive the default cache locations for ``platform``.

    Args:
        env: Environment mapping, defaults to ``os.environ``.
        platform: ``sys.platform`` style identifier.
        home: Home directory, defaults to ``Path.home()``.
    """
    env = os.environ if env is None else env
    platform = platform or sys.platform
    home = home or Path.home()

    local_app_data = Path(env.get("LOCALAPPDATA") or home / "AppData" / "Local")
    windir = Path(env.get("WINDIR") or env.get("SystemRoot") or "C:\\Windows")
    temp_dir = Path(env.get("TEMP") or env.get("TMP") or tempfile.gettempdir())
    winsxs = windir / "WinSxS" / "Temp"
    winchunks = local_app_data / "Microsoft" / "Windows" / "WER" / "ReportQueue"

    if is_windows(platform):
        npm = local_app_data / "npm-cache"
        yarn = local_app_data / "Yarn" / "Cache" / "v6"
    elif platform == "darwin":
        npm = home / ".npm" / "_cacache"
        yarn = home / "Library" / "Caches" / "Yarn" / "v6"
    else:
        npm = home / ".npm" / "_cacache"
        xdg_cache = Path(env.get("XDG_CACHE_HOME") or home / ".cache")
        yarn = xdg_cache / "yarn" / "v6"

    return CachePaths(npm=npm, yarn=yarn, winsxs=winsxs, wintemp=temp_dir, winchunks=winchunks)


@dataclass
class ClearanceConfig:
    """User-tunable settings. Cache kinds themselves are fixed."""

    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None
    paths: Dict[str, str] = field(default_factory=dict)
    commands: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COMMANDS))
    command_timeout: Optional[float] = None

    def cache_paths(
        self, env: Optional[Mapping[str, str]] = None, platform: Optional[str] = None
    ) -> CachePaths:
        """Default locations with the ``paths`` overrides applied."""
        resolved = resolve_cache_paths(env=env, platform=platform)
        overrides = {
            key: Path(os.path.expanduser(value)) for key, value in self.paths.items() if value
        }
        return CachePaths(**{key: overrides.get(key, resolved.for_kind(key)) for key in PATH_KEYS})

    def command(self, tool: str) -> str:
        return self.commands.get(tool) or DEFAULT_COMMANDS[tool]


def load_env() -> None:
    """Load ``.env`` files without clobbering variables already set."""
    load_dotenv(Path.cwd() / ".env", override=False)
    if ENV_FILE.exists():
        load_dotenv(ENV_FILE, override=False)


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def _mapping_of_strings(data: Dict[str, Any], key: str, allowed) -> Dict[str, str]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    result = {}
    for name, item in value.items():
        if name not in allowed:
            logger.warning("Ignoring unknown %s entry '%s' in config", key, name)
            continue
        result[name] = str(item)
    return result


def load_config(
    path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None
) -> ClearanceConfig:
    """Build the effective configuration.

    Args:
        path: Explicit config file; otherwise CLEARANCE_CONFIG or the default file.
        env: Environment mapping, defaults to ``os.environ``.

    Raises:
        ConfigError: The file exists but is malformed.
    """
    env = os.environ if env is None else env
    if path is None:
        path = Path(env["CLEARANCE_CONFIG"]).expanduser() if env.get("CLEARANCE_CONFIG") else CONFIG_FILE

    config = ClearanceConfig()
    if path.exists():
        data = _read_yaml(path)
        for key in data:
            if key not in _KNOWN_KEYS:
                logger.warning("Ignoring unknown config key '%s' in %s", key, path)

        if data.get("log_level"):
            config.log_level = str(data["log_level"]).upper()
        if data.get("log_file"):
            config.log_file = os.path.expanduser(str(data["log_file"]))
        config.paths = _mapping_of_strings(data, "paths", PATH_KEYS)
        config.commands.update(_mapping_of_strings(data, "commands", DEFAULT_COMMANDS))

        timeout = data.get("command_timeout")
        if timeout is not None:
            try:
                config.command_timeout = float(timeout)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"command_timeout must be a number, got {timeout!r}") from e
            if config.command_timeout <= 0:
                raise ConfigError("command_timeout must be positive")
        logger.debug("Loaded config from %s", path)

    if env.get("CLEARANCE_LOG_LEVEL"):
        config.log_level = env["CLEARANCE_LOG_LEVEL"].upper()
    return config
