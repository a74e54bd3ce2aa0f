"""
Environment Access
==================

Read rtx settings and directories from the process environment.

The environment is read once per invocation with ``snapshot_env()`` and passed
around as data, so everything downstream can be tested with a plain dict.
"""

import os
from pathlib import Path
from typing import Mapping, Optional


ENV_PREFIX = "RTX_"

# Set by the shell hook installed via `rtx activate`
ACTIVATION_MARKER = "__RTX_DIFF"

DEFAULT_TOOL_VERSIONS_FILENAME = ".tool-versions"

TRUTHY_VALUES = {"1", "true", "yes", "on"}

FALSY_VALUES = {"0", "false", "no", "off", ""}


def snapshot_env() -> list[tuple[str, str]]:
    """Return the process environment as ordered (key, value) pairs."""
    return list(os.environ.items())


def _home(env: Mapping[str, str]) -> Path:
    home = env.get("HOME")
    return Path(home) if home else Path.home()


def data_dir(env: Mapping[str, str]) -> Path:
    """Directory holding installed plugins and runtimes."""
    if env.get("RTX_DATA_DIR"):
        return Path(env["RTX_DATA_DIR"])
    if env.get("XDG_DATA_HOME"):
        return Path(env["XDG_DATA_HOME"]) / "rtx"
    return _home(env) / ".local" / "share" / "rtx"


def cache_dir(env: Mapping[str, str]) -> Path:
    if env.get("RTX_CACHE_DIR"):
        return Path(env["RTX_CACHE_DIR"])
    if env.get("XDG_CACHE_HOME"):
        return Path(env["XDG_CACHE_HOME"]) / "rtx"
    return _home(env) / ".cache" / "rtx"


def config_file(env: Mapping[str, str]) -> Path:
    """Global YAML config file location."""
    if env.get("RTX_CONFIG_FILE"):
        return Path(env["RTX_CONFIG_FILE"])
    if env.get("XDG_CONFIG_HOME"):
        return Path(env["XDG_CONFIG_HOME"]) / "rtx" / "config.yaml"
    return _home(env) / ".config" / "rtx" / "config.yaml"


def home_tool_versions(env: Mapping[str, str]) -> Path:
    return _home(env) / tool_versions_filename(env)


def tool_versions_filename(env: Mapping[str, str]) -> str:
    return env.get("RTX_DEFAULT_TOOL_VERSIONS_FILENAME") or DEFAULT_TOOL_VERSIONS_FILENAME


def log_level(env: Mapping[str, str]) -> Optional[str]:
    return env.get("RTX_LOG_LEVEL")


def is_truthy(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in TRUTHY_VALUES


def hide_update_warning(env: Mapping[str, str]) -> bool:
    return is_truthy(env.get("RTX_HIDE_UPDATE_WARNING"))


def is_activated(env: Mapping[str, str]) -> bool:
    """True if the rtx shell hook is active in this environment."""
    return ACTIVATION_MARKER in env
