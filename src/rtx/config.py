"""
Configuration Loading
=====================

Build the configuration snapshot rtx commands operate on.

Sources, lowest to highest precedence:

1. Global YAML config (``~/.config/rtx/config.yaml`` or ``RTX_CONFIG_FILE``)
2. ``~/.tool-versions``
3. ``.tool-versions`` files from the filesystem root down to the current directory

Plugins are discovered from the data directory (installed ones) and from every
plugin the config files mention.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from rtx import env as rtx_env
from rtx.errors import ConfigParseError, ConfigValidationError
from rtx.logging import LogLevel, parse_log_level

logger = logging.getLogger(__name__)


KNOWN_CONFIG_KEYS = {"tools", "plugins", "settings"}

KNOWN_SETTINGS_KEYS = {"log_level", "hide_update_warning", "version_check_timeout"}

DEFAULT_VERSION_CHECK_TIMEOUT = 3.0


@dataclass(frozen=True)
class PluginStatus:
    """What rtx knows about a single plugin."""

    name: str
    is_installed: bool
    repo_url: Optional[str] = None


@dataclass
class Settings:
    """Runtime settings resolved from the environment and config file."""

    data_dir: Path = field(default_factory=lambda: rtx_env.data_dir(os.environ))
    cache_dir: Path = field(default_factory=lambda: rtx_env.cache_dir(os.environ))
    log_level: LogLevel = LogLevel.INFO
    hide_update_warning: bool = False
    version_check_timeout: float = DEFAULT_VERSION_CHECK_TIMEOUT

    @property
    def plugins_dir(self) -> Path:
        return self.data_dir / "plugins"


@dataclass
class Config:
    """Resolved rtx state for one invocation."""

    plugins: dict[str, PluginStatus] = field(default_factory=dict)
    is_activated: bool = False
    config_files: list[Path] = field(default_factory=list)
    tools: dict[str, list[str]] = field(default_factory=dict)
    settings: Settings = field(default_factory=Settings)

    def __str__(self) -> str:
        return format_config(self)


# =============================================================================
# File Parsing
# =============================================================================


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Dictionary of configuration values.

    Raises:
        ConfigParseError: If the YAML file has syntax errors.
        ConfigValidationError: If the top level is not a mapping.
    """
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        line_number = None
        error_msg = str(e)

        # yaml.YAMLError subclasses have mark attribute with line info
        if hasattr(e, "problem_mark") and e.problem_mark is not None:
            line_number = e.problem_mark.line + 1
            error_msg = e.problem if hasattr(e, "problem") and e.problem else str(e)
        elif hasattr(e, "context_mark") and e.context_mark is not None:
            line_number = e.context_mark.line + 1

        raise ConfigParseError(
            config_path=str(config_path),
            original_error=error_msg,
            line_number=line_number,
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(config_path=str(config_path), original_error=str(e)) from e

    if not isinstance(data, dict):
        raise ConfigValidationError(
            str(config_path), "config", "top level must be a mapping"
        )
    return data


def parse_tool_versions(path: Path) -> dict[str, list[str]]:
    """Parse a ``.tool-versions`` file.

    Each line is ``<plugin> <version> [<version>...]``; ``#`` starts a comment.
    Lines naming a plugin without any version are skipped.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(config_path=str(path), original_error=str(e)) from e

    tools: dict[str, list[str]] = {}
    for line in content.splitlines():
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        plugin, *versions = line.split()
        if not versions:
            logger.debug(f"{path}: no version given for {plugin}, skipping")
            continue
        tools[plugin] = versions
    return tools


def _parse_tools(data: Any, config_path: Path) -> dict[str, list[str]]:
    if not isinstance(data, dict):
        raise ConfigValidationError(str(config_path), "tools", "must be a mapping of plugin to version(s)")

    tools: dict[str, list[str]] = {}
    for plugin, versions in data.items():
        if isinstance(versions, (str, int, float)):
            tools[str(plugin)] = [str(versions)]
        elif isinstance(versions, list) and all(isinstance(v, (str, int, float)) for v in versions):
            tools[str(plugin)] = [str(v) for v in versions]
        else:
            raise ConfigValidationError(
                str(config_path), "tools", f"versions for {plugin} must be a string or list of strings"
            )
    return tools


def _parse_plugins(data: Any, config_path: Path) -> dict[str, str]:
    if not isinstance(data, dict) or not all(isinstance(url, str) for url in data.values()):
        raise ConfigValidationError(str(config_path), "plugins", "must be a mapping of plugin name to repository url")
    return {str(name): url for name, url in data.items()}


def _parse_bool(value: Any, key: str, config_path: Path) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in rtx_env.TRUTHY_VALUES | rtx_env.FALSY_VALUES:
        return rtx_env.is_truthy(value)
    raise ConfigValidationError(str(config_path), "settings", f"{key} must be true or false")


def _apply_settings(settings: Settings, data: Any, config_path: Path) -> None:
    if not isinstance(data, dict):
        raise ConfigValidationError(str(config_path), "settings", "must be a mapping")

    unknown = set(data.keys()) - KNOWN_SETTINGS_KEYS
    if unknown:
        logger.warning(f"{config_path}: unknown settings: {', '.join(sorted(unknown))}")

    if "log_level" in data:
        settings.log_level = parse_log_level(str(data["log_level"]), settings.log_level)
    if "hide_update_warning" in data:
        settings.hide_update_warning = _parse_bool(
            data["hide_update_warning"], "hide_update_warning", config_path
        )
    if "version_check_timeout" in data:
        try:
            settings.version_check_timeout = float(data["version_check_timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(
                str(config_path), "settings", "version_check_timeout must be a number of seconds"
            ) from e


# =============================================================================
# Discovery
# =============================================================================


def find_tool_versions_files(start_dir: Path, environ: Mapping[str, str]) -> list[Path]:
    """Return existing ``.tool-versions`` files, lowest precedence first.

    The home directory file comes first, then every ancestor of ``start_dir``
    from the root down to ``start_dir`` itself.
    """
    filename = rtx_env.tool_versions_filename(environ)
    candidates = [rtx_env.home_tool_versions(environ)]
    candidates.extend(d / filename for d in reversed([start_dir, *start_dir.parents]))

    found: list[Path] = []
    for path in candidates:
        if path.is_file() and path not in found:
            found.append(path)
    return found


def discover_installed_plugins(plugins_dir: Path) -> list[str]:
    """Names of installed plugins, sorted."""
    if not plugins_dir.is_dir():
        return []
    return sorted(p.name for p in plugins_dir.iterdir() if p.is_dir() and not p.name.startswith("."))


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> Config:
    """
    Load the configuration snapshot.

    Args:
        environ: Environment mapping (default: ``os.environ``)
        cwd: Directory to search for ``.tool-versions`` (default: current directory)

    Returns:
        Config with plugins in discovery order

    Raises:
        ConfigParseError: A config file could not be read or parsed
        ConfigValidationError: A known key has the wrong shape
    """
    environ = os.environ if environ is None else environ
    cwd = Path.cwd() if cwd is None else cwd

    settings = Settings(
        data_dir=rtx_env.data_dir(environ),
        cache_dir=rtx_env.cache_dir(environ),
    )
    config_files: list[Path] = []
    tools: dict[str, list[str]] = {}
    plugin_urls: dict[str, str] = {}

    global_config = rtx_env.config_file(environ)
    if global_config.is_file():
        file_config = load_config_file(global_config)
        config_files.append(global_config)

        unknown_keys = set(file_config.keys()) - KNOWN_CONFIG_KEYS
        if unknown_keys:
            logger.warning(
                f"{global_config}: unknown configuration keys: {', '.join(sorted(unknown_keys))}"
            )

        if "settings" in file_config:
            _apply_settings(settings, file_config["settings"], global_config)
        if "plugins" in file_config:
            plugin_urls.update(_parse_plugins(file_config["plugins"], global_config))
        if "tools" in file_config:
            tools.update(_parse_tools(file_config["tools"], global_config))

    for path in find_tool_versions_files(cwd, environ):
        config_files.append(path)
        tools.update(parse_tool_versions(path))

    # Environment overrides file settings
    if rtx_env.log_level(environ):
        settings.log_level = parse_log_level(rtx_env.log_level(environ), settings.log_level)
    if rtx_env.hide_update_warning(environ):
        settings.hide_update_warning = True

    names = discover_installed_plugins(settings.plugins_dir)
    for name in [*plugin_urls, *tools]:
        if name not in names:
            names.append(name)

    plugins = {
        name: PluginStatus(
            name=name,
            is_installed=(settings.plugins_dir / name).is_dir(),
            repo_url=plugin_urls.get(name),
        )
        for name in names
    }

    return Config(
        plugins=plugins,
        is_activated=rtx_env.is_activated(environ),
        config_files=config_files,
        tools=tools,
        settings=settings,
    )


# =============================================================================
# Output Formatting
# =============================================================================


def format_config(config: Config) -> str:
    """Render the configuration summary shown by ``rtx doctor``."""
    files = ", ".join(str(p) for p in config.config_files) or "(none)"
    toolset = ", ".join(
        f"{plugin}@{version}"
        for plugin, versions in config.tools.items()
        for version in versions
    ) or "(none)"

    lines = ["Config:", f"  Files: {files}", "  Installed Plugins:"]
    lines.extend(f"    {p.name}" for p in config.plugins.values() if p.is_installed)
    lines.append(f"  Toolset: {toolset}")
    return "\n".join(lines)
