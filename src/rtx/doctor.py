"""
Doctor Command Module
=====================

Health check logic for the rtx doctor command.
Inspects the loaded configuration and environment, reports every problem it
finds, and tells the caller whether the run failed. Nothing is fixed.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import click

from rtx import __version__
from rtx.config import Config, PluginStatus, format_config
from rtx.env import ENV_PREFIX
from rtx.logging import DoctorLogger

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

ACTIVATION_HINT = "rtx is not activated, run `rtx help activate` for setup instructions"

ENV_VARS_HEADER = "rtx environment variables:"

NO_PROBLEMS_MESSAGE = "No problems found"


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class Problem:
    """A problem detected by a check."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class DoctorReport:
    """Outcome of a doctor run."""

    problems: list[Problem]

    @property
    def problem_count(self) -> int:
        return len(self.problems)

    @property
    def is_healthy(self) -> bool:
        """True if no problems were found."""
        return not self.problems

    @property
    def summary(self) -> str:
        if self.is_healthy:
            return NO_PROBLEMS_MESSAGE
        return f"{self.problem_count} problems found"


PluginCheck = Callable[[PluginStatus], Optional[Problem]]
ConfigCheck = Callable[[Config], Optional[Problem]]


# =============================================================================
# Individual Check Functions
# =============================================================================


def check_plugin_installed(plugin: PluginStatus) -> Optional[Problem]:
    """Flag plugins that are referenced but not installed."""
    if not plugin.is_installed:
        return Problem(f"plugin {plugin.name} is not installed")
    return None


def check_activated(config: Config) -> Optional[Problem]:
    """Flag a shell without the rtx hook."""
    if not config.is_activated:
        return Problem(ACTIVATION_HINT)
    return None


# Evaluated in order. Per-plugin checks stop at the first problem for a plugin.
PLUGIN_CHECKS: tuple[PluginCheck, ...] = (
    check_plugin_installed,
)

CONFIG_CHECKS: tuple[ConfigCheck, ...] = (
    check_activated,
)


# =============================================================================
# Check Runner
# =============================================================================


def evaluate(
    config: Config,
    plugin_checks: Iterable[PluginCheck] = PLUGIN_CHECKS,
    config_checks: Iterable[ConfigCheck] = CONFIG_CHECKS,
) -> list[Problem]:
    """Run every check against ``config`` and return the problems in order.

    Plugin checks run first, for each plugin in discovery order; a plugin
    contributes at most one problem. Config-wide checks follow. Detected
    problems are returned, never raised.
    """
    plugin_checks = tuple(plugin_checks)
    problems: list[Problem] = []

    for plugin in config.plugins.values():
        for check in plugin_checks:
            problem = check(plugin)
            if problem is not None:
                problems.append(problem)
                break

    for check in config_checks:
        problem = check(config)
        if problem is not None:
            problems.append(problem)

    return problems


# =============================================================================
# Output Formatting Functions
# =============================================================================


def render_env_vars(
    prefix: str,
    env_vars: Iterable[tuple[str, str]],
    use_color: bool = False,
) -> str:
    """Render environment variables whose name starts with ``prefix``.

    Entries keep their input order and are neither escaped nor truncated.
    Every line, header included, ends with a newline.
    """
    header = click.style(ENV_VARS_HEADER, bold=True) if use_color else ENV_VARS_HEADER
    lines = [f"{header}\n"]
    lines.extend(f"{key}={value}\n" for key, value in env_vars if key.startswith(prefix))
    return "".join(lines)


# =============================================================================
# Main Orchestration
# =============================================================================


def _newer_version(version_check: Callable[[], Optional[str]]) -> Optional[str]:
    try:
        return version_check()
    except Exception as e:
        logger.debug(f"Version check failed: {e}")
        return None


def run_doctor(
    config: Config,
    env_vars: Iterable[tuple[str, str]],
    doctor_logger: DoctorLogger,
    out: Callable[[str], None] = click.echo,
    version_check: Optional[Callable[[], Optional[str]]] = None,
    use_color: bool = False,
) -> DoctorReport:
    """Run all checks, print the diagnostic summary, and return a DoctorReport.

    All output is produced before the report is returned; an unhealthy report
    never cuts the output short.

    Args:
        config: Configuration snapshot to inspect
        env_vars: Environment as ordered (key, value) pairs, read once upstream
        doctor_logger: Receives the version notice (warn) and every problem (error)
        out: Writes a line to the primary output stream
        version_check: Returns a newer version string, or None. Failures are
            ignored.
        use_color: Bold the environment block header

    Returns:
        DoctorReport with every problem found
    """
    problems = evaluate(config)

    if version_check is not None:
        latest = _newer_version(version_check)
        if latest:
            doctor_logger.warn(f"new rtx version {latest} available, currently on {__version__}")

    out(f"{format_config(config)}\n")
    out(f"{render_env_vars(ENV_PREFIX, env_vars, use_color=use_color)}\n")

    for problem in problems:
        doctor_logger.error(problem.message)

    report = DoctorReport(problems=problems)
    if report.is_healthy:
        out(NO_PROBLEMS_MESSAGE)
    return report
