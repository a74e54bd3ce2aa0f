"""
rtx CLI
=======

Command-line interface for rtx.
"""

import os
import sys

import click

from rtx import __version__
from rtx.config import load_config
from rtx.doctor import run_doctor
from rtx.env import snapshot_env
from rtx.errors import ConfigParseError, ConfigValidationError, print_error, problems_found_error
from rtx.logging import StdLogger, configure_logging, parse_log_level
from rtx.version import check_for_new_version


DOCTOR_EXAMPLES = """\
\b
Examples:
  $ rtx doctor
  [WARN] plugin nodejs is not installed
"""


@click.group()
@click.version_option(version=__version__)
def main():
    """
    rtx - Polyglot runtime version manager.

    \b
    Examples:
      rtx doctor
      rtx --version
    """
    configure_logging(parse_log_level(os.environ.get("RTX_LOG_LEVEL")))


@main.command(epilog=DOCTOR_EXAMPLES)
def doctor():
    """Check rtx installation for possible problems."""
    env_vars = snapshot_env()
    environ = dict(env_vars)
    use_color = environ.get("NO_COLOR") is None

    try:
        config = load_config(environ)
    except (ConfigParseError, ConfigValidationError) as e:
        print_error(e.get_actionable_error())
        sys.exit(1)

    configure_logging(config.settings.log_level, use_color=use_color)
    settings = config.settings

    report = run_doctor(
        config,
        env_vars,
        StdLogger(),
        version_check=lambda: check_for_new_version(
            cache_dir=settings.cache_dir,
            timeout=settings.version_check_timeout,
            hide_update_warning=settings.hide_update_warning,
        ),
        use_color=use_color,
    )

    if not report.is_healthy:
        print_error(problems_found_error(report.summary))
        sys.exit(1)


if __name__ == "__main__":
    main()
