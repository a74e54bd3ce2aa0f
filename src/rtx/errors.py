"""
rtx Errors Module
=================

Provides consistent, actionable error formatting for CLI output.

Error Format Pattern
--------------------
All errors follow a consistent 4-section format (with optional sections):

    Error: [what went wrong]

    Context: [why it matters / additional context]

    Example: [correct usage example]

    Help: [link to docs or help command]

Only non-empty sections are displayed. This keeps simple errors concise
while allowing complex errors to include full guidance.

Usage Example
-------------
    from rtx.errors import ActionableError, print_error

    error = ActionableError(
        message="2 problems found",
        help_command="rtx help activate",
    )
    print_error(error)

When to Use ActionableError
---------------------------
Use ActionableError for:
    - User-facing errors at CLI entry points
    - Fatal errors that terminate the program (config parse failures,
      unhealthy doctor reports)

Do NOT use ActionableError for:
    - Individual doctor problems (those go through the logger)
    - Internal errors that require stack traces for debugging
"""

import os
from dataclasses import dataclass
from typing import Optional

import click


class ConfigParseError(Exception):
    """Exception raised when config file parsing fails.

    Attributes:
        config_path: Path to the config file that failed to parse
        original_error: The original parse error message
        line_number: Line number where the error occurred (if available)
    """

    def __init__(
        self,
        config_path: str,
        original_error: str,
        line_number: Optional[int] = None,
    ):
        self.config_path = config_path
        self.original_error = original_error
        self.line_number = line_number
        location = f" at line {line_number}" if line_number else ""
        super().__init__(f"Failed to parse {config_path}{location}: {original_error}")

    def get_actionable_error(self) -> "ActionableError":
        """Get an ActionableError for display."""
        location = f" at line {self.line_number}" if self.line_number else ""
        return ActionableError(
            message=f"Failed to parse {self.config_path}{location}",
            context=self.original_error,
            example="config files must be UTF-8; `.tool-versions` lines read `<plugin> <version>`",
            help_command="rtx --help",
        )


class ConfigValidationError(Exception):
    """Exception raised when a known config key has the wrong shape.

    Attributes:
        config_path: Path to the config file with invalid values
        field: The field that failed validation
        message: Description of the validation failure
    """

    FIELD_EXAMPLES = {
        "tools": "tools:\n    nodejs: \"20.0.0\"\n    python: [\"3.11.4\", \"3.10.12\"]",
        "plugins": "plugins:\n    nodejs: https://github.com/asdf-vm/asdf-nodejs.git",
        "settings": "settings:\n    log_level: info\n    hide_update_warning: false",
    }

    DEFAULT_EXAMPLE = "Check the field value in your rtx config.yaml"

    def __init__(
        self,
        config_path: str,
        field: str,
        message: str,
    ):
        self.config_path = config_path
        self.field = field
        self.message = message
        super().__init__(f"Invalid {field} in {config_path}: {message}")

    def get_actionable_error(self) -> "ActionableError":
        """Get an ActionableError for display."""
        example = self.FIELD_EXAMPLES.get(self.field, self.DEFAULT_EXAMPLE)

        return ActionableError(
            message=f"Invalid {self.field} in {self.config_path}",
            context=self.message,
            example=example,
            help_command="rtx --help",
        )


@dataclass
class ActionableError:
    """Structured error with actionable guidance.

    Attributes:
        message: What went wrong (required)
        context: Why it matters or additional context (optional)
        example: Correct usage example (optional)
        help_command: Help command to run for more info (optional)
    """
    message: str
    context: Optional[str] = None
    example: Optional[str] = None
    help_command: Optional[str] = None

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to use click.style for coloring.
                       Respects NO_COLOR environment variable.

        Returns:
            Formatted error string ready for display.
        """
        if os.environ.get("NO_COLOR"):
            use_color = False

        def label(text: str, **styles) -> str:
            return click.style(text, **styles) if use_color else text

        lines = [f"{label('Error:', fg='red', bold=True)} {self.message}"]
        if self.context:
            lines += ["", f"  {self.context}"]
        if self.example:
            lines += ["", f"  {label('Example:', bold=True)} {self.example}"]
        if self.help_command:
            lines += ["", f"  {label('Help:', bold=True)} Run '{self.help_command}' for more options"]
        return "\n".join(lines)

    def __str__(self) -> str:
        """Return formatted error without colors for logging/testing."""
        return self.format(use_color=False)


def print_error(error: ActionableError) -> None:
    """Print an ActionableError to stderr."""
    click.echo(error.format(), err=True)


def problems_found_error(summary: str) -> ActionableError:
    """Create the terminal error for an unhealthy doctor report from its summary."""
    return ActionableError(message=summary)
