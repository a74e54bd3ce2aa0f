"""
Tests for ActionableError Module
================================

Tests for the actionable error formatting system.
"""

import os
from unittest.mock import patch

from rtx.doctor import DoctorReport, Problem
from rtx.errors import (
    ActionableError,
    ConfigParseError,
    ConfigValidationError,
    print_error,
    problems_found_error,
)


class TestActionableError:
    """Tests for ActionableError class."""

    def test_error_with_all_fields(self):
        error = ActionableError(
            message="Failed to parse config.yaml",
            context="mapping values are not allowed here",
            example="tools:\n    nodejs: 20",
            help_command="rtx --help",
        )

        output = error.format(use_color=False)

        assert "Error: Failed to parse config.yaml" in output
        assert "mapping values are not allowed here" in output
        assert "Example: tools:" in output
        assert "Help: Run 'rtx --help'" in output

    def test_error_with_message_only(self):
        error = ActionableError(message="2 problems found")

        assert error.format(use_color=False) == "Error: 2 problems found"

    def test_str_method(self):
        error = ActionableError(message="Test error", context="Test context")

        assert str(error) == error.format(use_color=False)

    def test_color_output_with_no_color_env(self):
        error = ActionableError(message="Test error")

        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            output = error.format(use_color=True)

        assert "\033[" not in output


class TestPrintError:
    def test_prints_to_stderr(self, capsys):
        print_error(ActionableError(message="Something broke"))

        captured = capsys.readouterr()
        assert "Something broke" in captured.err
        assert captured.out == ""


class TestConfigErrors:
    def test_parse_error_message(self):
        error = ConfigParseError("/etc/rtx.yaml", "unexpected end of stream", line_number=3)

        assert str(error) == "Failed to parse /etc/rtx.yaml at line 3: unexpected end of stream"

    def test_parse_error_actionable(self):
        actionable = ConfigParseError("/etc/rtx.yaml", "bad indent", 7).get_actionable_error()

        assert actionable.message == "Failed to parse /etc/rtx.yaml at line 7"
        assert actionable.context == "bad indent"
        assert actionable.help_command == "rtx --help"

    def test_validation_error_field_example(self):
        actionable = ConfigValidationError(
            "/etc/rtx.yaml", "tools", "must be a mapping"
        ).get_actionable_error()

        assert actionable.message == "Invalid tools in /etc/rtx.yaml"
        assert actionable.context == "must be a mapping"
        assert "nodejs" in actionable.example

    def test_validation_error_default_example(self):
        actionable = ConfigValidationError("/etc/rtx.yaml", "config", "bad").get_actionable_error()

        assert actionable.example == ConfigValidationError.DEFAULT_EXAMPLE


class TestProblemsFoundError:
    def test_message(self):
        assert str(problems_found_error("3 problems found")) == "Error: 3 problems found"

    def test_uses_report_summary(self):
        report = DoctorReport(problems=[Problem("a"), Problem("b")])

        assert problems_found_error(report.summary).message == "2 problems found"
