"""Unit tests for buildhooks exception classes"""

import pytest
from buildhooks.exceptions import (
    BuildHooksError,
    ConfigurationError,
    HostServiceUnavailableError,
    InterpreterNotFoundError,
    UnknownInterpreterError
)


class TestBuildHooksError:
    """Test base BuildHooksError exception class"""

    def test_basic_error_message(self):
        """Test error with message only"""
        error = BuildHooksError("Something went wrong")

        assert error.message == "Something went wrong"
        assert error.help_text is None
        assert str(error) == "Something went wrong"

    def test_error_with_help_text(self):
        """Test error with message and help text"""
        error = BuildHooksError(
            "Something went wrong",
            help_text="Check buildhooks.yaml"
        )

        assert error.help_text == "Check buildhooks.yaml"
        assert "Help: Check buildhooks.yaml" in str(error)

    def test_error_is_exception(self):
        """Test that BuildHooksError is a proper Exception"""
        assert isinstance(BuildHooksError("test"), Exception)


class TestHostServiceUnavailableError:
    """Test HostServiceUnavailableError exception class"""

    def test_service_id_in_message(self):
        error = HostServiceUnavailableError("solution")

        assert error.service_id == "solution"
        assert "'solution'" in error.message
        assert "disabled" in error.help_text

    def test_is_buildhooks_error(self):
        assert isinstance(HostServiceUnavailableError("x"), BuildHooksError)


class TestConfigurationError:
    """Test ConfigurationError exception class"""

    def test_with_config_path(self):
        error = ConfigurationError("bad value", config_path="/repo/buildhooks.yaml")

        assert "bad value" in error.message
        assert "/repo/buildhooks.yaml" in error.help_text
        assert error.errors == []

    def test_without_config_path(self):
        error = ConfigurationError("bad value")

        assert "command-line" in error.help_text

    def test_lists_validation_errors(self):
        error = ConfigurationError(
            "settings failed validation",
            errors=["max_wait_seconds: must be greater than 0", "interpreter: unknown"]
        )

        assert "max_wait_seconds" in error.help_text
        assert "interpreter: unknown" in error.help_text


class TestInterpreterErrors:
    """Test interpreter-related exception classes"""

    def test_unknown_interpreter_lists_known(self):
        error = UnknownInterpreterError("ruby", known=["sh", "python"])

        assert "'ruby'" in error.message
        assert "python, sh" in error.help_text

    def test_unknown_interpreter_without_known(self):
        error = UnknownInterpreterError("ruby")

        assert error.help_text is None
        assert str(error) == "Unknown script interpreter 'ruby'"

    def test_interpreter_not_found_default_hint(self):
        error = InterpreterNotFoundError("pwsh")

        assert error.tool_name == "pwsh"
        assert "--interpreter" in error.help_text
        assert "installing-powershell" in error.help_text

    def test_interpreter_not_found_custom_instructions(self):
        error = InterpreterNotFoundError("custom", install_instructions="Download from https://example.com")

        assert "Download from https://example.com" in error.help_text

    def test_interpreter_errors_are_buildhooks_errors(self):
        assert isinstance(UnknownInterpreterError("x"), BuildHooksError)
        assert isinstance(InterpreterNotFoundError("x"), BuildHooksError)

    def test_can_be_raised_and_caught_as_base(self):
        with pytest.raises(BuildHooksError):
            raise InterpreterNotFoundError("pwsh")
