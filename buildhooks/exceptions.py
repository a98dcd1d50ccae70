"""buildhooks Exception Classes

Base exception hierarchy for the build hook runner.
All custom exceptions include help_text for actionable user guidance.
"""

from typing import List, Optional


class BuildHooksError(Exception):
    """Base exception for all buildhooks errors

    All buildhooks exceptions should inherit from this class to enable
    consistent error handling and user-friendly error messages.

    Attributes:
        message: Human-readable error description
        help_text: Optional actionable guidance for resolving the error
    """

    def __init__(self, message: str, help_text: str = None):
        """Initialize error with message and optional help text

        Args:
            message: Error description
            help_text: Optional remediation guidance
        """
        self.message = message
        self.help_text = help_text
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with help text if available"""
        if self.help_text:
            return f"{self.message}\n\nHelp: {self.help_text}"
        return self.message


class HostServiceUnavailableError(BuildHooksError):
    """Raised when the build host cannot provide a required service

    This is the only condition that disables the hooks for a whole session:
    without the service no subscription is made and no script ever runs.
    """

    def __init__(self, service_id: str):
        """Initialize host service error

        Args:
            service_id: Identifier of the service that could not be obtained
        """
        message = f"Build host could not provide service '{service_id}'"
        help_text = "Build hooks are disabled for this session"

        super().__init__(message, help_text)
        self.service_id = service_id


class ConfigurationError(BuildHooksError):
    """Raised when buildhooks.yaml or command-line overrides are invalid"""

    def __init__(
        self,
        reason: str,
        config_path: Optional[str] = None,
        errors: Optional[List[str]] = None
    ):
        """Initialize configuration error

        Args:
            reason: Description of the problem
            config_path: Path to the offending configuration file
            errors: Individual validation failures
        """
        message = f"Invalid hook configuration: {reason}"

        if config_path:
            help_text = f"Fix or remove {config_path}"
        else:
            help_text = "Check the command-line options"

        if errors:
            help_text += "\n\n" + "\n".join(f"  - {error}" for error in errors)

        super().__init__(message, help_text)
        self.reason = reason
        self.config_path = config_path
        self.errors = errors or []


class UnknownInterpreterError(BuildHooksError):
    """Raised when an interpreter profile name is not defined"""

    def __init__(self, name: str, known: Optional[List[str]] = None):
        message = f"Unknown script interpreter '{name}'"
        help_text = None

        if known:
            help_text = "Known interpreters: " + ", ".join(sorted(known))

        super().__init__(message, help_text)
        self.name = name
        self.known = known or []


class InterpreterNotFoundError(BuildHooksError):
    """Raised when the interpreter executable is missing from PATH

    Only the command-line pre-flight checks raise this. Inside a build
    session a missing interpreter is reported as a failed script run.
    """

    def __init__(self, tool_name: str, install_instructions: Optional[str] = None):
        """Initialize interpreter error

        Args:
            tool_name: Name of the missing executable
            install_instructions: Optional installation guidance
        """
        message = f"Script interpreter '{tool_name}' not found in PATH"
        help_text = f"Install '{tool_name}' or select another interpreter with --interpreter"

        if install_instructions:
            help_text += f"\n\n{install_instructions}"
        else:
            install_hints = {
                "pwsh": "Install from: https://learn.microsoft.com/powershell/scripting/install/installing-powershell",
                "sh": "A POSIX shell is required at /bin/sh",
            }

            if tool_name in install_hints:
                help_text += f"\n\n{install_hints[tool_name]}"

        super().__init__(message, help_text)
        self.tool_name = tool_name
