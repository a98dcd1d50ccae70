"""Interpreter profiles: file extension, command line and script wrapping"""

import shutil
import sys
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from buildhooks.exceptions import InterpreterNotFoundError, UnknownInterpreterError


class InterpreterProfile(ABC):
    """How one script language is found, wrapped and launched"""

    name: str = ""
    extension: str = ""

    @property
    @abstractmethod
    def argv(self) -> List[str]:
        """Command line prefix; the wrapped script text is appended to it"""

    @abstractmethod
    def wrap(self, raw_text: str) -> str:
        """Frame raw script text for execution

        The wrapped form runs the raw text as an isolated block, turns on
        verbose and debug diagnostics, and merges every diagnostic and error
        stream into standard output.
        """

    @property
    def executable(self) -> str:
        return self.argv[0]

    def command(self, wrapped_text: str) -> List[str]:
        return [*self.argv, wrapped_text]

    def resolve_executable(self) -> Optional[str]:
        """Full path of the interpreter, or None when it is not installed"""
        return shutil.which(self.executable)

    def ensure_available(self) -> str:
        """Raises:
            InterpreterNotFoundError: If the interpreter is not on PATH
        """
        resolved = self.resolve_executable()
        if resolved is None:
            raise InterpreterNotFoundError(self.executable)
        return resolved


class PowerShellProfile(InterpreterProfile):
    name = "powershell"
    extension = "ps1"

    @property
    def argv(self) -> List[str]:
        return ["pwsh", "-NoLogo", "-NoProfile", "-NonInteractive", "-Command"]

    def wrap(self, raw_text: str) -> str:
        # *>&1 folds every stream into output; error records still land in $Error
        return (
            f"&{{\n{raw_text}\n}} -Verbose -Debug *>&1\n"
            "if ($Error.Count -gt 0) { exit 1 }\n"
        )


class PosixShellProfile(InterpreterProfile):
    name = "sh"
    extension = "sh"

    @property
    def argv(self) -> List[str]:
        return ["/bin/sh", "-c"]

    def wrap(self, raw_text: str) -> str:
        return (
            "BUILDHOOKS_VERBOSE=1\n"
            "BUILDHOOKS_DEBUG=1\n"
            "export BUILDHOOKS_VERBOSE BUILDHOOKS_DEBUG\n"
            "(\n"
            f"{raw_text}\n"
            ") 2>&1\n"
        )


class PythonProfile(InterpreterProfile):
    name = "python"
    extension = "py"

    @property
    def argv(self) -> List[str]:
        # -u keeps output flowing line by line through the pipe
        return [sys.executable, "-u", "-c"]

    def wrap(self, raw_text: str) -> str:
        return (
            "import logging, sys\n"
            "sys.stderr = sys.stdout\n"
            "logging.basicConfig(level=logging.DEBUG, stream=sys.stdout, "
            "format='%(levelname)s: %(message)s')\n"
            f"exec(compile({raw_text!r}, '<build script>', 'exec'), {{'__name__': '__main__'}})\n"
        )


INTERPRETERS: Dict[str, InterpreterProfile] = {
    profile.name: profile
    for profile in (PowerShellProfile(), PosixShellProfile(), PythonProfile())
}


def get_interpreter(name: str) -> InterpreterProfile:
    """Look up an interpreter profile by name

    Raises:
        UnknownInterpreterError: If no profile has that name
    """
    try:
        return INTERPRETERS[name]
    except KeyError:
        raise UnknownInterpreterError(name, list(INTERPRETERS))
