"""Discovery of the pre-build and post-build scripts next to a solution"""

import logging
from pathlib import Path
from typing import Tuple

from buildhooks.engine.interpreters import InterpreterProfile
from buildhooks.models import Phase, ScriptArtifact

logger = logging.getLogger(__name__)


class ScriptSource:
    """Resolve {root}/{name}.{Phase}.{ext} and load the script text

    A missing or unreadable script is a normal outcome and never raises.
    """

    def __init__(self, interpreter: InterpreterProfile):
        self.interpreter = interpreter

    def candidate_path(self, session_root: Path, session_name: str, phase: Phase) -> Path:
        return Path(session_root) / f"{session_name}.{phase.label}.{self.interpreter.extension}"

    def discover(self, session_root: Path, session_name: str, phase: Phase) -> ScriptArtifact:
        """Probe the naming convention for one phase

        Args:
            session_root: Directory holding the solution file
            session_name: Solution file name without extension
            phase: Phase to probe

        Returns:
            ScriptArtifact, present only when the file exists
        """
        path = self.candidate_path(session_root, session_name, phase)

        if not path.is_file():
            logger.debug(f"No {phase.label} script at {path}")
            return ScriptArtifact.absent(phase, path)

        try:
            # Undecodable bytes (ANSI-encoded scripts) are replaced, not fatal
            raw_text = path.read_text(encoding="utf-8-sig", errors="replace")
        except OSError as e:
            logger.warning(f"{path.name} could not be read, treating as absent: {e}")
            return ScriptArtifact.absent(phase, path)

        logger.info(f"{path.name} found")

        return ScriptArtifact(
            phase=phase,
            path=path,
            present=True,
            raw_text=raw_text,
            wrapped_text=self.interpreter.wrap(raw_text)
        )

    def discover_all(self, session_root: Path, session_name: str) -> Tuple[ScriptArtifact, ScriptArtifact]:
        """Return the (pre, post) artifacts for a session"""
        return (
            self.discover(session_root, session_name, Phase.PRE),
            self.discover(session_root, session_name, Phase.POST),
        )
