"""Data model shared by discovery, execution and the lifecycle hooks"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class Phase(Enum):
    """Script execution slot; the value is the file-name and log label"""
    PRE = "PreBuild"
    POST = "PostBuild"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class ScriptArtifact:
    """One discovered automation script for one phase

    Built once when the session starts and never changed afterwards.
    """
    phase: Phase
    path: Path                # candidate path that was probed
    present: bool
    raw_text: str = ""
    wrapped_text: str = ""    # raw_text framed for diagnostic stream capture

    @classmethod
    def absent(cls, phase: Phase, path: Path) -> "ScriptArtifact":
        """Artifact for a phase whose script file does not exist"""
        return cls(phase=phase, path=path, present=False)

    @property
    def label(self) -> str:
        return self.phase.label


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of one bounded script run"""
    label: str
    started_at: datetime
    elapsed_seconds: float
    completed_in_time: bool
    had_errors: bool
    output_lines: Tuple[str, ...] = ()
    stop_requested: bool = False
    exit_code: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        """True when the script finished before the ceiling without errors"""
        return self.completed_in_time and not self.had_errors
