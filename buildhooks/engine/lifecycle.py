"""Lifecycle hooks: run the pre-build and post-build scripts on build events"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from buildhooks.engine.script_executor import BoundedScriptExecutor
from buildhooks.host.interfaces import (
    S_OK,
    SolutionBuildManager,
    UpdateResponse,
    UpdateSolutionEvents,
)
from buildhooks.log_sink import LogChannel
from buildhooks.models import ExecutionOutcome, ScriptArtifact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Scripts discovered for the active solution"""
    session_root: Path
    session_name: str
    pre_script: ScriptArtifact
    post_script: ScriptArtifact

    @property
    def has_pre_script(self) -> bool:
        return self.pre_script.present

    @property
    def has_post_script(self) -> bool:
        return self.post_script.present

    @property
    def has_scripts(self) -> bool:
        return self.has_pre_script or self.has_post_script


class HookState(Enum):
    IDLE = "idle"
    RUNNING_PRE = "running_pre"
    RUNNING_POST = "running_post"


class LifecycleHookManager(UpdateSolutionEvents):
    """Map build begin/done notifications to the session's scripts

    Handlers always report success and never request cancellation: a failed
    or timed-out script is logged and the build carries on.
    """

    def __init__(
        self,
        session: SessionContext,
        executor: BoundedScriptExecutor,
        channel: LogChannel
    ):
        self.session = session
        self.executor = executor
        self.channel = channel
        self.state = HookState.IDLE
        self.outcomes: List[ExecutionOutcome] = []
        self._build_manager: Optional[SolutionBuildManager] = None
        self._cookie: Optional[int] = None

    @property
    def is_registered(self) -> bool:
        return self._cookie is not None

    def register(self, build_manager: SolutionBuildManager) -> bool:
        """Subscribe to lifecycle events when the session has any script

        Returns:
            True if a subscription was made
        """
        if not self.session.has_scripts:
            logger.debug("No build scripts for this session, not subscribing")
            return False
        if self.is_registered:
            return True

        self._cookie = build_manager.advise_update_solution_events(self)
        self._build_manager = build_manager
        return True

    def unregister(self) -> None:
        """Release the subscription; safe to call repeatedly"""
        if self._cookie is None or self._build_manager is None:
            return

        cookie, self._cookie = self._cookie, None
        build_manager, self._build_manager = self._build_manager, None
        build_manager.unadvise_update_solution_events(cookie)

    def update_solution_begin(self) -> UpdateResponse:
        if self.session.has_pre_script:
            self._run_phase(self.session.pre_script, HookState.RUNNING_PRE)
        return UpdateResponse(status=S_OK, cancel_update=False)

    def update_solution_done(self, succeeded: bool, modified: bool, cancel_command: bool) -> int:
        if self.session.has_post_script:
            self._run_phase(self.session.post_script, HookState.RUNNING_POST)
        return S_OK

    def update_solution_start_update(self) -> UpdateResponse:
        logger.debug("start-update observed")
        return UpdateResponse(status=S_OK, cancel_update=False)

    def update_solution_cancel(self) -> int:
        logger.debug("cancel observed")
        return S_OK

    def on_active_project_cfg_change(self, hierarchy: Any) -> int:
        logger.debug("active configuration change observed")
        return S_OK

    def _run_phase(self, script: ScriptArtifact, running: HookState) -> Optional[ExecutionOutcome]:
        label = script.label
        self.state = running
        try:
            outcome = self.executor.run(label, script.wrapped_text)
        except Exception as e:
            # Script problems must never reach the host
            logger.exception(f"{label} hook failed")
            self.channel.write(f"[{label}] hook failed: {e}")
            return None
        finally:
            self.state = HookState.IDLE

        self.outcomes.append(outcome)
        self.channel.write(f"{label} result: {'success' if outcome.succeeded else 'failure'}")
        return outcome
