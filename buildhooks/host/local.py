"""In-process build host that drives the lifecycle around a shell command"""

import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from buildhooks.host.interfaces import (
    BUILD_MANAGER_SERVICE,
    SOLUTION_SERVICE,
    ServiceProvider,
    SolutionBuildManager,
    SolutionInfo,
    UpdateSolutionEvents,
)

logger = logging.getLogger(__name__)


class LocalBuildHost(ServiceProvider, SolutionBuildManager):
    """Minimal host: one solution, a subscriber table and a build command"""

    def __init__(self, solution_path: Path, working_dir: Optional[Path] = None):
        self.solution = SolutionInfo(Path(solution_path).resolve())
        self.working_dir = working_dir or self.solution.directory
        self._subscribers: Dict[int, UpdateSolutionEvents] = {}
        self._next_cookie = 1

    def get_service(self, service_id: str) -> Optional[Any]:
        services = {
            SOLUTION_SERVICE: self.solution,
            BUILD_MANAGER_SERVICE: self,
        }
        return services.get(service_id)

    def advise_update_solution_events(self, sink: UpdateSolutionEvents) -> int:
        cookie = self._next_cookie
        self._next_cookie += 1
        self._subscribers[cookie] = sink
        logger.debug(f"Advised lifecycle subscriber, cookie={cookie}")
        return cookie

    def unadvise_update_solution_events(self, cookie: int) -> None:
        if self._subscribers.pop(cookie, None) is None:
            logger.debug(f"Unadvise for unknown cookie {cookie} ignored")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def build(self, command: Sequence[str] = ()) -> int:
        """Fire start/begin, run the command, fire done

        Args:
            command: Build command; empty runs the lifecycle with no build work

        Returns:
            Exit code of the command, or 1 when a subscriber cancelled
        """
        if self._any_cancel("update_solution_start_update") or self._any_cancel("update_solution_begin"):
            logger.info("Build cancelled by a lifecycle subscriber")
            self.cancel()
            return 1

        exit_code = 0
        if command:
            logger.info(f"Running build command: {' '.join(command)}")
            try:
                exit_code = subprocess.run(list(command), cwd=self.working_dir).returncode
            except FileNotFoundError as e:
                logger.error(f"Build command not found: {e}")
                exit_code = 127

        for sink in self._sinks():
            sink.update_solution_done(exit_code == 0, True, False)

        return exit_code

    def cancel(self) -> None:
        for sink in self._sinks():
            sink.update_solution_cancel()

    def change_active_config(self, hierarchy: Any = None) -> None:
        for sink in self._sinks():
            sink.on_active_project_cfg_change(hierarchy)

    def _any_cancel(self, handler: str) -> bool:
        cancelled = False
        for sink in self._sinks():
            response = getattr(sink, handler)()
            cancelled = cancelled or response.cancel_update
        return cancelled

    def _sinks(self) -> List[UpdateSolutionEvents]:
        return list(self._subscribers.values())
