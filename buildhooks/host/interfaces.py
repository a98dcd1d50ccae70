"""Interfaces the build host exposes to the hook package"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from buildhooks.exceptions import HostServiceUnavailableError

S_OK = 0

# Service identifiers understood by ServiceProvider.get_service
SOLUTION_SERVICE = "solution"
BUILD_MANAGER_SERVICE = "solution_build_manager"


@dataclass(frozen=True)
class SolutionInfo:
    """Identity of the active solution"""
    full_name: Path

    @property
    def directory(self) -> Path:
        return Path(self.full_name).parent

    @property
    def name(self) -> str:
        return Path(self.full_name).stem


@dataclass(frozen=True)
class UpdateResponse:
    """Handler reply for notifications that may cancel the build"""
    status: int = S_OK
    cancel_update: bool = False


class UpdateSolutionEvents(ABC):
    """Build lifecycle notifications; every handler returns a status code"""

    @abstractmethod
    def update_solution_begin(self) -> UpdateResponse:
        """Build is about to start"""
        pass

    @abstractmethod
    def update_solution_done(self, succeeded: bool, modified: bool, cancel_command: bool) -> int:
        """Build has finished"""
        pass

    @abstractmethod
    def update_solution_start_update(self) -> UpdateResponse:
        pass

    @abstractmethod
    def update_solution_cancel(self) -> int:
        pass

    @abstractmethod
    def on_active_project_cfg_change(self, hierarchy: Any) -> int:
        pass


class SolutionBuildManager(ABC):
    """Registration point for lifecycle subscribers"""

    @abstractmethod
    def advise_update_solution_events(self, sink: UpdateSolutionEvents) -> int:
        """Subscribe a sink and return its registration cookie"""
        pass

    @abstractmethod
    def unadvise_update_solution_events(self, cookie: int) -> None:
        """Release a registration; unknown cookies must be tolerated"""
        pass


class ServiceProvider(ABC):
    """Service locator offered by the host"""

    @abstractmethod
    def get_service(self, service_id: str) -> Optional[Any]:
        """Return the service, or None when the host does not offer it"""
        pass

    def require_service(self, service_id: str) -> Any:
        """Raises:
            HostServiceUnavailableError: If the service cannot be obtained
        """
        service = self.get_service(service_id)
        if service is None:
            raise HostServiceUnavailableError(service_id)
        return service
