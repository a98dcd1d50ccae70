"""Session setup and teardown for the build hooks"""

import logging
from typing import Optional

from buildhooks.config import HookSettings, load_settings
from buildhooks.engine.interpreters import get_interpreter
from buildhooks.engine.lifecycle import LifecycleHookManager, SessionContext
from buildhooks.engine.script_executor import BoundedScriptExecutor
from buildhooks.engine.script_source import ScriptSource
from buildhooks.exceptions import ConfigurationError, HostServiceUnavailableError
from buildhooks.host.interfaces import (
    BUILD_MANAGER_SERVICE,
    SOLUTION_SERVICE,
    ServiceProvider,
    SolutionInfo,
)
from buildhooks.log_sink import LogChannel, LogSink

logger = logging.getLogger(__name__)


class BuildHooksPackage:
    """Wire script discovery, the executor and the lifecycle hooks to a host

    Usage:
        package = BuildHooksPackage(host)
        package.initialize()
        ...  # host fires lifecycle notifications
        package.dispose()
    """

    def __init__(
        self,
        services: ServiceProvider,
        settings: Optional[HookSettings] = None,
        log_sink: Optional[LogSink] = None
    ):
        self.services = services
        self.settings = settings
        self.log_sink = log_sink or LogSink()
        self.session: Optional[SessionContext] = None
        self.channel: Optional[LogChannel] = None
        self.hook_manager: Optional[LifecycleHookManager] = None

    def initialize(self) -> Optional[LifecycleHookManager]:
        """Discover scripts and subscribe to the build lifecycle

        Returns:
            The registered hook manager, or None when there is nothing to run,
            buildhooks.yaml is invalid, or the host cannot provide a required
            service
        """
        try:
            solution: SolutionInfo = self.services.require_service(SOLUTION_SERVICE)
        except HostServiceUnavailableError as e:
            logger.error(f"initialize() could not obtain solution reference: {e.message}")
            return None

        if self.settings is None:
            try:
                self.settings = load_settings(solution.directory)
            except ConfigurationError as e:
                logger.error(f"initialize() could not load settings: {e}")
                return None

        interpreter = get_interpreter(self.settings.interpreter)
        pre_script, post_script = ScriptSource(interpreter).discover_all(
            solution.directory, solution.name
        )
        self.session = SessionContext(
            session_root=solution.directory,
            session_name=solution.name,
            pre_script=pre_script,
            post_script=post_script
        )

        if not self.session.has_scripts:
            logger.info(f"No build scripts found for {solution.name}")
            return None

        try:
            build_manager = self.services.require_service(BUILD_MANAGER_SERVICE)
        except HostServiceUnavailableError as e:
            logger.error(f"initialize() could not obtain build manager: {e.message}")
            return None

        self.channel = self.log_sink.create_channel(
            self.settings.channel_name,
            visible=True,
            clear_with_session=False
        )
        self.channel.write(f"Created pane {self.settings.channel_name}")

        executor = BoundedScriptExecutor(
            interpreter,
            channel=self.channel,
            max_wait=self.settings.max_wait_seconds,
            poll_interval=self.settings.poll_interval_seconds,
            stop_grace=self.settings.stop_grace_seconds,
            working_dir=solution.directory
        )
        manager = LifecycleHookManager(self.session, executor, self.channel)
        manager.register(build_manager)
        self.hook_manager = manager
        return manager

    def dispose(self) -> None:
        """Unsubscribe from lifecycle events; repeated calls are no-ops"""
        if self.hook_manager is not None:
            self.hook_manager.unregister()
