"""Unit tests for LifecycleHookManager"""

from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

import pytest

from buildhooks.engine.lifecycle import HookState, LifecycleHookManager, SessionContext
from buildhooks.engine.script_executor import BoundedScriptExecutor
from buildhooks.host.interfaces import S_OK, SolutionBuildManager
from buildhooks.log_sink import LogSink
from buildhooks.models import ExecutionOutcome, Phase, ScriptArtifact


def make_artifact(phase: Phase, present: bool = True) -> ScriptArtifact:
    path = Path(f"/work/App.{phase.label}.sh")
    if not present:
        return ScriptArtifact.absent(phase, path)
    return ScriptArtifact(
        phase=phase,
        path=path,
        present=True,
        raw_text="echo ok",
        wrapped_text=f"wrapped {phase.label}"
    )


def make_outcome(label: str, ok: bool = True) -> ExecutionOutcome:
    return ExecutionOutcome(
        label=label,
        started_at=datetime.now(),
        elapsed_seconds=0.1,
        completed_in_time=True,
        had_errors=not ok,
        output_lines=("ok",),
        exit_code=0 if ok else 1
    )


def make_session(pre: bool = True, post: bool = True) -> SessionContext:
    return SessionContext(
        session_root=Path("/work"),
        session_name="App",
        pre_script=make_artifact(Phase.PRE, pre),
        post_script=make_artifact(Phase.POST, post)
    )


@pytest.fixture
def executor():
    executor = Mock(spec=BoundedScriptExecutor)
    executor.run.side_effect = lambda label, text: make_outcome(label)
    return executor


@pytest.fixture
def channel():
    return LogSink().create_channel("BuildHooks")


@pytest.fixture
def build_manager():
    manager = Mock(spec=SolutionBuildManager)
    manager.advise_update_solution_events.return_value = 42
    return manager


class TestSessionContext:
    """Test presence flags derived from the artifacts"""

    def test_flags(self):
        assert make_session().has_scripts is True
        assert make_session(pre=False).has_pre_script is False
        assert make_session(pre=False).has_post_script is True
        assert make_session(pre=False, post=False).has_scripts is False


class TestNotifications:
    """Test lifecycle notification handling"""

    def test_begin_runs_pre_script(self, executor, channel):
        manager = LifecycleHookManager(make_session(), executor, channel)

        response = manager.update_solution_begin()

        executor.run.assert_called_once_with("PreBuild", "wrapped PreBuild")
        assert response.status == S_OK
        assert response.cancel_update is False
        assert "PreBuild result: success" in channel

    def test_done_runs_post_script(self, executor, channel):
        manager = LifecycleHookManager(make_session(), executor, channel)

        status = manager.update_solution_done(True, True, False)

        executor.run.assert_called_once_with("PostBuild", "wrapped PostBuild")
        assert status == S_OK
        assert "PostBuild result: success" in channel

    def test_missing_phase_script_is_a_no_op(self, executor, channel):
        manager = LifecycleHookManager(make_session(pre=False), executor, channel)

        response = manager.update_solution_begin()

        executor.run.assert_not_called()
        assert response.cancel_update is False
        assert channel.entries == []

    def test_pre_runs_before_post(self, executor, channel):
        manager = LifecycleHookManager(make_session(), executor, channel)

        manager.update_solution_begin()
        manager.update_solution_done(True, True, False)

        labels = [call.args[0] for call in executor.run.call_args_list]
        assert labels == ["PreBuild", "PostBuild"]
        assert [outcome.label for outcome in manager.outcomes] == ["PreBuild", "PostBuild"]

    def test_failed_script_does_not_cancel_build(self, executor, channel):
        executor.run.side_effect = lambda label, text: make_outcome(label, ok=False)
        manager = LifecycleHookManager(make_session(), executor, channel)

        response = manager.update_solution_begin()
        status = manager.update_solution_done(False, True, False)

        assert response.status == S_OK
        assert response.cancel_update is False
        assert status == S_OK
        assert "PreBuild result: failure" in channel
        assert "PostBuild result: failure" in channel

    def test_executor_exception_is_contained(self, executor, channel):
        executor.run.side_effect = RuntimeError("pipe exploded")
        manager = LifecycleHookManager(make_session(), executor, channel)

        response = manager.update_solution_begin()

        assert response.status == S_OK
        assert "[PreBuild] hook failed: pipe exploded" in channel
        assert manager.state is HookState.IDLE
        assert manager.outcomes == []

    def test_state_while_running(self, executor, channel):
        seen = []
        manager = LifecycleHookManager(make_session(), executor, channel)

        def record(label, text):
            seen.append(manager.state)
            return make_outcome(label)

        executor.run.side_effect = record

        manager.update_solution_begin()
        manager.update_solution_done(True, True, False)

        assert seen == [HookState.RUNNING_PRE, HookState.RUNNING_POST]
        assert manager.state is HookState.IDLE

    def test_other_notifications_take_no_action(self, executor, channel):
        manager = LifecycleHookManager(make_session(), executor, channel)

        assert manager.update_solution_start_update().cancel_update is False
        assert manager.update_solution_cancel() == S_OK
        assert manager.on_active_project_cfg_change(object()) == S_OK
        executor.run.assert_not_called()


class TestRegistration:
    """Test subscription lifetime"""

    def test_register_without_scripts_does_not_subscribe(self, executor, channel, build_manager):
        manager = LifecycleHookManager(make_session(pre=False, post=False), executor, channel)

        assert manager.register(build_manager) is False
        build_manager.advise_update_solution_events.assert_not_called()
        assert manager.is_registered is False

    def test_register_subscribes_once(self, executor, channel, build_manager):
        manager = LifecycleHookManager(make_session(), executor, channel)

        assert manager.register(build_manager) is True
        assert manager.register(build_manager) is True

        build_manager.advise_update_solution_events.assert_called_once_with(manager)
        assert manager.is_registered is True

    def test_unregister_releases_exactly_once(self, executor, channel, build_manager):
        manager = LifecycleHookManager(make_session(), executor, channel)
        manager.register(build_manager)

        manager.unregister()
        manager.unregister()

        build_manager.unadvise_update_solution_events.assert_called_once_with(42)
        assert manager.is_registered is False

    def test_unregister_without_register_is_a_no_op(self, executor, channel):
        manager = LifecycleHookManager(make_session(), executor, channel)

        manager.unregister()

        assert manager.is_registered is False
