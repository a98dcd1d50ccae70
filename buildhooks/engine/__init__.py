"""Engine package for discovering and running hook scripts"""

from buildhooks.engine.interpreters import (
    INTERPRETERS,
    InterpreterProfile,
    get_interpreter,
)
from buildhooks.engine.lifecycle import (
    HookState,
    LifecycleHookManager,
    SessionContext,
)
from buildhooks.engine.script_executor import BoundedScriptExecutor
from buildhooks.engine.script_source import ScriptSource

__all__ = [
    "INTERPRETERS",
    "InterpreterProfile",
    "get_interpreter",
    "HookState",
    "LifecycleHookManager",
    "SessionContext",
    "BoundedScriptExecutor",
    "ScriptSource",
]
