"""Bounded executor for running hook scripts"""

import logging
import os
import signal
import subprocess
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import IO, List, Optional

from buildhooks.config import DEFAULT_MAX_WAIT_SECONDS, DEFAULT_POLL_INTERVAL_MS
from buildhooks.engine.interpreters import InterpreterProfile
from buildhooks.log_sink import LogChannel
from buildhooks.models import ExecutionOutcome

logger = logging.getLogger(__name__)


class BoundedScriptExecutor:
    """Run wrapped script text in an external interpreter with a wait ceiling

    The call blocks for at most max_wait (plus the stop grace when the script
    overruns). Stopping is best-effort: a process that ignores both terminate
    and kill is logged as a stray process and left behind.
    """

    def __init__(
        self,
        interpreter: InterpreterProfile,
        channel: Optional[LogChannel] = None,
        max_wait: float = DEFAULT_MAX_WAIT_SECONDS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_MS / 1000.0,
        stop_grace: float = 2.0,
        working_dir: Optional[Path] = None
    ):
        """Initialize script executor

        Args:
            interpreter: Interpreter profile used to launch scripts
            channel: Log channel receiving progress and output lines
            max_wait: Ceiling in seconds before the script is stopped
            poll_interval: Seconds between completion checks
            stop_grace: Seconds allowed for terminate, kill and output drain
            working_dir: Working directory for the script (defaults to current dir)
        """
        self.interpreter = interpreter
        self.channel = channel
        self.max_wait = max_wait
        self.poll_interval = poll_interval
        self.stop_grace = stop_grace
        self.working_dir = working_dir or Path.cwd()

    def run(
        self,
        label: str,
        wrapped_script: str,
        max_wait: Optional[float] = None,
        poll_interval: Optional[float] = None
    ) -> ExecutionOutcome:
        """Execute a script and wait for it up to the ceiling

        Args:
            label: Tag used for every log line of this run
            wrapped_script: Script text already framed by the interpreter profile
            max_wait: Override of the executor's ceiling
            poll_interval: Override of the executor's poll cadence

        Returns:
            ExecutionOutcome describing the run; never raises for script problems
        """
        max_wait = self.max_wait if max_wait is None else max_wait
        poll_interval = self.poll_interval if poll_interval is None else poll_interval

        self._log(f"Starting {label}")
        started_at = datetime.now()
        start = time.monotonic()

        try:
            process = subprocess.Popen(
                self.interpreter.command(wrapped_script),
                cwd=self.working_dir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                bufsize=1,
                start_new_session=(os.name == "posix")
            )
        except OSError as e:
            self._log(f"[{label}] could not start interpreter '{self.interpreter.executable}': {e}")
            self._log(f"[{label}] errors occurred")
            return ExecutionOutcome(
                label=label,
                started_at=started_at,
                elapsed_seconds=time.monotonic() - start,
                completed_in_time=True,
                had_errors=True,
                output_lines=(str(e),)
            )

        lines: List[str] = []
        reader = threading.Thread(
            target=_pump_lines,
            args=(process.stdout, lines),
            name=f"buildhooks-{label}-reader",
            daemon=True
        )
        reader.start()

        completed = self._wait(process, start + max_wait, poll_interval)
        elapsed = time.monotonic() - start
        self._log(f"[{label}] waited {int(elapsed * 1000)} ms for script to complete")

        stop_requested = False
        if not completed:
            self._log(f"[{label}] timed out after {max_wait}s, stop requested")
            self._stop(process, label)
            stop_requested = True

        # Drain whatever the reader captured
        reader.join(timeout=self.stop_grace)
        if reader.is_alive():
            logger.warning(f"[{label}] output pipe still open; output may be incomplete")
            self._log(f"[{label}] output still held open by a background process, output may be incomplete")
        output = tuple(lines)

        for line in output:
            self._log(f"[{label}] {line}")

        exit_code = process.returncode
        had_errors = completed and exit_code != 0

        if had_errors:
            self._log(f"[{label}] errors occurred")
        elif completed:
            self._log(f"Done {label}, {elapsed:.3f} seconds")

        return ExecutionOutcome(
            label=label,
            started_at=started_at,
            elapsed_seconds=elapsed,
            completed_in_time=completed,
            had_errors=had_errors,
            output_lines=output,
            stop_requested=stop_requested,
            exit_code=exit_code
        )

    def _wait(self, process: subprocess.Popen, deadline: float, poll_interval: float) -> bool:
        """Poll for completion until the deadline; True when the process finished"""
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return process.poll() is not None
            try:
                process.wait(timeout=min(poll_interval, remaining))
                return True
            except subprocess.TimeoutExpired:
                continue

    def _stop(self, process: subprocess.Popen, label: str) -> None:
        """Terminate, then kill whatever is left; a survivor is logged and left running"""
        _signal_process(process)
        try:
            process.wait(timeout=self.stop_grace)
        except subprocess.TimeoutExpired:
            logger.debug(f"[{label}] process {process.pid} ignored terminate, killing")

        # Children that trapped the terminate signal still hold the output pipe
        _signal_process(process, force=True)
        try:
            process.wait(timeout=self.stop_grace)
        except subprocess.TimeoutExpired:
            logger.warning(f"[{label}] process {process.pid} did not stop; leaving stray process")
            self._log(f"[{label}] process {process.pid} did not stop")

    def _log(self, message: str) -> None:
        logger.debug(message)
        if self.channel is not None:
            self.channel.write(message)


def _pump_lines(stream: IO[str], sink: List[str]) -> None:
    """Read lines until EOF, stripping line endings"""
    try:
        for line in stream:
            sink.append(line.rstrip("\r\n"))
    except ValueError:
        # stream closed underneath the reader
        pass
    finally:
        stream.close()


def _signal_process(process: subprocess.Popen, force: bool = False) -> None:
    """Signal the script's whole process group on POSIX, the process elsewhere"""
    try:
        if os.name == "posix":
            os.killpg(process.pid, signal.SIGKILL if force else signal.SIGTERM)
        elif process.poll() is not None:
            return
        elif force:
            process.kill()
        else:
            process.terminate()
    except (ProcessLookupError, PermissionError):
        pass
