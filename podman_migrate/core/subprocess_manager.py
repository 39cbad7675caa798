"""Execution of runtime, rsync and sudo commands as tracked subprocesses.

Every command gets a timeout. Processes still alive when a command is
abandoned (timeout, cancellation) are terminated, and ``managed_subprocess``
guarantees nothing started inside it outlives the block.
"""

import asyncio
import shlex
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import structlog

from .exceptions import RuntimeCommandError

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 60
TERMINATE_GRACE_PERIOD = 5
MAX_ERROR_MESSAGE_LENGTH = 500


@dataclass(frozen=True)
class SubprocessResult:
    """Exit status and decoded output of a finished command."""

    returncode: int
    stdout: str
    stderr: str
    cmd: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def error_message(self) -> str:
        """stderr, else stdout, trimmed; runtimes report some errors on stdout."""
        output = self.stderr.strip() or self.stdout.strip()
        return output[:MAX_ERROR_MESSAGE_LENGTH] if output else "Command failed"

    def check_returncode(self) -> None:
        if not self.success:
            raise RuntimeCommandError(
                f"Command failed with exit code {self.returncode}: {self.error_message}"
            )


class SubprocessManager:
    """Run commands one at a time and keep track of the processes they start."""

    def __init__(self):
        self.logger = logger.bind(component="subprocess_manager")
        self._running: dict[int, asyncio.subprocess.Process] = {}

    @property
    def running_count(self) -> int:
        return len(self._running)

    async def run_command(
        self,
        cmd: list[str],
        *,
        timeout: float | None = None,
        check: bool = True,
    ) -> SubprocessResult:
        """Run ``cmd`` and wait for it to finish.

        Args:
            cmd: Program and arguments; no shell is involved
            timeout: Seconds before the process is terminated (default 60)
            check: Raise when the command exits non-zero

        Raises:
            RuntimeCommandError: If the program cannot be started, times out,
                or exits non-zero while ``check`` is set
        """
        timeout = DEFAULT_TIMEOUT if timeout is None else timeout
        command_line = shlex.join(cmd)
        self.logger.debug("Executing command", command=command_line, timeout=timeout)

        process = await self._spawn(cmd)
        started = time.monotonic()
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError as e:
            self.logger.warning(
                "Command timed out, terminating", command=command_line, pid=process.pid
            )
            await self._terminate(process)
            raise RuntimeCommandError(
                f"Command timed out after {timeout} seconds: {command_line}"
            ) from e
        finally:
            if process.returncode is None:
                await self._terminate(process)
            self._running.pop(process.pid, None)

        result = SubprocessResult(
            returncode=process.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            cmd=cmd,
        )
        self.logger.debug(
            "Command finished",
            command=command_line,
            returncode=result.returncode,
            duration=round(time.monotonic() - started, 3),
        )
        if check:
            result.check_returncode()
        return result

    async def _spawn(self, cmd: list[str]) -> asyncio.subprocess.Process:
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RuntimeCommandError(f"Failed to start {cmd[0]}: {e}") from e
        self._running[process.pid] = process
        return process

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """SIGTERM, then SIGKILL once the grace period runs out."""
        if process.returncode is not None:
            return
        try:
            process.terminate()
            await asyncio.wait_for(process.wait(), timeout=TERMINATE_GRACE_PERIOD)
        except asyncio.TimeoutError:
            self.logger.warning("Process ignored SIGTERM, killing", pid=process.pid)
            process.kill()
            await process.wait()
        except ProcessLookupError:
            pass

    async def cleanup_all(self) -> None:
        """Terminate every process this manager started that is still running."""
        processes = list(self._running.values())
        self._running.clear()
        if processes:
            self.logger.info("Terminating leftover processes", count=len(processes))
        for process in processes:
            await self._terminate(process)


_default_manager: SubprocessManager | None = None


def get_subprocess_manager() -> SubprocessManager:
    """Shared manager for callers that were not handed one."""
    global _default_manager
    if _default_manager is None:
        _default_manager = SubprocessManager()
    return _default_manager


@asynccontextmanager
async def managed_subprocess():
    """Yield a fresh manager and terminate its leftovers on exit."""
    manager = SubprocessManager()
    try:
        yield manager
    finally:
        await manager.cleanup_all()
