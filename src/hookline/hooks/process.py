"""Shell process execution for command hooks."""

from __future__ import annotations

import asyncio
import os
import signal
import sys
from dataclasses import dataclass


@dataclass(slots=True)
class ProcessResult:
    """Captured outcome of a finished (or killed) shell command."""

    stdout: str
    stderr: str
    exit_code: int | None
    timed_out: bool = False


async def run_shell(
    command: str,
    *,
    stdin: str = "",
    cwd: str | None = None,
    env: dict[str, str] | None = None,
    timeout_sec: float = 60.0,
) -> ProcessResult:
    """Run *command* through the shell, feeding *stdin* once and closing it.

    On timeout the whole process group is killed and ``timed_out`` is set;
    on cancellation it is killed and the cancellation propagates.
    ``OSError`` from spawning propagates to the caller.
    """
    posix = sys.platform != "win32"
    proc = await asyncio.create_subprocess_shell(
        command,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd or None,
        env=env,
        start_new_session=posix,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            proc.communicate(stdin.encode("utf-8")), timeout=timeout_sec,
        )
    except TimeoutError:
        _kill(proc, posix)
        try:
            await asyncio.wait_for(proc.wait(), timeout=5.0)
        except TimeoutError:
            pass
        return ProcessResult(stdout="", stderr="", exit_code=None, timed_out=True)
    except BaseException:
        # Cancelled by the caller: the detached process group must not outlive us
        _kill(proc, posix)
        raise

    return ProcessResult(
        stdout=stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else "",
        stderr=stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else "",
        exit_code=proc.returncode,
    )


def _kill(proc: asyncio.subprocess.Process, posix: bool) -> None:
    # Shell children would otherwise keep running after the shell dies
    try:
        if posix:
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        pass
