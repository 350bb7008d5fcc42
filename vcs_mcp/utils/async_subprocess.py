"""Run external commands from async code.

This is the one place the server starts child processes. Commands run
without a shell and with stdin closed. Output is captured and decoded.
The child is killed when the timeout expires or when the awaiting task
is cancelled.

Example:
    >>> from vcs_mcp.utils.async_subprocess import run_command
    >>> stdout, stderr, code = await run_command("git", "status", cwd="/repo", check=False)
"""

import asyncio
import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

import structlog

log = structlog.get_logger(__name__)


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        process.kill()
        await process.wait()


async def run_command(
    *args: str,
    cwd: Path | str | None = None,
    check: bool = True,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[str, str, int]:
    """Run ``args`` and return ``(stdout, stderr, exit_code)``.

    Args:
        *args: Executable followed by its arguments, e.g. ``"git", "push", "origin"``
        cwd: Directory to run in (defaults to the current directory)
        check: Raise when the exit code is non-zero
        timeout: Seconds before the child is killed; None waits forever
        env: Variables added on top of the inherited environment

    Raises:
        subprocess.CalledProcessError: Non-zero exit with ``check=True``; carries both streams
        asyncio.TimeoutError: The timeout expired (the child is already dead)
        asyncio.CancelledError: The caller was cancelled (the child is already dead)
        FileNotFoundError: The executable or ``cwd`` does not exist
        NotADirectoryError: ``cwd`` is not a directory
    """
    process_env = None
    if env:
        process_env = {**os.environ, **env}

    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=cwd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=process_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(),
            timeout=timeout,
        )
    except TimeoutError:
        log.warning("command_timed_out", command=args[0], timeout=timeout)
        await _terminate(process)
        raise
    except asyncio.CancelledError:
        log.info("command_cancelled", command=args[0])
        await _terminate(process)
        raise

    stdout = (stdout_bytes or b"").decode("utf-8", errors="replace")
    stderr = (stderr_bytes or b"").decode("utf-8", errors="replace")

    if check and process.returncode != 0:
        raise subprocess.CalledProcessError(
            process.returncode,
            args,
            stdout,
            stderr,
        )

    return stdout, stderr, process.returncode or 0
