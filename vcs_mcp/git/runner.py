"""Running the ``git`` executable.

All git invocations go through :func:`run_git`, which wraps
:func:`vcs_mcp.utils.async_subprocess.run_command` with git-specific
error reporting: a missing executable, a bad working directory and a
timeout all surface as :class:`GitOperationError`.

Example:
    >>> result = await run_git("status", "--short", cwd="/srv/repo", timeout=30)
    >>> if result.succeeded:
    ...     print(result.stdout)
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from vcs_mcp.exceptions import GitOperationError
from vcs_mcp.utils.async_subprocess import run_command

log = structlog.get_logger(__name__)

# Never block waiting for credentials on stdin
GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


@dataclass
class GitCommandResult:
    """Captured outcome of one git invocation."""

    args: list[str]
    stdout: str
    stderr: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """stdout and stderr joined, stripped of surrounding whitespace."""
        return "\n".join(part.strip() for part in (self.stdout, self.stderr) if part.strip())


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every occurrence of each secret with ``***``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, "***")
    return text


async def run_git(
    *args: str,
    cwd: Path | str | None = None,
    timeout: float | None = None,
    check: bool = False,
    secrets: Iterable[str] = (),
) -> GitCommandResult:
    """Run ``git`` with the given arguments.

    Args:
        *args: Arguments after ``git`` (e.g. "commit", "-m", "msg")
        cwd: Working directory; must exist
        timeout: Seconds before the process is killed; None waits forever
        check: Raise GitOperationError on a non-zero exit code
        secrets: Strings (tokens) to mask in the captured output and in
            the argument list kept on the result

    Returns:
        GitCommandResult with decoded output and exit code

    Raises:
        GitOperationError: If git cannot be started, times out, or (with
            check) exits non-zero
    """
    secrets = [s for s in secrets if s]
    shown_args = [redact(arg, secrets) for arg in args]
    command = shown_args[0] if shown_args else "git"

    log.debug("git_command", args=shown_args, cwd=str(cwd) if cwd else None)

    try:
        stdout, stderr, code = await run_command("git", *args, cwd=cwd, check=False, timeout=timeout, env=GIT_ENV)
    except TimeoutError as e:
        raise GitOperationError(f"git {command} timed out after {timeout} seconds") from e
    except asyncio.CancelledError:
        log.info("git_command_cancelled", command=command)
        raise
    except FileNotFoundError as e:
        target = f"working directory {cwd}" if cwd and not Path(cwd).exists() else "git executable"
        raise GitOperationError(f"Cannot run git {command}: {target} not found") from e
    except OSError as e:
        raise GitOperationError(f"Cannot run git {command}: {e}") from e

    result = GitCommandResult(
        args=shown_args,
        stdout=redact(stdout, secrets),
        stderr=redact(stderr, secrets),
        exit_code=code,
    )

    if not result.succeeded:
        log.info("git_command_failed", command=command, exit_code=code)
        if check:
            raise GitOperationError(f"git {command} failed with exit code {code}", returncode=code, output=result.output)

    return result
