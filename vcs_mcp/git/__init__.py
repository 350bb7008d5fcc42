"""Local git command execution."""

from vcs_mcp.git.runner import GitCommandResult, redact, run_git

__all__ = ["GitCommandResult", "redact", "run_git"]
