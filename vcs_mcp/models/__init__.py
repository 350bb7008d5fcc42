"""Normalized domain models shared by providers and tools."""

from vcs_mcp.models.domain import (
    Branch,
    BranchProtection,
    Comment,
    Commit,
    FileEntry,
    Issue,
    IssueState,
    MergeResult,
    PullRequest,
    Release,
    Repository,
    Tag,
    User,
    Webhook,
)

__all__ = [
    "Branch",
    "BranchProtection",
    "Comment",
    "Commit",
    "FileEntry",
    "Issue",
    "IssueState",
    "MergeResult",
    "PullRequest",
    "Release",
    "Repository",
    "Tag",
    "User",
    "Webhook",
]
