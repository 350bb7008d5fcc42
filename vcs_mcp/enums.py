"""Enumerations for vcs-mcp provider kinds and tool names."""

from enum import Enum


class ProviderKind(str, Enum):
    """Git hosting platforms a provider can talk to.

    - gitea: Gitea (or Forgejo) REST API v1
    - github: GitHub REST API v3, including GitHub Enterprise
    """

    GITEA = "gitea"
    GITHUB = "github"

    def __str__(self) -> str:
        return self.value


class ToolName(str, Enum):
    """Names of the tools published over MCP.

    The value is the exact name an MCP client uses in ``call_tool``.
    """

    REPOSITORIES = "repositories"
    BRANCHES = "branches"
    ISSUES = "issues"
    PULLS = "pulls"
    RELEASES = "releases"
    TAGS = "tags"
    WEBHOOKS = "webhooks"
    USERS = "users"
    BRANCH_PROTECTION = "branch-protection"
    GIT_LOCAL = "git-local"
    GIT_SYNC = "git-sync"
    FILES = "files"
    COMMITS = "commits"

    def __str__(self) -> str:
        return self.value


class MergeMethod(str, Enum):
    """Pull request merge strategies."""

    MERGE = "merge"
    REBASE = "rebase"
    SQUASH = "squash"

    def __str__(self) -> str:
        return self.value
