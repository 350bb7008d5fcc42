"""
Domain models for VCS hosting entities.

These dataclasses are the normalized representation returned by every
provider, converted from provider-specific formats (Gitea JSON, PyGithub
objects). Tool handlers only ever see these models, which keeps a tool's
output identical regardless of the platform behind it.

Example:
    Creating a repository from provider data::

        repo = Repository(
            id=7,
            name="infra",
            full_name="ops/infra",
            owner="ops",
            description="Terraform modules",
            private=True,
            url="https://gitea.example.com/ops/infra",
            clone_url="https://gitea.example.com/ops/infra.git",
        )
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class IssueState(str, Enum):
    """Enumeration of possible issue states.

    Both platforms already use these names; anything unknown is treated as
    CLOSED by the Gitea parser and as OPEN by the GitHub converter.
    """

    OPEN = "open"
    """Issue is active and awaiting resolution."""

    CLOSED = "closed"
    """Issue has been resolved or dismissed."""


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp as returned by REST APIs.

    The trailing 'Z' is replaced with '+00:00' for ``datetime.fromisoformat``.
    """
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class User:
    """An account on the hosting platform."""

    id: int
    login: str
    """Account name used in URLs and API paths (Gitea ``username``/``login``)."""

    full_name: str = ""
    email: str = ""
    url: str = ""
    avatar_url: str = ""


@dataclass
class Repository:
    """A hosted repository."""

    id: int
    name: str
    full_name: str
    """``owner/name`` path of the repository."""

    owner: str
    description: str = ""
    private: bool = False
    fork: bool = False
    archived: bool = False
    default_branch: str = "main"
    url: str = ""
    """Web URL of the repository."""

    clone_url: str = ""
    """HTTPS clone URL (no credentials embedded)."""

    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Branch:
    """Represents a Git branch.

    Used for branch management operations and for comparing branch heads
    between two repositories during a sync.
    """

    name: str
    """Branch name without ``refs/heads/`` prefix."""

    sha: str
    """Full SHA of the commit the branch points to."""

    protected: bool = False
    """Whether a branch protection rule applies to this branch."""


@dataclass
class Issue:
    """Represents an issue from any provider.

    Example:
        Converting from a Gitea API response::

            issue = Issue(
                id=response["id"],
                number=response["number"],
                title=response["title"],
                body=response["body"] or "",
                state=IssueState(response["state"]),
                labels=[l["name"] for l in response["labels"]],
                created_at=parse_timestamp(response["created_at"]),
                updated_at=parse_timestamp(response["updated_at"]),
                author=response["user"]["login"],
                url=response["html_url"],
            )
    """

    id: int
    """Unique identifier assigned by the provider's database.

    Prefer ``number`` for stable references; this ID is internal.
    """

    number: int
    """Repository-scoped issue number (e.g., #42)."""

    title: str
    body: str
    state: IssueState
    labels: list[str] = field(default_factory=list)
    """Label names only; colors and IDs are dropped."""

    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: str = ""
    url: str = ""


@dataclass
class Comment:
    """A comment on an issue or pull request."""

    id: int
    body: str
    author: str
    created_at: datetime | None = None


@dataclass
class PullRequest:
    """Represents a pull request.

    Gitea and GitHub both report ``state`` as "open" or "closed"; a merged
    pull request is closed with ``merged`` set.
    """

    id: int
    number: int
    title: str
    body: str
    head: str
    """Source branch name."""

    base: str
    """Target branch name."""

    state: str
    url: str
    created_at: datetime | None = None
    author: str = ""
    mergeable: bool = True
    merged: bool = False


@dataclass
class MergeResult:
    """Outcome of merging a pull request."""

    merged: bool
    message: str = ""
    sha: str | None = None


@dataclass
class Release:
    """A release attached to a tag."""

    id: int
    tag_name: str
    name: str
    body: str = ""
    draft: bool = False
    prerelease: bool = False
    target_commitish: str = ""
    url: str = ""
    author: str = ""
    created_at: datetime | None = None
    published_at: datetime | None = None


@dataclass
class Tag:
    """A Git tag."""

    name: str
    sha: str
    """SHA of the commit the tag resolves to."""

    message: str = ""


@dataclass
class Webhook:
    """A repository webhook."""

    id: int
    url: str
    """Delivery URL."""

    events: list[str] = field(default_factory=list)
    active: bool = True
    content_type: str = "json"
    created_at: datetime | None = None


@dataclass
class BranchProtection:
    """Branch protection rule, normalized across platforms.

    Gitea keys protections by rule name (the branch name or a glob); GitHub
    has exactly one protection per branch. ``branch_name`` is the rule name
    in both cases.
    """

    branch_name: str
    required_approvals: int = 0
    """Number of approving reviews required before merging."""

    require_status_checks: bool = False
    status_check_contexts: list[str] = field(default_factory=list)
    enforce_admins: bool = False
    """Whether the rule also applies to repository administrators."""

    dismiss_stale_reviews: bool = False
    created_at: datetime | None = None


@dataclass
class FileEntry:
    """A file or directory as reported by a repository contents API."""

    name: str
    path: str
    """Path from the repository root."""

    sha: str
    """Blob SHA; required by update and delete to detect concurrent edits."""

    type: str = "file"
    """Entry kind: file, dir, symlink or submodule."""

    size: int = 0
    url: str = ""
    download_url: str = ""
    content: str | None = None
    """Decoded text, only set when a single file was fetched."""


@dataclass
class Commit:
    """A commit on a hosted repository."""

    sha: str
    message: str
    author: str = ""
    """Author name as recorded in the commit, not the platform account."""

    author_email: str = ""
    authored_at: datetime | None = None
    url: str = ""
