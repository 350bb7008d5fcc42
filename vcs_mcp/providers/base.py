"""
Abstract base class for VCS hosting providers.

This module defines the provider interface that tool handlers program
against. Implementations translate it to a specific platform's REST API.
"""

from abc import ABC, abstractmethod

from vcs_mcp.enums import MergeMethod, ProviderKind
from vcs_mcp.models.domain import (
    Branch,
    BranchProtection,
    Comment,
    Commit,
    FileEntry,
    Issue,
    MergeResult,
    PullRequest,
    Release,
    Repository,
    Tag,
    User,
    Webhook,
)


class VcsProvider(ABC):
    """Abstract base class for VCS provider implementations.

    Unlike a repository-scoped client, a provider is scoped to an account:
    every repository operation takes ``owner`` and ``repo`` explicitly, so a
    single instance serves every tool call made against that platform.

    Implementations handle provider-specific quirks such as:
    - Different login fields (Gitea ``username`` vs GitHub ``login``)
    - Search endpoints wrapping results (Gitea ``{"data": [...]}``)
    - Branch protection keyed by rule name (Gitea) or by branch (GitHub)
    - Authentication header formats (``token`` vs Bearer)

    All methods are async to support non-blocking I/O. Failures are not
    caught here: implementations raise ``httpx.HTTPStatusError`` (Gitea) or
    ``GithubException`` (GitHub) and the tool layer reports them.
    """

    kind: ProviderKind
    base_url: str
    token: str

    # -- users -----------------------------------------------------------

    @abstractmethod
    async def get_current_user(self) -> User:
        """Return the account the configured token belongs to.

        This is the lookup used by auto-user-detection; it must not be
        cached, since the same provider may be asked again after a token
        rotation.
        """
        pass

    @abstractmethod
    async def get_user(self, username: str) -> User:
        pass

    @abstractmethod
    async def search_users(self, query: str, limit: int = 10) -> list[User]:
        pass

    # -- repositories ----------------------------------------------------

    @abstractmethod
    async def list_repositories(
        self,
        username: str | None = None,
        page: int = 1,
        limit: int = 30,
    ) -> list[Repository]:
        """List repositories.

        Args:
            username: List this account's repositories. When None, list the
                repositories visible to the authenticated user.
            page: 1-based page number
            limit: Page size

        Returns:
            One page of repositories.
        """
        pass

    @abstractmethod
    async def get_repository(self, owner: str, repo: str) -> Repository:
        pass

    @abstractmethod
    async def create_repository(
        self,
        name: str,
        description: str = "",
        private: bool = False,
        auto_init: bool = False,
    ) -> Repository:
        """Create a repository owned by the authenticated user."""
        pass

    @abstractmethod
    async def update_repository(
        self,
        owner: str,
        repo: str,
        name: str | None = None,
        description: str | None = None,
        private: bool | None = None,
        archived: bool | None = None,
    ) -> Repository:
        """Update repository settings.

        Only arguments that are not None are sent.

        Returns:
            The repository after the update.
        """
        pass

    @abstractmethod
    async def delete_repository(self, owner: str, repo: str) -> None:
        pass

    @abstractmethod
    async def fork_repository(self, owner: str, repo: str, organization: str | None = None) -> Repository:
        """Fork a repository into the authenticated user's account or an organization."""
        pass

    @abstractmethod
    async def search_repositories(self, query: str, page: int = 1, limit: int = 30) -> list[Repository]:
        pass

    # -- branches --------------------------------------------------------

    @abstractmethod
    async def list_branches(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Branch]:
        pass

    @abstractmethod
    async def get_branch(self, owner: str, repo: str, branch: str) -> Branch:
        pass

    @abstractmethod
    async def create_branch(self, owner: str, repo: str, branch_name: str, from_branch: str) -> Branch:
        """Create ``branch_name`` pointing at the head of ``from_branch``."""
        pass

    @abstractmethod
    async def delete_branch(self, owner: str, repo: str, branch: str) -> None:
        pass

    # -- issues ----------------------------------------------------------

    @abstractmethod
    async def list_issues(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        labels: list[str] | None = None,
        page: int = 1,
        limit: int = 30,
    ) -> list[Issue]:
        """Retrieve issues (never pull requests) from a repository.

        Args:
            state: "open", "closed" or "all"
            labels: Only issues carrying all of these labels
        """
        pass

    @abstractmethod
    async def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        pass

    @abstractmethod
    async def create_issue(self, owner: str, repo: str, title: str, body: str = "") -> Issue:
        pass

    @abstractmethod
    async def update_issue(
        self,
        owner: str,
        repo: str,
        number: int,
        title: str | None = None,
        body: str | None = None,
        state: str | None = None,
    ) -> Issue:
        pass

    @abstractmethod
    async def add_comment(self, owner: str, repo: str, number: int, body: str) -> Comment:
        pass

    # -- pull requests ---------------------------------------------------

    @abstractmethod
    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        page: int = 1,
        limit: int = 30,
    ) -> list[PullRequest]:
        pass

    @abstractmethod
    async def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        pass

    @abstractmethod
    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str = "",
    ) -> PullRequest:
        pass

    @abstractmethod
    async def update_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        title: str | None = None,
        body: str | None = None,
        state: str | None = None,
        base: str | None = None,
    ) -> PullRequest:
        pass

    @abstractmethod
    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        method: MergeMethod = MergeMethod.MERGE,
        message: str | None = None,
    ) -> MergeResult:
        """Merge a pull request.

        Args:
            method: merge, rebase or squash
            message: Optional merge commit message

        Raises:
            httpx.HTTPStatusError: 405/409 when the PR cannot be merged (Gitea)
            GithubException: 405/409 when the PR cannot be merged (GitHub)
        """
        pass

    # -- releases --------------------------------------------------------

    @abstractmethod
    async def list_releases(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Release]:
        pass

    @abstractmethod
    async def get_release(self, owner: str, repo: str, release_id: int) -> Release:
        pass

    @abstractmethod
    async def create_release(
        self,
        owner: str,
        repo: str,
        tag_name: str,
        name: str | None = None,
        body: str = "",
        draft: bool = False,
        prerelease: bool = False,
        target_commitish: str | None = None,
    ) -> Release:
        """Create a release, creating ``tag_name`` at ``target_commitish`` if needed."""
        pass

    @abstractmethod
    async def update_release(
        self,
        owner: str,
        repo: str,
        release_id: int,
        tag_name: str | None = None,
        name: str | None = None,
        body: str | None = None,
        draft: bool | None = None,
        prerelease: bool | None = None,
    ) -> Release:
        pass

    @abstractmethod
    async def delete_release(self, owner: str, repo: str, release_id: int) -> None:
        pass

    # -- tags ------------------------------------------------------------

    @abstractmethod
    async def list_tags(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Tag]:
        pass

    @abstractmethod
    async def get_tag(self, owner: str, repo: str, tag_name: str) -> Tag:
        pass

    @abstractmethod
    async def create_tag(self, owner: str, repo: str, tag_name: str, target: str, message: str = "") -> Tag:
        """Create a tag at ``target`` (branch name or commit SHA).

        A non-empty ``message`` creates an annotated tag.
        """
        pass

    @abstractmethod
    async def delete_tag(self, owner: str, repo: str, tag_name: str) -> None:
        pass

    # -- webhooks --------------------------------------------------------

    @abstractmethod
    async def list_webhooks(self, owner: str, repo: str) -> list[Webhook]:
        pass

    @abstractmethod
    async def get_webhook(self, owner: str, repo: str, hook_id: int) -> Webhook:
        pass

    @abstractmethod
    async def create_webhook(
        self,
        owner: str,
        repo: str,
        url: str,
        events: list[str],
        content_type: str = "json",
        secret: str | None = None,
        active: bool = True,
    ) -> Webhook:
        pass

    @abstractmethod
    async def update_webhook(
        self,
        owner: str,
        repo: str,
        hook_id: int,
        url: str | None = None,
        events: list[str] | None = None,
        content_type: str | None = None,
        secret: str | None = None,
        active: bool | None = None,
    ) -> Webhook:
        pass

    @abstractmethod
    async def delete_webhook(self, owner: str, repo: str, hook_id: int) -> None:
        pass

    # -- branch protection -----------------------------------------------

    @abstractmethod
    async def list_branch_protections(self, owner: str, repo: str) -> list[BranchProtection]:
        pass

    @abstractmethod
    async def get_branch_protection(self, owner: str, repo: str, branch_name: str) -> BranchProtection:
        pass

    @abstractmethod
    async def create_branch_protection(
        self,
        owner: str,
        repo: str,
        branch_name: str,
        required_approvals: int | None = None,
        require_status_checks: bool | None = None,
        status_check_contexts: list[str] | None = None,
        enforce_admins: bool | None = None,
        dismiss_stale_reviews: bool | None = None,
    ) -> BranchProtection:
        """Protect a branch.

        Arguments left as None take the platform's default.
        """
        pass

    @abstractmethod
    async def update_branch_protection(
        self,
        owner: str,
        repo: str,
        branch_name: str,
        required_approvals: int | None = None,
        require_status_checks: bool | None = None,
        status_check_contexts: list[str] | None = None,
        enforce_admins: bool | None = None,
        dismiss_stale_reviews: bool | None = None,
    ) -> BranchProtection:
        """Change an existing protection; arguments left as None are kept."""
        pass

    @abstractmethod
    async def delete_branch_protection(self, owner: str, repo: str, branch_name: str) -> None:
        pass

    # -- files -----------------------------------------------------------

    @abstractmethod
    async def get_file(self, owner: str, repo: str, path: str, ref: str | None = None) -> FileEntry:
        """Fetch one file with its decoded content.

        Args:
            ref: Branch, tag or commit SHA; the default branch when None

        Raises:
            ToolInputError: If ``path`` is a directory
        """
        pass

    @abstractmethod
    async def list_files(self, owner: str, repo: str, path: str = "", ref: str | None = None) -> list[FileEntry]:
        """List the entries of a directory (the repository root for "").

        Entries carry no content.
        """
        pass

    @abstractmethod
    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str | None = None,
    ) -> FileEntry:
        """Commit a new file.

        Args:
            content: File text; providers encode it for transport
            message: Commit message
            branch: Target branch; the default branch when None
        """
        pass

    @abstractmethod
    async def update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        sha: str,
        branch: str | None = None,
    ) -> FileEntry:
        """Replace an existing file.

        ``sha`` is the blob SHA being replaced; the platform rejects the
        commit if the file changed since it was read.
        """
        pass

    @abstractmethod
    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
        branch: str | None = None,
    ) -> None:
        pass

    # -- commits ---------------------------------------------------------

    @abstractmethod
    async def list_commits(
        self,
        owner: str,
        repo: str,
        branch: str | None = None,
        page: int = 1,
        limit: int = 30,
    ) -> list[Commit]:
        """List commits reachable from ``branch`` (the default branch when None), newest first."""
        pass

    @abstractmethod
    async def get_commit(self, owner: str, repo: str, sha: str) -> Commit:
        pass

    # -- misc ------------------------------------------------------------

    @abstractmethod
    def clone_url(self, owner: str, repo: str, authenticated: bool = False) -> str:
        """Build the HTTPS clone URL of a repository.

        Args:
            authenticated: Embed the token as credentials, for use with
                ``git clone``/``git push``. Such URLs must never be logged.
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None
