"""GitHub provider implementation using PyGithub."""

import asyncio
from collections.abc import Callable, Iterable
from itertools import islice
from typing import Any, TypeVar
from urllib.parse import urlsplit, urlunsplit

import structlog
from github import Auth, Github, GithubException  # type: ignore[import-not-found]
from github.Branch import Branch as GHBranch  # type: ignore[import-not-found]
from github.BranchProtection import BranchProtection as GHBranchProtection  # type: ignore[import-not-found]
from github.Commit import Commit as GHCommit  # type: ignore[import-not-found]
from github.ContentFile import ContentFile as GHContentFile  # type: ignore[import-not-found]
from github.GitRelease import GitRelease as GHRelease  # type: ignore[import-not-found]
from github.Hook import Hook as GHHook  # type: ignore[import-not-found]
from github.Issue import Issue as GHIssue  # type: ignore[import-not-found]
from github.IssueComment import IssueComment as GHComment  # type: ignore[import-not-found]
from github.NamedUser import NamedUser as GHUser  # type: ignore[import-not-found]
from github.PullRequest import PullRequest as GHPullRequest  # type: ignore[import-not-found]
from github.Repository import Repository as GHRepository  # type: ignore[import-not-found]

from vcs_mcp.enums import MergeMethod, ProviderKind
from vcs_mcp.exceptions import ToolInputError
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
from vcs_mcp.providers.base import VcsProvider

log = structlog.get_logger(__name__)

T = TypeVar("T")

GITHUB_API_URL = "https://api.github.com"


async def _run_sync(func: Callable[[], T]) -> T:
    """Run a synchronous function in a thread pool.

    This prevents blocking the event loop when calling synchronous
    PyGithub methods. Conversions to domain models happen inside the
    callable too, since PyGithub attributes may lazily trigger requests.
    """
    return await asyncio.to_thread(func)


def _page(items: Iterable[T], page: int, limit: int) -> list[T]:
    start = (page - 1) * limit
    return list(islice(items, start, start + limit))


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class GitHubRestProvider(VcsProvider):
    """GitHub implementation using PyGithub library."""

    kind = ProviderKind.GITHUB

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_URL,
        username: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize GitHub provider.

        Args:
            token: GitHub personal access token or App token
            base_url: GitHub API base URL (for GitHub Enterprise)
            username: Account the token belongs to
            timeout: HTTP timeout in seconds
        """
        self.token = token.strip() if token else token
        self.base_url = base_url.rstrip("/")
        self.username = username
        self._client = Github(auth=Auth.Token(self.token), base_url=self.base_url, timeout=int(timeout))

    async def aclose(self) -> None:
        await _run_sync(self._client.close)

    def _repo(self, owner: str, repo: str) -> GHRepository:
        return self._client.get_repo(f"{owner}/{repo}")

    # -- users -----------------------------------------------------------

    async def get_current_user(self) -> User:
        log.debug("get_current_user", provider="github")
        try:
            return await _run_sync(lambda: self._convert_user(self._client.get_user()))
        except GithubException as e:
            log.error("github_get_current_user_failed", error=str(e))
            raise

    async def get_user(self, username: str) -> User:
        log.info("get_user", username=username)
        return await _run_sync(lambda: self._convert_user(self._client.get_user(username)))

    async def search_users(self, query: str, limit: int = 10) -> list[User]:
        log.info("search_users", query=query)
        return await _run_sync(
            lambda: [self._convert_user(user) for user in islice(self._client.search_users(query), limit)]
        )

    # -- repositories ----------------------------------------------------

    async def list_repositories(
        self,
        username: str | None = None,
        page: int = 1,
        limit: int = 30,
    ) -> list[Repository]:
        log.info("list_repositories", username=username, page=page, limit=limit)

        def _list() -> list[Repository]:
            user = self._client.get_user(username) if username else self._client.get_user()
            return [self._convert_repository(repo) for repo in _page(user.get_repos(), page, limit)]

        try:
            return await _run_sync(_list)
        except GithubException as e:
            log.error("github_list_repositories_failed", error=str(e))
            raise

    async def get_repository(self, owner: str, repo: str) -> Repository:
        log.info("get_repository", owner=owner, repo=repo)
        return await _run_sync(lambda: self._convert_repository(self._repo(owner, repo)))

    async def create_repository(
        self,
        name: str,
        description: str = "",
        private: bool = False,
        auto_init: bool = False,
    ) -> Repository:
        log.info("create_repository", name=name, private=private)
        return await _run_sync(
            lambda: self._convert_repository(
                self._client.get_user().create_repo(
                    name,
                    description=description,
                    private=private,
                    auto_init=auto_init,
                )
            )
        )

    async def update_repository(
        self,
        owner: str,
        repo: str,
        name: str | None = None,
        description: str | None = None,
        private: bool | None = None,
        archived: bool | None = None,
    ) -> Repository:
        log.info("update_repository", owner=owner, repo=repo)
        changes = _drop_none({"name": name, "description": description, "private": private, "archived": archived})

        def _update() -> Repository:
            gh_repo = self._repo(owner, repo)
            gh_repo.edit(**changes)
            return self._convert_repository(gh_repo)

        return await _run_sync(_update)

    async def delete_repository(self, owner: str, repo: str) -> None:
        log.info("delete_repository", owner=owner, repo=repo)
        await _run_sync(lambda: self._repo(owner, repo).delete())

    async def fork_repository(self, owner: str, repo: str, organization: str | None = None) -> Repository:
        log.info("fork_repository", owner=owner, repo=repo, organization=organization)

        def _fork() -> Repository:
            source = self._repo(owner, repo)
            target = self._client.get_organization(organization) if organization else self._client.get_user()
            return self._convert_repository(target.create_fork(source))

        return await _run_sync(_fork)

    async def search_repositories(self, query: str, page: int = 1, limit: int = 30) -> list[Repository]:
        log.info("search_repositories", query=query)
        return await _run_sync(
            lambda: [
                self._convert_repository(repo) for repo in _page(self._client.search_repositories(query), page, limit)
            ]
        )

    # -- branches --------------------------------------------------------

    async def list_branches(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Branch]:
        log.info("list_branches", owner=owner, repo=repo)
        return await _run_sync(
            lambda: [self._convert_branch(b) for b in _page(self._repo(owner, repo).get_branches(), page, limit)]
        )

    async def get_branch(self, owner: str, repo: str, branch: str) -> Branch:
        log.info("get_branch", owner=owner, repo=repo, branch=branch)
        return await _run_sync(lambda: self._convert_branch(self._repo(owner, repo).get_branch(branch)))

    async def create_branch(self, owner: str, repo: str, branch_name: str, from_branch: str) -> Branch:
        log.info("create_branch", owner=owner, repo=repo, branch=branch_name, from_branch=from_branch)

        def _create() -> Branch:
            gh_repo = self._repo(owner, repo)
            sha = gh_repo.get_branch(from_branch).commit.sha
            gh_repo.create_git_ref(ref=f"refs/heads/{branch_name}", sha=sha)
            return Branch(name=branch_name, sha=sha)

        try:
            return await _run_sync(_create)
        except GithubException as e:
            log.error("github_create_branch_failed", branch=branch_name, error=str(e))
            raise

    async def delete_branch(self, owner: str, repo: str, branch: str) -> None:
        log.info("delete_branch", owner=owner, repo=repo, branch=branch)
        await _run_sync(lambda: self._repo(owner, repo).get_git_ref(f"heads/{branch}").delete())

    # -- issues ----------------------------------------------------------

    async def list_issues(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        labels: list[str] | None = None,
        page: int = 1,
        limit: int = 30,
    ) -> list[Issue]:
        log.info("list_issues", owner=owner, repo=repo, state=state, labels=labels)

        def _list() -> list[Issue]:
            gh_issues = self._repo(owner, repo).get_issues(state=state, labels=labels or [])
            # The issues endpoint also returns pull requests
            only_issues = (issue for issue in gh_issues if issue.pull_request is None)
            return [self._convert_issue(issue) for issue in _page(only_issues, page, limit)]

        try:
            return await _run_sync(_list)
        except GithubException as e:
            log.error("github_list_issues_failed", error=str(e))
            raise

    async def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        log.info("get_issue", owner=owner, repo=repo, number=number)
        return await _run_sync(lambda: self._convert_issue(self._repo(owner, repo).get_issue(number)))

    async def create_issue(self, owner: str, repo: str, title: str, body: str = "") -> Issue:
        log.info("create_issue", owner=owner, repo=repo, title=title)
        return await _run_sync(
            lambda: self._convert_issue(self._repo(owner, repo).create_issue(title=title, body=body))
        )

    async def update_issue(
        self,
        owner: str,
        repo: str,
        number: int,
        title: str | None = None,
        body: str | None = None,
        state: str | None = None,
    ) -> Issue:
        log.info("update_issue", owner=owner, repo=repo, number=number, state=state)
        changes = _drop_none({"title": title, "body": body, "state": state})

        def _update() -> Issue:
            gh_issue = self._repo(owner, repo).get_issue(number)
            gh_issue.edit(**changes)
            return self._convert_issue(gh_issue)

        return await _run_sync(_update)

    async def add_comment(self, owner: str, repo: str, number: int, body: str) -> Comment:
        log.info("add_comment", owner=owner, repo=repo, number=number)
        return await _run_sync(
            lambda: self._convert_comment(self._repo(owner, repo).get_issue(number).create_comment(body))
        )

    # -- pull requests ---------------------------------------------------

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        page: int = 1,
        limit: int = 30,
    ) -> list[PullRequest]:
        log.info("list_pull_requests", owner=owner, repo=repo, state=state)
        return await _run_sync(
            lambda: [
                self._convert_pull_request(pr)
                for pr in _page(self._repo(owner, repo).get_pulls(state=state), page, limit)
            ]
        )

    async def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        log.info("get_pull_request", owner=owner, repo=repo, number=number)
        return await _run_sync(lambda: self._convert_pull_request(self._repo(owner, repo).get_pull(number)))

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str = "",
    ) -> PullRequest:
        log.info("create_pull_request", owner=owner, repo=repo, head=head, base=base)
        try:
            return await _run_sync(
                lambda: self._convert_pull_request(
                    self._repo(owner, repo).create_pull(title=title, body=body, head=head, base=base)
                )
            )
        except GithubException as e:
            log.error("github_create_pull_request_failed", head=head, base=base, error=str(e))
            raise

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
        log.info("update_pull_request", owner=owner, repo=repo, number=number, state=state)
        changes = _drop_none({"title": title, "body": body, "state": state, "base": base})

        def _update() -> PullRequest:
            gh_pr = self._repo(owner, repo).get_pull(number)
            gh_pr.edit(**changes)
            return self._convert_pull_request(gh_pr)

        return await _run_sync(_update)

    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        method: MergeMethod = MergeMethod.MERGE,
        message: str | None = None,
    ) -> MergeResult:
        log.info("merge_pull_request", owner=owner, repo=repo, number=number, method=str(method))
        kwargs = _drop_none({"merge_method": MergeMethod(method).value, "commit_message": message})

        def _merge() -> MergeResult:
            status = self._repo(owner, repo).get_pull(number).merge(**kwargs)
            return MergeResult(merged=status.merged, message=status.message or "", sha=status.sha)

        try:
            return await _run_sync(_merge)
        except GithubException as e:
            log.error("github_merge_pull_request_failed", number=number, error=str(e))
            raise

    # -- releases --------------------------------------------------------

    async def list_releases(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Release]:
        log.info("list_releases", owner=owner, repo=repo)
        return await _run_sync(
            lambda: [self._convert_release(r) for r in _page(self._repo(owner, repo).get_releases(), page, limit)]
        )

    async def get_release(self, owner: str, repo: str, release_id: int) -> Release:
        log.info("get_release", owner=owner, repo=repo, release_id=release_id)
        return await _run_sync(lambda: self._convert_release(self._repo(owner, repo).get_release(release_id)))

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
        log.info("create_release", owner=owner, repo=repo, tag=tag_name)
        extra = _drop_none({"target_commitish": target_commitish})
        return await _run_sync(
            lambda: self._convert_release(
                self._repo(owner, repo).create_git_release(
                    tag_name,
                    name or tag_name,
                    body,
                    draft=draft,
                    prerelease=prerelease,
                    **extra,
                )
            )
        )

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
        log.info("update_release", owner=owner, repo=repo, release_id=release_id)

        def _update() -> Release:
            release = self._repo(owner, repo).get_release(release_id)
            updated = release.update_release(
                name if name is not None else release.title,
                body if body is not None else (release.body or ""),
                draft=draft if draft is not None else release.draft,
                prerelease=prerelease if prerelease is not None else release.prerelease,
                **_drop_none({"tag_name": tag_name}),
            )
            return self._convert_release(updated)

        return await _run_sync(_update)

    async def delete_release(self, owner: str, repo: str, release_id: int) -> None:
        log.info("delete_release", owner=owner, repo=repo, release_id=release_id)
        await _run_sync(lambda: self._repo(owner, repo).get_release(release_id).delete_release())

    # -- tags ------------------------------------------------------------

    async def list_tags(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Tag]:
        log.info("list_tags", owner=owner, repo=repo)
        return await _run_sync(
            lambda: [
                Tag(name=tag.name, sha=tag.commit.sha) for tag in _page(self._repo(owner, repo).get_tags(), page, limit)
            ]
        )

    async def get_tag(self, owner: str, repo: str, tag_name: str) -> Tag:
        log.info("get_tag", owner=owner, repo=repo, tag=tag_name)

        def _get() -> Tag:
            gh_repo = self._repo(owner, repo)
            ref = gh_repo.get_git_ref(f"tags/{tag_name}")
            if ref.object.type == "tag":
                annotated = gh_repo.get_git_tag(ref.object.sha)
                return Tag(name=tag_name, sha=annotated.object.sha, message=annotated.message.strip())
            return Tag(name=tag_name, sha=ref.object.sha)

        return await _run_sync(_get)

    async def create_tag(self, owner: str, repo: str, tag_name: str, target: str, message: str = "") -> Tag:
        log.info("create_tag", owner=owner, repo=repo, tag=tag_name, target=target)

        def _create() -> Tag:
            gh_repo = self._repo(owner, repo)
            sha = gh_repo.get_commit(target).sha
            ref_sha = sha
            if message:
                ref_sha = gh_repo.create_git_tag(tag=tag_name, message=message, object=sha, type="commit").sha
            gh_repo.create_git_ref(ref=f"refs/tags/{tag_name}", sha=ref_sha)
            return Tag(name=tag_name, sha=sha, message=message)

        return await _run_sync(_create)

    async def delete_tag(self, owner: str, repo: str, tag_name: str) -> None:
        log.info("delete_tag", owner=owner, repo=repo, tag=tag_name)
        await _run_sync(lambda: self._repo(owner, repo).get_git_ref(f"tags/{tag_name}").delete())

    # -- webhooks --------------------------------------------------------

    async def list_webhooks(self, owner: str, repo: str) -> list[Webhook]:
        log.info("list_webhooks", owner=owner, repo=repo)
        return await _run_sync(lambda: [self._convert_webhook(h) for h in self._repo(owner, repo).get_hooks()])

    async def get_webhook(self, owner: str, repo: str, hook_id: int) -> Webhook:
        log.info("get_webhook", owner=owner, repo=repo, hook_id=hook_id)
        return await _run_sync(lambda: self._convert_webhook(self._repo(owner, repo).get_hook(hook_id)))

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
        log.info("create_webhook", owner=owner, repo=repo, events=events)
        config = _drop_none({"url": url, "content_type": content_type, "secret": secret})
        return await _run_sync(
            lambda: self._convert_webhook(
                self._repo(owner, repo).create_hook("web", config, events=events, active=active)
            )
        )

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
        log.info("update_webhook", owner=owner, repo=repo, hook_id=hook_id)

        def _update() -> Webhook:
            hook = self._repo(owner, repo).get_hook(hook_id)
            config = {**hook.config, **_drop_none({"url": url, "content_type": content_type, "secret": secret})}
            hook.edit(
                "web",
                config,
                events=events if events is not None else hook.events,
                active=active if active is not None else hook.active,
            )
            return self._convert_webhook(hook)

        return await _run_sync(_update)

    async def delete_webhook(self, owner: str, repo: str, hook_id: int) -> None:
        log.info("delete_webhook", owner=owner, repo=repo, hook_id=hook_id)
        await _run_sync(lambda: self._repo(owner, repo).get_hook(hook_id).delete())

    # -- branch protection -----------------------------------------------

    async def list_branch_protections(self, owner: str, repo: str) -> list[BranchProtection]:
        log.info("list_branch_protections", owner=owner, repo=repo)

        def _list() -> list[BranchProtection]:
            protected = [b for b in self._repo(owner, repo).get_branches() if b.protected]
            return [self._convert_protection(b.name, b.get_protection()) for b in protected]

        return await _run_sync(_list)

    async def get_branch_protection(self, owner: str, repo: str, branch_name: str) -> BranchProtection:
        log.info("get_branch_protection", owner=owner, repo=repo, branch=branch_name)
        return await _run_sync(
            lambda: self._convert_protection(
                branch_name,
                self._repo(owner, repo).get_branch(branch_name).get_protection(),
            )
        )

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
        log.info("create_branch_protection", owner=owner, repo=repo, branch=branch_name)
        rule = BranchProtection(
            branch_name=branch_name,
            required_approvals=required_approvals or 0,
            require_status_checks=bool(require_status_checks),
            status_check_contexts=status_check_contexts or [],
            enforce_admins=bool(enforce_admins),
            dismiss_stale_reviews=bool(dismiss_stale_reviews),
        )
        return await _run_sync(lambda: self._apply_protection(self._repo(owner, repo).get_branch(branch_name), rule))

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
        log.info("update_branch_protection", owner=owner, repo=repo, branch=branch_name)

        def _update() -> BranchProtection:
            # GitHub replaces the whole protection, so merge onto the current rule
            branch = self._repo(owner, repo).get_branch(branch_name)
            current = self._convert_protection(branch_name, branch.get_protection())
            if required_approvals is not None:
                current.required_approvals = required_approvals
            if require_status_checks is not None:
                current.require_status_checks = require_status_checks
            if status_check_contexts is not None:
                current.status_check_contexts = status_check_contexts
            if enforce_admins is not None:
                current.enforce_admins = enforce_admins
            if dismiss_stale_reviews is not None:
                current.dismiss_stale_reviews = dismiss_stale_reviews
            return self._apply_protection(branch, current)

        return await _run_sync(_update)

    async def delete_branch_protection(self, owner: str, repo: str, branch_name: str) -> None:
        log.info("delete_branch_protection", owner=owner, repo=repo, branch=branch_name)
        await _run_sync(lambda: self._repo(owner, repo).get_branch(branch_name).remove_protection())

    def _apply_protection(self, branch: GHBranch, rule: BranchProtection) -> BranchProtection:
        kwargs: dict[str, Any] = {
            "enforce_admins": rule.enforce_admins,
            "dismiss_stale_reviews": rule.dismiss_stale_reviews,
            "required_approving_review_count": rule.required_approvals,
        }
        if rule.require_status_checks:
            kwargs["strict"] = True
            kwargs["contexts"] = rule.status_check_contexts
        return self._convert_protection(branch.name, branch.edit_protection(**kwargs))

    # -- files -----------------------------------------------------------

    async def get_file(self, owner: str, repo: str, path: str, ref: str | None = None) -> FileEntry:
        log.info("get_file", owner=owner, repo=repo, path=path, ref=ref)

        def _get() -> FileEntry:
            contents = self._repo(owner, repo).get_contents(path.strip("/"), **_drop_none({"ref": ref}))
            if isinstance(contents, list):
                raise ToolInputError(f"'{path}' is a directory; use the list action")
            return self._convert_file(contents, with_content=True)

        return await _run_sync(_get)

    async def list_files(self, owner: str, repo: str, path: str = "", ref: str | None = None) -> list[FileEntry]:
        log.info("list_files", owner=owner, repo=repo, path=path, ref=ref)

        def _list() -> list[FileEntry]:
            contents = self._repo(owner, repo).get_contents(path.strip("/"), **_drop_none({"ref": ref}))
            if not isinstance(contents, list):
                contents = [contents]
            return [self._convert_file(item) for item in contents]

        return await _run_sync(_list)

    async def create_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str | None = None,
    ) -> FileEntry:
        log.info("create_file", owner=owner, repo=repo, path=path, branch=branch)

        def _create() -> FileEntry:
            result = self._repo(owner, repo).create_file(
                path.strip("/"), message, content, **_drop_none({"branch": branch})
            )
            return self._convert_file(result["content"])

        return await _run_sync(_create)

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
        log.info("update_file", owner=owner, repo=repo, path=path, branch=branch)

        def _update() -> FileEntry:
            result = self._repo(owner, repo).update_file(
                path.strip("/"), message, content, sha, **_drop_none({"branch": branch})
            )
            return self._convert_file(result["content"])

        return await _run_sync(_update)

    async def delete_file(
        self,
        owner: str,
        repo: str,
        path: str,
        message: str,
        sha: str,
        branch: str | None = None,
    ) -> None:
        log.info("delete_file", owner=owner, repo=repo, path=path, branch=branch)
        await _run_sync(
            lambda: self._repo(owner, repo).delete_file(path.strip("/"), message, sha, **_drop_none({"branch": branch}))
        )

    # -- commits ---------------------------------------------------------

    async def list_commits(
        self,
        owner: str,
        repo: str,
        branch: str | None = None,
        page: int = 1,
        limit: int = 30,
    ) -> list[Commit]:
        log.info("list_commits", owner=owner, repo=repo, branch=branch)
        return await _run_sync(
            lambda: [
                self._convert_commit(commit)
                for commit in _page(self._repo(owner, repo).get_commits(**_drop_none({"sha": branch})), page, limit)
            ]
        )

    async def get_commit(self, owner: str, repo: str, sha: str) -> Commit:
        log.info("get_commit", owner=owner, repo=repo, sha=sha)
        return await _run_sync(lambda: self._convert_commit(self._repo(owner, repo).get_commit(sha)))

    # -- misc ------------------------------------------------------------

    def clone_url(self, owner: str, repo: str, authenticated: bool = False) -> str:
        parts = urlsplit(self.base_url)
        host = parts.netloc
        if host == "api.github.com":
            host = "github.com"
        # GitHub Enterprise serves the API under /api/v3 on the web host
        path = parts.path.removesuffix("/api/v3")
        if authenticated:
            host = f"x-access-token:{self.token}@{host}"
        return urlunsplit((parts.scheme, host, f"{path}/{owner}/{repo}.git", "", ""))

    # -- conversion ------------------------------------------------------

    def _convert_user(self, gh_user: GHUser) -> User:
        """Convert GitHub NamedUser/AuthenticatedUser to our User model."""
        return User(
            id=gh_user.id,
            login=gh_user.login,
            full_name=gh_user.name or "",
            email=gh_user.email or "",
            url=gh_user.html_url or "",
            avatar_url=gh_user.avatar_url or "",
        )

    def _convert_repository(self, gh_repo: GHRepository) -> Repository:
        """Convert GitHub Repository to our Repository model."""
        return Repository(
            id=gh_repo.id,
            name=gh_repo.name,
            full_name=gh_repo.full_name,
            owner=gh_repo.owner.login if gh_repo.owner else "",
            description=gh_repo.description or "",
            private=gh_repo.private,
            fork=gh_repo.fork,
            archived=gh_repo.archived,
            default_branch=gh_repo.default_branch or "main",
            url=gh_repo.html_url,
            clone_url=gh_repo.clone_url,
            created_at=gh_repo.created_at,
            updated_at=gh_repo.updated_at,
        )

    def _convert_branch(self, gh_branch: GHBranch) -> Branch:
        """Convert GitHub Branch to our Branch model."""
        return Branch(
            name=gh_branch.name,
            sha=gh_branch.commit.sha,
            protected=gh_branch.protected,
        )

    def _convert_issue(self, gh_issue: GHIssue) -> Issue:
        """Convert GitHub Issue to our Issue model."""
        state = IssueState.CLOSED if gh_issue.state == "closed" else IssueState.OPEN
        return Issue(
            id=gh_issue.id,
            number=gh_issue.number,
            title=gh_issue.title,
            body=gh_issue.body or "",
            state=state,
            labels=[label.name for label in gh_issue.labels],
            created_at=gh_issue.created_at,
            updated_at=gh_issue.updated_at,
            author=gh_issue.user.login if gh_issue.user else "unknown",
            url=gh_issue.html_url,
        )

    def _convert_comment(self, gh_comment: GHComment) -> Comment:
        """Convert GitHub Comment to our Comment model."""
        return Comment(
            id=gh_comment.id,
            body=gh_comment.body,
            author=gh_comment.user.login if gh_comment.user else "unknown",
            created_at=gh_comment.created_at,
        )

    def _convert_pull_request(self, gh_pr: GHPullRequest) -> PullRequest:
        """Convert GitHub PullRequest to our PullRequest model."""
        return PullRequest(
            id=gh_pr.id,
            number=gh_pr.number,
            title=gh_pr.title,
            body=gh_pr.body or "",
            state=gh_pr.state,
            head=gh_pr.head.ref,
            base=gh_pr.base.ref,
            url=gh_pr.html_url,
            created_at=gh_pr.created_at,
            author=gh_pr.user.login if gh_pr.user else "",
            mergeable=bool(gh_pr.mergeable) if gh_pr.mergeable is not None else True,
            merged=bool(gh_pr.merged),
        )

    def _convert_release(self, gh_release: GHRelease) -> Release:
        return Release(
            id=gh_release.id,
            tag_name=gh_release.tag_name,
            name=gh_release.title or gh_release.tag_name,
            body=gh_release.body or "",
            draft=gh_release.draft,
            prerelease=gh_release.prerelease,
            target_commitish=gh_release.target_commitish or "",
            url=gh_release.html_url,
            author=gh_release.author.login if gh_release.author else "",
            created_at=gh_release.created_at,
            published_at=gh_release.published_at,
        )

    def _convert_webhook(self, gh_hook: GHHook) -> Webhook:
        config = gh_hook.config or {}
        return Webhook(
            id=gh_hook.id,
            url=config.get("url", ""),
            events=list(gh_hook.events or []),
            active=gh_hook.active,
            content_type=config.get("content_type", "json"),
            created_at=gh_hook.created_at,
        )

    def _convert_protection(self, branch_name: str, protection: GHBranchProtection) -> BranchProtection:
        """Convert GitHub BranchProtection to our BranchProtection model.

        Missing sub-objects (no review or status-check requirement) map to
        the disabled defaults.
        """
        checks = protection.required_status_checks
        reviews = protection.required_pull_request_reviews
        return BranchProtection(
            branch_name=branch_name,
            required_approvals=reviews.required_approving_review_count if reviews else 0,
            require_status_checks=checks is not None,
            status_check_contexts=list(checks.contexts) if checks else [],
            enforce_admins=bool(protection.enforce_admins),
            dismiss_stale_reviews=bool(reviews.dismiss_stale_reviews) if reviews else False,
        )

    def _convert_file(self, gh_content: GHContentFile, with_content: bool = False) -> FileEntry:
        """Convert GitHub ContentFile to our FileEntry model.

        ``decoded_content`` is only read for single-file fetches. Binary
        files keep their base64 text.
        """
        content = None
        if with_content and gh_content.content is not None:
            raw = gh_content.decoded_content
            try:
                content = raw.decode("utf-8")
            except UnicodeDecodeError:
                content = gh_content.content
        return FileEntry(
            name=gh_content.name,
            path=gh_content.path,
            sha=gh_content.sha,
            type=gh_content.type,
            size=gh_content.size or 0,
            url=gh_content.html_url or "",
            download_url=gh_content.download_url or "",
            content=content,
        )

    def _convert_commit(self, gh_commit: GHCommit) -> Commit:
        author = gh_commit.commit.author
        return Commit(
            sha=gh_commit.sha,
            message=gh_commit.commit.message,
            author=author.name if author else "",
            author_email=author.email if author else "",
            authored_at=author.date if author else None,
            url=gh_commit.html_url or "",
        )
