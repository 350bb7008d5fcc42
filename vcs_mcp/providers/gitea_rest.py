"""Gitea provider implementation using direct REST API calls."""

import base64
import binascii
from typing import Any
from urllib.parse import quote, urlsplit, urlunsplit

import httpx
import structlog

from vcs_mcp.enums import MergeMethod, ProviderKind
from vcs_mcp.exceptions import ExternalServiceError, ToolInputError
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
    parse_timestamp,
)
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.utils.connection_pool import HTTPConnectionPool

log = structlog.get_logger(__name__)


def normalize_api_url(base_url: str) -> str:
    """Return the ``/api/v1`` root for a Gitea URL.

    Accepts the web root, the ``/api`` root or the full ``/api/v1`` root,
    with or without a trailing slash.

    Example:
        >>> normalize_api_url("https://gitea.example.com/")
        'https://gitea.example.com/api/v1'
        >>> normalize_api_url("https://gitea.example.com/api")
        'https://gitea.example.com/api/v1'
    """
    url = base_url.rstrip("/")
    if url.endswith("/api/v1"):
        return url
    if url.endswith("/api"):
        return f"{url}/v1"
    return f"{url}/api/v1"


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _decode_content(data: dict[str, Any]) -> str | None:
    """Return the text of a contents API file object.

    Bodies that are not valid base64 UTF-8 (binary files) are returned as
    the raw encoded string.
    """
    content = data.get("content")
    if content is None or data.get("encoding") != "base64":
        return content
    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return content


def _decode(response: httpx.Response) -> Any:
    """Parse a JSON body, failing with ExternalServiceError when it is not JSON."""
    try:
        return response.json()
    except ValueError as e:
        raise ExternalServiceError(
            "Gitea returned a response that is not JSON (is the URL pointing at the Gitea API?)",
            status_code=response.status_code,
            response_text=response.text[:500],
        ) from e


class GiteaRestProvider(VcsProvider):
    """Gitea implementation using direct REST API calls."""

    kind = ProviderKind.GITEA

    def __init__(
        self,
        base_url: str,
        token: str,
        username: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize Gitea provider.

        Args:
            base_url: Gitea URL (web root, ``/api`` or ``/api/v1``)
            token: API token
            username: Account the token belongs to, used for clone credentials
            timeout: HTTP timeout in seconds
        """
        self.api_base = normalize_api_url(base_url)
        self.base_url = self.api_base[: -len("/api/v1")]
        self.token = token.strip() if token else token
        self.username = username
        self._pool = HTTPConnectionPool(
            base_url=self.api_base,
            timeout=timeout,
            headers={
                "Authorization": f"token {self.token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def aclose(self) -> None:
        await self._pool.close()

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._pool.get(path, params=_drop_none(params or {}))
        response.raise_for_status()
        return _decode(response)

    async def _send_json(self, method: str, path: str, data: dict[str, Any]) -> Any:
        send = getattr(self._pool, method)
        response = await send(path, json=data)
        response.raise_for_status()
        if not response.content:
            return None
        return _decode(response)

    async def _delete(self, path: str, data: dict[str, Any] | None = None) -> None:
        if data is None:
            response = await self._pool.delete(path)
        else:
            response = await self._pool.delete(path, json=data)
        response.raise_for_status()

    # -- users -----------------------------------------------------------

    async def get_current_user(self) -> User:
        log.debug("get_current_user", provider="gitea")
        return self._parse_user(await self._get_json("/user"))

    async def get_user(self, username: str) -> User:
        log.info("get_user", username=username)
        return self._parse_user(await self._get_json(f"/users/{username}"))

    async def search_users(self, query: str, limit: int = 10) -> list[User]:
        log.info("search_users", query=query)
        result = await self._get_json("/users/search", params={"q": query, "limit": limit})
        return [self._parse_user(item) for item in result.get("data", [])]

    # -- repositories ----------------------------------------------------

    async def list_repositories(
        self,
        username: str | None = None,
        page: int = 1,
        limit: int = 30,
    ) -> list[Repository]:
        log.info("list_repositories", username=username, page=page, limit=limit)
        path = f"/users/{username}/repos" if username else "/user/repos"
        data = await self._get_json(path, params={"page": page, "limit": limit})
        return [self._parse_repository(item) for item in data]

    async def get_repository(self, owner: str, repo: str) -> Repository:
        log.info("get_repository", owner=owner, repo=repo)
        return self._parse_repository(await self._get_json(f"/repos/{owner}/{repo}"))

    async def create_repository(
        self,
        name: str,
        description: str = "",
        private: bool = False,
        auto_init: bool = False,
    ) -> Repository:
        log.info("create_repository", name=name, private=private)
        data = await self._send_json(
            "post",
            "/user/repos",
            {"name": name, "description": description, "private": private, "auto_init": auto_init},
        )
        return self._parse_repository(data)

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
        payload = _drop_none({"name": name, "description": description, "private": private, "archived": archived})
        data = await self._send_json("patch", f"/repos/{owner}/{repo}", payload)
        return self._parse_repository(data)

    async def delete_repository(self, owner: str, repo: str) -> None:
        log.info("delete_repository", owner=owner, repo=repo)
        await self._delete(f"/repos/{owner}/{repo}")

    async def fork_repository(self, owner: str, repo: str, organization: str | None = None) -> Repository:
        log.info("fork_repository", owner=owner, repo=repo, organization=organization)
        data = await self._send_json("post", f"/repos/{owner}/{repo}/forks", _drop_none({"organization": organization}))
        return self._parse_repository(data)

    async def search_repositories(self, query: str, page: int = 1, limit: int = 30) -> list[Repository]:
        log.info("search_repositories", query=query)
        result = await self._get_json("/repos/search", params={"q": query, "page": page, "limit": limit})
        return [self._parse_repository(item) for item in result.get("data", [])]

    # -- branches --------------------------------------------------------

    async def list_branches(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Branch]:
        log.info("list_branches", owner=owner, repo=repo)
        data = await self._get_json(f"/repos/{owner}/{repo}/branches", params={"page": page, "limit": limit})
        return [self._parse_branch(item) for item in data]

    async def get_branch(self, owner: str, repo: str, branch: str) -> Branch:
        log.info("get_branch", owner=owner, repo=repo, branch=branch)
        return self._parse_branch(await self._get_json(f"/repos/{owner}/{repo}/branches/{branch}"))

    async def create_branch(self, owner: str, repo: str, branch_name: str, from_branch: str) -> Branch:
        log.info("create_branch", owner=owner, repo=repo, branch=branch_name, from_branch=from_branch)
        data = await self._send_json(
            "post",
            f"/repos/{owner}/{repo}/branches",
            {"new_branch_name": branch_name, "old_branch_name": from_branch},
        )
        return self._parse_branch(data)

    async def delete_branch(self, owner: str, repo: str, branch: str) -> None:
        log.info("delete_branch", owner=owner, repo=repo, branch=branch)
        await self._delete(f"/repos/{owner}/{repo}/branches/{branch}")

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
        params: dict[str, Any] = {"state": state, "type": "issues", "page": page, "limit": limit}
        if labels:
            params["labels"] = ",".join(labels)
        data = await self._get_json(f"/repos/{owner}/{repo}/issues", params=params)
        return [self._parse_issue(item) for item in data]

    async def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        log.info("get_issue", owner=owner, repo=repo, number=number)
        return self._parse_issue(await self._get_json(f"/repos/{owner}/{repo}/issues/{number}"))

    async def create_issue(self, owner: str, repo: str, title: str, body: str = "") -> Issue:
        log.info("create_issue", owner=owner, repo=repo, title=title)
        data = await self._send_json("post", f"/repos/{owner}/{repo}/issues", {"title": title, "body": body})
        return self._parse_issue(data)

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
        payload = _drop_none({"title": title, "body": body, "state": state})
        data = await self._send_json("patch", f"/repos/{owner}/{repo}/issues/{number}", payload)
        return self._parse_issue(data)

    async def add_comment(self, owner: str, repo: str, number: int, body: str) -> Comment:
        log.info("add_comment", owner=owner, repo=repo, number=number)
        data = await self._send_json("post", f"/repos/{owner}/{repo}/issues/{number}/comments", {"body": body})
        return self._parse_comment(data)

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
        data = await self._get_json(
            f"/repos/{owner}/{repo}/pulls",
            params={"state": state, "page": page, "limit": limit},
        )
        return [self._parse_pull_request(item) for item in data]

    async def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        log.info("get_pull_request", owner=owner, repo=repo, number=number)
        return self._parse_pull_request(await self._get_json(f"/repos/{owner}/{repo}/pulls/{number}"))

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
        data = await self._send_json(
            "post",
            f"/repos/{owner}/{repo}/pulls",
            {"title": title, "head": head, "base": base, "body": body},
        )
        return self._parse_pull_request(data)

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
        payload = _drop_none({"title": title, "body": body, "state": state, "base": base})
        data = await self._send_json("patch", f"/repos/{owner}/{repo}/pulls/{number}", payload)
        return self._parse_pull_request(data)

    async def merge_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        method: MergeMethod = MergeMethod.MERGE,
        message: str | None = None,
    ) -> MergeResult:
        log.info("merge_pull_request", owner=owner, repo=repo, number=number, method=str(method))
        payload = _drop_none({"Do": MergeMethod(method).value, "MergeMessageField": message})
        await self._send_json("post", f"/repos/{owner}/{repo}/pulls/{number}/merge", payload)
        return MergeResult(merged=True, message=f"Pull request #{number} merged")

    # -- releases --------------------------------------------------------

    async def list_releases(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Release]:
        log.info("list_releases", owner=owner, repo=repo)
        data = await self._get_json(f"/repos/{owner}/{repo}/releases", params={"page": page, "limit": limit})
        return [self._parse_release(item) for item in data]

    async def get_release(self, owner: str, repo: str, release_id: int) -> Release:
        log.info("get_release", owner=owner, repo=repo, release_id=release_id)
        return self._parse_release(await self._get_json(f"/repos/{owner}/{repo}/releases/{release_id}"))

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
        payload = _drop_none(
            {
                "tag_name": tag_name,
                "name": name or tag_name,
                "body": body,
                "draft": draft,
                "prerelease": prerelease,
                "target_commitish": target_commitish,
            }
        )
        data = await self._send_json("post", f"/repos/{owner}/{repo}/releases", payload)
        return self._parse_release(data)

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
        payload = _drop_none(
            {"tag_name": tag_name, "name": name, "body": body, "draft": draft, "prerelease": prerelease}
        )
        data = await self._send_json("patch", f"/repos/{owner}/{repo}/releases/{release_id}", payload)
        return self._parse_release(data)

    async def delete_release(self, owner: str, repo: str, release_id: int) -> None:
        log.info("delete_release", owner=owner, repo=repo, release_id=release_id)
        await self._delete(f"/repos/{owner}/{repo}/releases/{release_id}")

    # -- tags ------------------------------------------------------------

    async def list_tags(self, owner: str, repo: str, page: int = 1, limit: int = 30) -> list[Tag]:
        log.info("list_tags", owner=owner, repo=repo)
        data = await self._get_json(f"/repos/{owner}/{repo}/tags", params={"page": page, "limit": limit})
        return [self._parse_tag(item) for item in data]

    async def get_tag(self, owner: str, repo: str, tag_name: str) -> Tag:
        log.info("get_tag", owner=owner, repo=repo, tag=tag_name)
        return self._parse_tag(await self._get_json(f"/repos/{owner}/{repo}/tags/{tag_name}"))

    async def create_tag(self, owner: str, repo: str, tag_name: str, target: str, message: str = "") -> Tag:
        log.info("create_tag", owner=owner, repo=repo, tag=tag_name, target=target)
        data = await self._send_json(
            "post",
            f"/repos/{owner}/{repo}/tags",
            {"tag_name": tag_name, "target": target, "message": message},
        )
        return self._parse_tag(data)

    async def delete_tag(self, owner: str, repo: str, tag_name: str) -> None:
        log.info("delete_tag", owner=owner, repo=repo, tag=tag_name)
        await self._delete(f"/repos/{owner}/{repo}/tags/{tag_name}")

    # -- webhooks --------------------------------------------------------

    async def list_webhooks(self, owner: str, repo: str) -> list[Webhook]:
        log.info("list_webhooks", owner=owner, repo=repo)
        data = await self._get_json(f"/repos/{owner}/{repo}/hooks")
        return [self._parse_webhook(item) for item in data]

    async def get_webhook(self, owner: str, repo: str, hook_id: int) -> Webhook:
        log.info("get_webhook", owner=owner, repo=repo, hook_id=hook_id)
        return self._parse_webhook(await self._get_json(f"/repos/{owner}/{repo}/hooks/{hook_id}"))

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
        payload = {
            "type": "gitea",
            "config": _drop_none({"url": url, "content_type": content_type, "secret": secret}),
            "events": events,
            "active": active,
        }
        data = await self._send_json("post", f"/repos/{owner}/{repo}/hooks", payload)
        return self._parse_webhook(data)

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
        config = _drop_none({"url": url, "content_type": content_type, "secret": secret})
        payload = _drop_none({"config": config or None, "events": events, "active": active})
        data = await self._send_json("patch", f"/repos/{owner}/{repo}/hooks/{hook_id}", payload)
        return self._parse_webhook(data)

    async def delete_webhook(self, owner: str, repo: str, hook_id: int) -> None:
        log.info("delete_webhook", owner=owner, repo=repo, hook_id=hook_id)
        await self._delete(f"/repos/{owner}/{repo}/hooks/{hook_id}")

    # -- branch protection -----------------------------------------------

    async def list_branch_protections(self, owner: str, repo: str) -> list[BranchProtection]:
        log.info("list_branch_protections", owner=owner, repo=repo)
        data = await self._get_json(f"/repos/{owner}/{repo}/branch_protections")
        return [self._parse_branch_protection(item) for item in data]

    async def get_branch_protection(self, owner: str, repo: str, branch_name: str) -> BranchProtection:
        log.info("get_branch_protection", owner=owner, repo=repo, branch=branch_name)
        data = await self._get_json(f"/repos/{owner}/{repo}/branch_protections/{quote(branch_name, safe='')}")
        return self._parse_branch_protection(data)

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
        payload = {
            "branch_name": branch_name,
            "rule_name": branch_name,
            **self._protection_payload(
                required_approvals,
                require_status_checks,
                status_check_contexts,
                enforce_admins,
                dismiss_stale_reviews,
            ),
        }
        data = await self._send_json("post", f"/repos/{owner}/{repo}/branch_protections", payload)
        return self._parse_branch_protection(data)

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
        payload = self._protection_payload(
            required_approvals,
            require_status_checks,
            status_check_contexts,
            enforce_admins,
            dismiss_stale_reviews,
        )
        data = await self._send_json(
            "patch",
            f"/repos/{owner}/{repo}/branch_protections/{quote(branch_name, safe='')}",
            payload,
        )
        return self._parse_branch_protection(data)

    async def delete_branch_protection(self, owner: str, repo: str, branch_name: str) -> None:
        log.info("delete_branch_protection", owner=owner, repo=repo, branch=branch_name)
        await self._delete(f"/repos/{owner}/{repo}/branch_protections/{quote(branch_name, safe='')}")

    @staticmethod
    def _protection_payload(
        required_approvals: int | None,
        require_status_checks: bool | None,
        status_check_contexts: list[str] | None,
        enforce_admins: bool | None,
        dismiss_stale_reviews: bool | None,
    ) -> dict[str, Any]:
        """Map normalized protection settings onto Gitea's field names.

        Field mappings:
            - required_approvals -> required_approvals
            - require_status_checks -> enable_status_check
            - status_check_contexts -> status_check_contexts
            - enforce_admins -> block_admin_merge_override
            - dismiss_stale_reviews -> dismiss_stale_approvals
        """
        return _drop_none(
            {
                "required_approvals": required_approvals,
                "enable_status_check": require_status_checks,
                "status_check_contexts": status_check_contexts,
                "block_admin_merge_override": enforce_admins,
                "dismiss_stale_approvals": dismiss_stale_reviews,
            }
        )

    # -- files -----------------------------------------------------------

    @staticmethod
    def _contents_path(owner: str, repo: str, path: str) -> str:
        path = path.strip("/")
        if not path:
            return f"/repos/{owner}/{repo}/contents"
        return f"/repos/{owner}/{repo}/contents/{quote(path)}"

    async def get_file(self, owner: str, repo: str, path: str, ref: str | None = None) -> FileEntry:
        log.info("get_file", owner=owner, repo=repo, path=path, ref=ref)
        data = await self._get_json(self._contents_path(owner, repo, path), params={"ref": ref})
        if isinstance(data, list):
            raise ToolInputError(f"'{path}' is a directory; use the list action")
        return self._parse_file(data)

    async def list_files(self, owner: str, repo: str, path: str = "", ref: str | None = None) -> list[FileEntry]:
        log.info("list_files", owner=owner, repo=repo, path=path, ref=ref)
        data = await self._get_json(self._contents_path(owner, repo, path), params={"ref": ref})
        # a file path yields a single object rather than a listing
        if isinstance(data, dict):
            data = [data]
        return [self._parse_file({**item, "content": None}) for item in data]

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
        payload = _drop_none({"content": _encode_content(content), "message": message, "branch": branch})
        data = await self._send_json("post", self._contents_path(owner, repo, path), payload)
        return self._parse_file(data["content"])

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
        payload = _drop_none({"content": _encode_content(content), "message": message, "sha": sha, "branch": branch})
        data = await self._send_json("put", self._contents_path(owner, repo, path), payload)
        return self._parse_file(data["content"])

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
        payload = _drop_none({"message": message, "sha": sha, "branch": branch})
        await self._delete(self._contents_path(owner, repo, path), payload)

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
        data = await self._get_json(
            f"/repos/{owner}/{repo}/commits",
            params={"sha": branch, "page": page, "limit": limit},
        )
        return [self._parse_commit(item) for item in data]

    async def get_commit(self, owner: str, repo: str, sha: str) -> Commit:
        log.info("get_commit", owner=owner, repo=repo, sha=sha)
        return self._parse_commit(await self._get_json(f"/repos/{owner}/{repo}/git/commits/{sha}"))

    # -- misc ------------------------------------------------------------

    def clone_url(self, owner: str, repo: str, authenticated: bool = False) -> str:
        parts = urlsplit(self.base_url)
        netloc = parts.netloc
        if authenticated:
            credentials = f"{quote(self.username, safe='')}:{self.token}" if self.username else self.token
            netloc = f"{credentials}@{netloc}"
        return urlunsplit((parts.scheme, netloc, f"{parts.path}/{owner}/{repo}.git", "", ""))

    # -- parsing ---------------------------------------------------------

    @staticmethod
    def _parse_user(data: dict[str, Any]) -> User:
        """Parse a Gitea user object.

        Gitea reports the account name as ``login`` and, in older releases
        and some admin endpoints, only as ``username``.
        """
        return User(
            id=data.get("id", 0),
            login=data.get("login") or data.get("username", ""),
            full_name=data.get("full_name", ""),
            email=data.get("email", ""),
            url=data.get("html_url", ""),
            avatar_url=data.get("avatar_url", ""),
        )

    def _parse_repository(self, data: dict[str, Any]) -> Repository:
        """Parse repository data from Gitea REST API response.

        Field mappings:
            - data["owner"]["login"] -> owner
            - data["html_url"] -> url
            - data["clone_url"] -> clone_url
            - data["created_at"]/["updated_at"] -> datetimes
        """
        owner = data.get("owner") or {}
        return Repository(
            id=data["id"],
            name=data["name"],
            full_name=data.get("full_name", ""),
            owner=owner.get("login") or owner.get("username", ""),
            description=data.get("description") or "",
            private=data.get("private", False),
            fork=data.get("fork", False),
            archived=data.get("archived", False),
            default_branch=data.get("default_branch") or "main",
            url=data.get("html_url", ""),
            clone_url=data.get("clone_url", ""),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    @staticmethod
    def _parse_branch(data: dict[str, Any]) -> Branch:
        return Branch(
            name=data["name"],
            sha=(data.get("commit") or {}).get("id", ""),
            protected=data.get("protected", False),
        )

    @staticmethod
    def _parse_issue(data: dict[str, Any]) -> Issue:
        """Parse issue data from Gitea REST API response to internal Issue model.

        Field mappings:
            - data["state"] -> state ("open" -> OPEN, anything else -> CLOSED)
            - data["labels"] -> labels (list of label objects -> list of names)
            - data["user"]["login"] -> author
            - data["html_url"] -> url
        """
        return Issue(
            id=data["id"],
            number=data["number"],
            title=data["title"],
            body=data.get("body") or "",
            state=IssueState.OPEN if data["state"] == "open" else IssueState.CLOSED,
            labels=[label["name"] for label in data.get("labels") or []],
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            author=(data.get("user") or {}).get("login", ""),
            url=data.get("html_url", ""),
        )

    @staticmethod
    def _parse_comment(data: dict[str, Any]) -> Comment:
        return Comment(
            id=data["id"],
            body=data.get("body", ""),
            author=(data.get("user") or {}).get("login", ""),
            created_at=parse_timestamp(data.get("created_at")),
        )

    @staticmethod
    def _parse_pull_request(data: dict[str, Any]) -> PullRequest:
        """Parse pull request data from Gitea REST API response.

        Field mappings:
            - data["head"]["ref"] -> head (source branch name)
            - data["base"]["ref"] -> base (target branch name)
            - data["mergeable"], data["merged"] -> flags
        """
        return PullRequest(
            id=data["id"],
            number=data["number"],
            title=data["title"],
            body=data.get("body") or "",
            head=data["head"]["ref"],
            base=data["base"]["ref"],
            state=data["state"],
            url=data.get("html_url", ""),
            created_at=parse_timestamp(data.get("created_at")),
            author=(data.get("user") or {}).get("login", ""),
            mergeable=data.get("mergeable", True),
            merged=data.get("merged", False),
        )

    @staticmethod
    def _parse_release(data: dict[str, Any]) -> Release:
        return Release(
            id=data["id"],
            tag_name=data["tag_name"],
            name=data.get("name") or data["tag_name"],
            body=data.get("body") or "",
            draft=data.get("draft", False),
            prerelease=data.get("prerelease", False),
            target_commitish=data.get("target_commitish", ""),
            url=data.get("html_url", ""),
            author=(data.get("author") or {}).get("login", ""),
            created_at=parse_timestamp(data.get("created_at")),
            published_at=parse_timestamp(data.get("published_at")),
        )

    @staticmethod
    def _parse_tag(data: dict[str, Any]) -> Tag:
        return Tag(
            name=data["name"],
            sha=(data.get("commit") or {}).get("sha") or data.get("id", ""),
            message=(data.get("message") or "").strip(),
        )

    @staticmethod
    def _parse_webhook(data: dict[str, Any]) -> Webhook:
        config = data.get("config") or {}
        return Webhook(
            id=data["id"],
            url=config.get("url", ""),
            events=list(data.get("events") or []),
            active=data.get("active", True),
            content_type=config.get("content_type", "json"),
            created_at=parse_timestamp(data.get("created_at")),
        )

    @staticmethod
    def _parse_branch_protection(data: dict[str, Any]) -> BranchProtection:
        return BranchProtection(
            branch_name=data.get("rule_name") or data.get("branch_name", ""),
            required_approvals=data.get("required_approvals") or 0,
            require_status_checks=data.get("enable_status_check", False),
            status_check_contexts=list(data.get("status_check_contexts") or []),
            enforce_admins=data.get("block_admin_merge_override", False),
            dismiss_stale_reviews=data.get("dismiss_stale_approvals", False),
            created_at=parse_timestamp(data.get("created_at")),
        )

    @staticmethod
    def _parse_file(data: dict[str, Any]) -> FileEntry:
        return FileEntry(
            name=data["name"],
            path=data["path"],
            sha=data.get("sha", ""),
            type=data.get("type", "file"),
            size=data.get("size") or 0,
            url=data.get("html_url") or "",
            download_url=data.get("download_url") or "",
            content=_decode_content(data),
        )

    @staticmethod
    def _parse_commit(data: dict[str, Any]) -> Commit:
        """Parse a commit from the commits or git/commits endpoints.

        Field mappings:
            - data["sha"] -> sha
            - data["commit"]["message"] -> message
            - data["commit"]["author"]["name"/"email"/"date"] -> author fields
        """
        details = data.get("commit") or {}
        author = details.get("author") or {}
        return Commit(
            sha=data.get("sha", ""),
            message=details.get("message", ""),
            author=author.get("name", ""),
            author_email=author.get("email", ""),
            authored_at=parse_timestamp(author.get("date")),
            url=data.get("html_url", ""),
        )
