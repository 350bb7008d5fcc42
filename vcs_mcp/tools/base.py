"""Shared building blocks for tool handlers.

Every tool returns a :class:`ToolResult` envelope::

    {"success": true, "action": "list", "message": "3 issues found", "data": [...]}
    {"success": false, "action": "get", "message": "issues get failed", "error": "Not found ..."}

Handlers receive validated input, a :class:`ToolContext` and (for provider
backed tools) the resolved provider. They raise on failure; the dispatch
layer converts exceptions into failure envelopes exactly once.
"""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any

import httpx
import requests
from github import GithubException  # type: ignore[import-not-found]
from pydantic import BaseModel, Field

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import ToolInputError, VcsMcpError
from vcs_mcp.git.runner import GitCommandResult
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.providers.factory import ProviderFactory

HTTP_STATUS_MESSAGES = {
    400: "Bad request - check the parameters sent",
    401: "Unauthorized - check your token and permissions",
    403: "Forbidden - the token lacks permission for this operation",
    404: "Not found - the resource does not exist or is not visible to this token",
    405: "Method not allowed - the operation is not permitted in the current state",
    409: "Conflict - the resource already exists or is in a conflicting state",
    422: "Validation error - the server rejected the submitted data",
    429: "Rate limited - too many requests, try again later",
    500: "Internal server error on the provider",
    502: "Bad gateway - the provider is unreachable",
    503: "Service unavailable - the provider is temporarily down",
    504: "Gateway timeout - the provider took too long to respond",
}


class ToolResult(BaseModel):
    """Uniform result envelope returned by every tool."""

    success: bool
    action: str
    message: str
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, action: str, message: str, data: Any = None) -> "ToolResult":
        return cls(success=True, action=action, message=message, data=to_data(data))

    @classmethod
    def fail(cls, action: str, message: str, error: str) -> "ToolResult":
        return cls(success=False, action=action, message=message, error=error)

    def to_json(self) -> str:
        """Serialize to JSON, omitting ``data``/``error`` when unset."""
        payload = self.model_dump(mode="json")
        for key in ("data", "error"):
            if payload[key] is None:
                del payload[key]
        return json.dumps(payload, indent=2, ensure_ascii=False)


class ToolInput(BaseModel):
    """Fields every tool accepts."""

    provider: str | None = Field(
        default=None,
        description="Name of the configured provider to use (defaults to the default provider)",
    )


class RepoToolInput(ToolInput):
    """Input for tools that address a repository on a provider."""

    owner: str | None = Field(default=None, description="Repository owner (defaults to the authenticated user)")
    repo: str | None = Field(default=None, description="Repository name")
    page: int = Field(default=1, ge=1, le=1000, description="Page number for list actions")
    limit: int = Field(default=30, ge=1, le=100, description="Items per page for list actions")


@dataclass
class ToolContext:
    """Per-server state handed to every tool call."""

    factory: ProviderFactory
    git_timeout: float = 300.0


Handler = Callable[[ToolContext, Any, VcsProvider | None], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    """A tool as published over MCP."""

    name: ToolName
    description: str
    input_model: type[ToolInput]
    handler: Handler
    uses_provider: bool = True
    local_actions: frozenset[str] = frozenset()

    def needs_provider(self, action: str) -> bool:
        return self.uses_provider and action not in self.local_actions

    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema()


def reject_option_like(value: str | None) -> str | None:
    """Refuse values that git would parse as a command-line option.

    Used as a pydantic field validator for every free-form value that ends
    up as a git argument (remote names, branches, URLs, paths).
    """
    if value is not None and value.startswith("-"):
        raise ValueError("must not start with '-'")
    return value


def require(params: BaseModel, action: str, *names: str) -> None:
    """Fail with ToolInputError naming every listed field that is empty.

    Raises:
        ToolInputError: If any of ``names`` is None or an empty string
    """
    missing = [name for name in names if getattr(params, name) in (None, "")]
    if missing:
        raise ToolInputError(
            f"Missing required field(s) for action '{action}': {', '.join(missing)}",
            errors=[f"{name}: required for action '{action}'" for name in missing],
        )


def to_data(value: Any) -> Any:
    """Convert domain models into JSON-ready structures.

    Dataclasses become dicts, datetimes ISO strings and enums their values.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_data(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: to_data(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [to_data(item) for item in value]
    return value


def git_result(action: str, result: GitCommandResult, message: str) -> ToolResult:
    """Map a git invocation to an envelope: exit 0 succeeds, anything else fails."""
    data = {"stdout": result.stdout, "stderr": result.stderr, "exit_code": result.exit_code}
    if result.succeeded:
        return ToolResult.ok(action, message, data)
    output = result.output or "no output"
    return ToolResult(
        success=False,
        action=action,
        message=f"git {' '.join(result.args[:1])} exited with code {result.exit_code}",
        data=data,
        error=output,
    )


def describe_error(exc: BaseException) -> str:
    """Render an exception as the ``error`` text of a failure envelope."""
    if isinstance(exc, VcsMcpError):
        return exc.message

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        text = HTTP_STATUS_MESSAGES.get(status) or (
            "Server error on the provider" if status >= 500 else f"HTTP error {status}"
        )
        detail = _response_detail(exc.response)
        return f"{text} (HTTP {status}){': ' + detail if detail else ''}"

    if isinstance(exc, httpx.TimeoutException):
        return f"Network error - request timed out: {exc}"

    if isinstance(exc, httpx.RequestError):
        return f"Network error - no response received: {exc}"

    if isinstance(exc, requests.Timeout):
        return f"Network error - request timed out: {exc}"

    if isinstance(exc, requests.RequestException):
        return f"Network error - no response received: {exc}"

    if isinstance(exc, GithubException):
        status = exc.status
        text = HTTP_STATUS_MESSAGES.get(status, f"HTTP error {status}")
        detail = exc.data.get("message", "") if isinstance(exc.data, dict) else str(exc.data or "")
        return f"{text} (HTTP {status}){': ' + detail if detail else ''}"

    return str(exc) or exc.__class__.__name__


def _response_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:500]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or "")
    return ""
