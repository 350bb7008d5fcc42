"""Auto-detection of ``owner``/``username`` from the authenticated token.

Tools let callers omit the account they act on. Before a handler runs, the
rule for its tool decides which field the action needs; if that field is
missing it is filled with the login of the token's user.

Rules:
    - ``owner`` is filled for actions in ``owner_actions``.
    - ``username`` is filled for actions in ``username_actions``.
    - For ``list``, if neither field was given, ``username`` is filled.

Each fill performs its own current-user lookup; nothing is cached.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import structlog

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import AutoUserDetectionError
from vcs_mcp.providers.base import VcsProvider

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AutoUserRule:
    """Which actions of a tool need ``owner`` or ``username`` filled."""

    owner_actions: frozenset[str] = frozenset()
    username_actions: frozenset[str] = frozenset()


def _rule(owner: tuple[str, ...] = (), username: tuple[str, ...] = ()) -> AutoUserRule:
    return AutoUserRule(owner_actions=frozenset(owner), username_actions=frozenset(username))


AUTO_USER_RULES: Mapping[ToolName, AutoUserRule] = MappingProxyType(
    {
        ToolName.REPOSITORIES: _rule(owner=("get", "update", "delete", "fork"), username=("list",)),
        ToolName.BRANCHES: _rule(owner=("create", "list", "get", "delete")),
        ToolName.ISSUES: _rule(owner=("create", "list", "get", "update", "close", "comment")),
        ToolName.PULLS: _rule(owner=("create", "list", "get", "update", "merge", "close")),
        ToolName.RELEASES: _rule(owner=("create", "list", "get", "update", "delete")),
        ToolName.TAGS: _rule(owner=("create", "list", "get", "delete")),
        ToolName.WEBHOOKS: _rule(owner=("create", "list", "get", "update", "delete")),
        ToolName.BRANCH_PROTECTION: _rule(owner=("list", "get", "create", "update", "delete")),
        ToolName.FILES: _rule(owner=("get", "list", "create", "update", "delete")),
        ToolName.COMMITS: _rule(owner=("list", "get")),
        ToolName.USERS: _rule(username=("get",)),
    }
)


async def _current_login(provider: VcsProvider, field: str, action: str) -> str:
    try:
        user = await provider.get_current_user()
    except Exception as e:
        log.warning("auto_user_detection_failed", field=field, action=action, error=str(e))
        raise AutoUserDetectionError(field, action, str(e) or e.__class__.__name__) from e
    log.debug("auto_user_detected", field=field, action=action, login=user.login)
    return user.login


async def apply_auto_user(
    tool: ToolName,
    action: str,
    params: Mapping[str, Any],
    provider: VcsProvider,
) -> dict[str, Any]:
    """Return a copy of ``params`` with missing owner/username filled in.

    Args:
        tool: Tool being called
        action: Action requested from the tool
        params: Validated tool parameters
        provider: Provider whose current user is used

    Returns:
        New parameter dict; ``params`` itself is not modified.

    Raises:
        AutoUserDetectionError: If the current user lookup fails
    """
    updated = dict(params)
    rule = AUTO_USER_RULES.get(tool)
    if rule is None:
        return updated

    if not updated.get("owner") and action in rule.owner_actions:
        updated["owner"] = await _current_login(provider, "owner", action)

    if not updated.get("username") and action in rule.username_actions:
        updated["username"] = await _current_login(provider, "username", action)

    if action == "list" and not updated.get("username") and not updated.get("owner"):
        updated["username"] = await _current_login(provider, "username", action)

    return updated
