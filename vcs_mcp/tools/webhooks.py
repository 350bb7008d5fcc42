"""Repository webhook tool."""

from typing import Literal

from pydantic import Field

from vcs_mcp.enums import ToolName
from vcs_mcp.exceptions import ToolInputError
from vcs_mcp.providers.base import VcsProvider
from vcs_mcp.tools.base import RepoToolInput, ToolContext, ToolResult, ToolSpec, require

DEFAULT_EVENTS = ["push"]


class WebhooksInput(RepoToolInput):
    action: Literal["list", "get", "create", "update", "delete"] = Field(..., description="Operation to perform")
    webhook_id: int | None = Field(default=None, ge=1, description="Webhook ID (get, update, delete)")
    url: str | None = Field(default=None, description="Delivery URL (create, update)")
    events: list[str] | None = Field(default=None, description="Events that trigger delivery (default: push)")
    content_type: Literal["json", "form"] | None = Field(default=None, description="Payload encoding")
    secret: str | None = Field(default=None, description="Secret used to sign deliveries")
    active: bool | None = Field(default=None, description="Whether deliveries are enabled")


async def handle(ctx: ToolContext, params: WebhooksInput, provider: VcsProvider | None) -> ToolResult:
    assert provider is not None
    action = params.action
    require(params, action, "owner", "repo")
    owner, repo = params.owner, params.repo

    if action == "list":
        hooks = await provider.list_webhooks(owner, repo)
        return ToolResult.ok(action, f"{len(hooks)} webhooks found", hooks)

    if action == "create":
        require(params, action, "url")
        hook = await provider.create_webhook(
            owner,
            repo,
            params.url,
            params.events or DEFAULT_EVENTS,
            content_type=params.content_type or "json",
            secret=params.secret,
            active=True if params.active is None else params.active,
        )
        return ToolResult.ok(action, f"Webhook {hook.id} created", hook)

    require(params, action, "webhook_id")

    if action == "get":
        hook = await provider.get_webhook(owner, repo, params.webhook_id)
        return ToolResult.ok(action, f"Webhook {hook.id} retrieved", hook)

    if action == "update":
        changes = {
            "url": params.url,
            "events": params.events,
            "content_type": params.content_type,
            "secret": params.secret,
            "active": params.active,
        }
        if all(value is None for value in changes.values()):
            raise ToolInputError("No update fields provided: set url, events, content_type, secret or active")
        hook = await provider.update_webhook(owner, repo, params.webhook_id, **changes)
        return ToolResult.ok(action, f"Webhook {hook.id} updated", hook)

    await provider.delete_webhook(owner, repo, params.webhook_id)
    return ToolResult.ok(action, f"Webhook {params.webhook_id} deleted")


TOOL = ToolSpec(
    name=ToolName.WEBHOOKS,
    description="List, get, create, update and delete webhooks of a hosted repository.",
    input_model=WebhooksInput,
    handler=handle,
)
