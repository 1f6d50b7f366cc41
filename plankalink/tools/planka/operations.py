"""
Planka Operation Tools.

Every Planka operation is exposed as one tool. The input schema is the
operation's parameter model (camelCase, as tool-calling clients send it);
`execute` validates the arguments, awaits the operation and renders the
result as JSON text plus structured content.

Errors are returned in ToolResult, not raised as exceptions.

Usage:
    registry = create_planka_registry(client)
    result = await registry.get_required("planka_mark_notifications_read").execute(
        {"ids": ["n-1", "n-2"]}
    )
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from plankalink.integrations.base import IntegrationError
from plankalink.integrations.planka.schemas import (
    Attachment,
    CardMemberParams,
    CardParams,
    DeleteAttachmentParams,
    GetActionParams,
    GetNotificationParams,
    GetUserParams,
    MarkNotificationsAsReadParams,
    NoParams,
    OperationParams,
    SearchUsersByEmailParams,
    SearchUsersByNameParams,
    SearchUsersByUsernameParams,
    UploadAttachmentFromUrlParams,
    UploadAttachmentParams,
    validate,
)
from plankalink.tools.base import (
    CREATES,
    DELETES,
    READ_ONLY,
    UPDATES,
    ContentBlock,
    Tool,
    ToolAnnotations,
    ToolResult,
)
from plankalink.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from plankalink.integrations.planka import PlankaClient

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


def to_jsonable(value: Any) -> Any:
    """Convert operation results (models, lists, dicts) to JSON-ready data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


class PlankaOperationTool(Tool):
    """
    Tool backed by a single Planka operation.

    Example:
        tool = PlankaOperationTool(
            name="planka_get_user",
            description="Get a user by ID",
            params_model=GetUserParams,
            handler=lambda p: client.users.get(p.id),
            annotations=READ_ONLY,
        )
    """

    def __init__(
        self,
        *,
        name: str,
        description: str,
        params_model: type[OperationParams],
        handler: Handler,
        annotations: ToolAnnotations | None = None,
    ):
        self._name = name
        self._description = description
        self._params_model = params_model
        self._handler = handler
        self._annotations = annotations or ToolAnnotations()

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def input_schema(self) -> dict[str, Any]:
        schema = self._params_model.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    @property
    def annotations(self) -> ToolAnnotations:
        if self._annotations.title is None:
            title = self._name.removeprefix("planka_").replace("_", " ").capitalize()
            return self._annotations.with_title(title)
        return self._annotations

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        try:
            params = validate(self._params_model, arguments or {})
            result = await self._handler(params)
        except IntegrationError as e:
            logger.warning(f"[planka_tools] {self._name} failed: {e.message}")
            return ToolResult.failure(e)

        payload = to_jsonable(result)
        structured = payload if isinstance(payload, dict) else {"result": payload}

        links: tuple[ContentBlock, ...] = ()
        if isinstance(result, Attachment) and result.url:
            links = (ContentBlock.link(result.url, name=result.name),)

        return ToolResult.ok(json.dumps(payload, indent=2), structured, links)


def build_planka_tools(client: PlankaClient) -> list[Tool]:
    """Build one tool per Planka operation, bound to `client`."""
    attachments = client.attachments
    actions = client.actions
    members = client.card_memberships
    users = client.users
    notifications = client.notifications

    specs: list[tuple[str, str, type[OperationParams], Handler, ToolAnnotations]] = [
        # Attachments
        (
            "planka_upload_attachment",
            "Upload a local file as an attachment to a card.",
            UploadAttachmentParams,
            lambda p: attachments.upload(p.card_id, p.file_path),
            CREATES,
        ),
        (
            "planka_upload_attachment_from_url",
            "Download a file from a URL and attach it to a card.",
            UploadAttachmentFromUrlParams,
            lambda p: attachments.upload_from_url(p.card_id, p.url, p.filename),
            CREATES,
        ),
        (
            "planka_delete_attachment",
            "Delete an attachment by ID.",
            DeleteAttachmentParams,
            lambda p: attachments.delete(p.id),
            DELETES,
        ),
        (
            "planka_get_attachments",
            "List the attachments of a card.",
            CardParams,
            lambda p: attachments.list_for_card(p.card_id),
            READ_ONLY,
        ),
        # Actions
        (
            "planka_get_card_actions",
            "Get the activity history of a card with side-loaded users.",
            CardParams,
            lambda p: actions.list_for_card(p.card_id),
            READ_ONLY,
        ),
        (
            "planka_get_action",
            "Get a single card action by ID.",
            GetActionParams,
            lambda p: actions.get(p.id),
            READ_ONLY,
        ),
        (
            "planka_get_card_activity_summary",
            "Summarize a card's activity: counts per type, recent and all actions with user names.",
            CardParams,
            lambda p: actions.activity_summary(p.card_id),
            READ_ONLY,
        ),
        # Card memberships
        (
            "planka_add_card_member",
            "Add a user as a member of a card.",
            CardMemberParams,
            lambda p: members.add(p.card_id, p.user_id),
            CREATES,
        ),
        (
            "planka_remove_card_member",
            "Remove a user from a card.",
            CardMemberParams,
            lambda p: members.remove(p.card_id, p.user_id),
            DELETES,
        ),
        (
            "planka_get_card_members",
            "List the members of a card with their user details.",
            CardParams,
            lambda p: members.list_for_card(p.card_id),
            READ_ONLY,
        ),
        # Users
        (
            "planka_get_users",
            "List all users.",
            NoParams,
            lambda p: users.list(),
            READ_ONLY,
        ),
        (
            "planka_get_user",
            "Get a user by ID.",
            GetUserParams,
            lambda p: users.get(p.id),
            READ_ONLY,
        ),
        (
            "planka_search_users_by_name",
            "Search users by name (partial, case-insensitive).",
            SearchUsersByNameParams,
            lambda p: users.search_by_name(p.name),
            READ_ONLY,
        ),
        (
            "planka_search_users_by_email",
            "Find users by email (exact, case-insensitive).",
            SearchUsersByEmailParams,
            lambda p: users.search_by_email(p.email),
            READ_ONLY,
        ),
        (
            "planka_search_users_by_username",
            "Find users by username (exact, case-insensitive).",
            SearchUsersByUsernameParams,
            lambda p: users.search_by_username(p.username),
            READ_ONLY,
        ),
        (
            "planka_get_user_id_by_name",
            "Get the ID of the first user whose name matches.",
            SearchUsersByNameParams,
            lambda p: users.get_id_by_name(p.name),
            READ_ONLY,
        ),
        # Notifications
        (
            "planka_get_notifications",
            "List notifications for the current user.",
            NoParams,
            lambda p: notifications.list(),
            READ_ONLY,
        ),
        (
            "planka_get_notification",
            "Get a notification by ID.",
            GetNotificationParams,
            lambda p: notifications.get(p.id),
            READ_ONLY,
        ),
        (
            "planka_mark_notifications_read",
            "Mark notifications as read. Fails as a whole if any update fails.",
            MarkNotificationsAsReadParams,
            lambda p: notifications.mark_read(p.ids),
            UPDATES,
        ),
        (
            "planka_get_unread_notifications_count",
            "Count unread notifications.",
            NoParams,
            lambda p: notifications.unread_count(),
            READ_ONLY,
        ),
        (
            "planka_mark_all_notifications_read",
            "Mark every unread notification as read.",
            NoParams,
            lambda p: notifications.mark_all_read(),
            UPDATES,
        ),
    ]

    return [
        PlankaOperationTool(
            name=name,
            description=description,
            params_model=params_model,
            handler=handler,
            annotations=annotations,
        )
        for name, description, params_model, handler, annotations in specs
    ]


def create_planka_registry(client: PlankaClient) -> ToolRegistry:
    """Registry holding every Planka tool for `client`."""
    registry = ToolRegistry()
    registry.register_all(build_planka_tools(client))
    logger.info(f"[planka_tools] Registered {len(registry)} tools")
    return registry
