"""
Pydantic schemas for the Planka API.

These schemas provide type-safe representations of Planka resources, the
response envelopes they travel in, and the parameters each operation
accepts. Planka speaks camelCase on the wire; models expose snake_case
attributes, accept either spelling, and dump by alias.

Envelopes:
    {"item": {...}, "included": {"users": [...], ...}}
    {"items": [...], "included": {...}}
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from plankalink.integrations.base import ValidationError

INTEGRATION = "planka"

ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# Validation
# =============================================================================


def validate(model: type[ModelT], value: Any) -> ModelT:
    """
    Validate and coerce a value against a schema.

    Args:
        model: Pydantic model to validate against
        value: Raw value (decoded JSON or tool arguments)

    Returns:
        Model instance

    Raises:
        ValidationError: With the path, expectation and offending value of
            the first failing field
    """
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        errors = e.errors(include_url=False)
        first = errors[0]
        path = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise ValidationError(
            f"{model.__name__} validation failed at {path}: {first['msg']}",
            INTEGRATION,
            path=path,
            expected=first["msg"],
            actual=first.get("input"),
            validation_errors=errors,
        ) from e


# =============================================================================
# Enums
# =============================================================================


class ActionType(str, Enum):
    """Kinds of card activity recorded by Planka."""

    CREATE_CARD = "createCard"
    MOVE_CARD = "moveCard"
    COMMENT_CARD = "commentCard"


# =============================================================================
# Entities
# =============================================================================


class PlankaModel(BaseModel):
    """Base for wire models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict with wire field names."""
        return self.model_dump(mode="json", by_alias=True)


class Attachment(PlankaModel):
    """File attached to a card."""

    id: str
    card_id: str
    name: str
    url: str | None = None
    cover_url: str | None = None
    size: int | None = None
    creator_user_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class Action(PlankaModel):
    """Card activity log entry."""

    id: str
    type: ActionType
    data: dict[str, Any] = Field(default_factory=dict)
    card_id: str
    user_id: str
    created_at: datetime
    updated_at: datetime | None = None


class CardMembership(PlankaModel):
    """Assignment of a user to a card."""

    id: str
    card_id: str
    user_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class User(PlankaModel):
    """Planka user."""

    id: str
    name: str | None = None
    username: str | None = None
    email: str | None = None


class Notification(PlankaModel):
    """Notification delivered to the current user."""

    id: str
    user_id: str
    action_id: str
    card_id: str
    is_read: bool
    created_at: datetime
    updated_at: datetime | None = None


# =============================================================================
# Envelopes
# =============================================================================


class ItemEnvelope(BaseModel, Generic[ModelT]):
    """Single-entity response."""

    item: ModelT
    included: dict[str, Any] = Field(default_factory=dict)


class ItemsEnvelope(BaseModel, Generic[ModelT]):
    """Collection response."""

    items: list[ModelT]
    included: dict[str, Any] = Field(default_factory=dict)


class CardDetailEnvelope(BaseModel):
    """Card detail response; only the side-loaded collections are used."""

    item: dict[str, Any]
    included: dict[str, Any] = Field(default_factory=dict)


class TokenEnvelope(BaseModel):
    """Access token response from /api/access-tokens."""

    item: str = Field(..., min_length=1)


# =============================================================================
# Derived Views
# =============================================================================


class CardActions(BaseModel):
    """Card actions plus the side-loaded records that give them context."""

    actions: list[Action]
    included: dict[str, Any] = Field(default_factory=dict)


class ActivityEntry(PlankaModel):
    """Flattened action with the author's display name."""

    id: str
    type: ActionType
    user: str
    user_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class ActivitySummary(PlankaModel):
    """Aggregate view over a card's actions."""

    total_actions: int
    by_type: dict[str, int]
    recent_actions: list[ActivityEntry]
    all_actions: list[ActivityEntry]


class CardMember(PlankaModel):
    """Card membership joined to its user (None when not side-loaded)."""

    membership: CardMembership
    user: User | None = None


class NotificationList(BaseModel):
    """Notifications plus the side-loaded cards/actions/users."""

    notifications: list[Notification]
    included: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Request Schemas
# =============================================================================


class OperationParams(BaseModel):
    """Base for operation parameters (tool arguments use camelCase)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class NoParams(OperationParams):
    """Operation without parameters."""


class CardParams(OperationParams):
    """Operation addressed by card."""

    card_id: str = Field(..., min_length=1, description="Card ID")


class UploadAttachmentParams(CardParams):
    """Upload a local file to a card."""

    file_path: str = Field(..., min_length=1, description="Local file path to upload")


class UploadAttachmentFromUrlParams(CardParams):
    """Download a URL and attach it to a card."""

    url: str = Field(..., min_length=1, description="URL to download the file from")
    filename: str | None = Field(
        None,
        description="Optional filename (will be extracted from URL if not provided)",
    )


class DeleteAttachmentParams(OperationParams):
    id: str = Field(..., min_length=1, description="Attachment ID")


class GetActionParams(OperationParams):
    id: str = Field(..., min_length=1, description="Action ID")


class CardMemberParams(CardParams):
    """Add or remove a card member."""

    user_id: str = Field(..., min_length=1, description="User ID")


class GetUserParams(OperationParams):
    id: str = Field(..., min_length=1, description="User ID")


class SearchUsersByNameParams(OperationParams):
    name: str = Field(..., min_length=1, description="Name to search for (partial match)")


class SearchUsersByEmailParams(OperationParams):
    email: str = Field(..., min_length=1, description="Email to search for (exact match)")


class SearchUsersByUsernameParams(OperationParams):
    username: str = Field(
        ..., min_length=1, description="Username to search for (exact match)"
    )


class GetNotificationParams(OperationParams):
    id: str = Field(..., min_length=1, description="Notification ID")


class MarkNotificationsAsReadParams(OperationParams):
    ids: list[Annotated[str, Field(min_length=1)]] = Field(
        ..., description="Array of notification IDs to mark as read"
    )
