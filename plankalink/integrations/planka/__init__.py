"""
Planka Integration for plankalink.

Planka is an open-source kanban board. This integration provides:
- Card attachments (upload from disk or URL, list, delete)
- Card activity (actions and an activity summary)
- Card memberships (add, remove, list joined to users)
- User lookup and search
- Notifications (list, mark as read)

Usage:
    from plankalink.integrations.planka import PlankaClient, PlankaConfig

    client = PlankaClient(PlankaConfig(
        base_url="https://planka.example.com",
        email_or_username="agent@example.com",
        password="secret",
    ))

    summary = await client.actions.activity_summary("card-123")
    unread = await client.notifications.unread_count()

API Reference:
    https://docs.planka.cloud/docs/api/
"""

from plankalink.integrations.planka.client import PlankaClient, PlankaConfig
from plankalink.integrations.planka.included import Included, left_join
from plankalink.integrations.planka.resources import PlankaTransport
from plankalink.integrations.planka.schemas import (
    Action,
    ActionType,
    ActivityEntry,
    ActivitySummary,
    Attachment,
    CardActions,
    CardMember,
    CardMembership,
    Notification,
    NotificationList,
    User,
    validate,
)

__all__ = [
    "Action",
    "ActionType",
    "ActivityEntry",
    "ActivitySummary",
    "Attachment",
    "CardActions",
    "CardMember",
    "CardMembership",
    "Included",
    "Notification",
    "NotificationList",
    "PlankaClient",
    "PlankaConfig",
    "PlankaTransport",
    "User",
    "left_join",
    "validate",
]
