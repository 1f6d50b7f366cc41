"""
Planka resource operations.

One class per entity group; each is constructed with a PlankaTransport and
exposed on PlankaClient (client.attachments, client.users, ...).
"""

from plankalink.integrations.planka.resources.actions import ActionOperations
from plankalink.integrations.planka.resources.attachments import AttachmentOperations
from plankalink.integrations.planka.resources.base import PlankaTransport, Resource, operation
from plankalink.integrations.planka.resources.card_memberships import CardMembershipOperations
from plankalink.integrations.planka.resources.notifications import NotificationOperations
from plankalink.integrations.planka.resources.users import UserOperations

__all__ = [
    "ActionOperations",
    "AttachmentOperations",
    "CardMembershipOperations",
    "NotificationOperations",
    "PlankaTransport",
    "Resource",
    "UserOperations",
    "operation",
]
