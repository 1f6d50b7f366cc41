"""
Action (card activity log) operations.
"""

from __future__ import annotations

import logging
from operator import attrgetter

from plankalink.integrations.planka.included import (
    Included,
    count_by,
    display_name,
    index_by,
    most_recent,
)
from plankalink.integrations.planka.resources.base import Resource, operation
from plankalink.integrations.planka.schemas import (
    Action,
    ActionType,
    ActivityEntry,
    ActivitySummary,
    CardActions,
    CardParams,
    GetActionParams,
    ItemEnvelope,
    ItemsEnvelope,
    User,
)

logger = logging.getLogger(__name__)


class ActionOperations(Resource):
    """Read card activity."""

    @operation("get card actions")
    async def list_for_card(self, card_id: str) -> CardActions:
        """Actions for a card, newest first, with side-loaded users."""
        params = self._params(CardParams, card_id=card_id)

        response = await self._call(ItemsEnvelope[Action], f"/api/cards/{params.card_id}/actions")
        return CardActions(actions=response.items, included=response.included)

    @operation("get action")
    async def get(self, action_id: str) -> Action:
        params = self._params(GetActionParams, id=action_id)

        response = await self._call(ItemEnvelope[Action], f"/api/actions/{params.id}")
        return response.item

    @operation("get card activity summary")
    async def activity_summary(self, card_id: str) -> ActivitySummary:
        """
        Summarize a card's activity.

        Returns:
            ActivitySummary with counts for every action type, the ten most
            recent entries (server order) and the full flattened list
        """
        result = await self.list_for_card(card_id)
        return summarize_actions(result.actions, Included(result.included).entities("users", User))


def summarize_actions(actions: list[Action], users: list[User]) -> ActivitySummary:
    """Flatten actions with author names and aggregate them by type."""
    users_by_id = index_by(users)

    entries = [
        ActivityEntry(
            id=action.id,
            type=action.type,
            user=display_name(users_by_id.get(action.user_id)),
            user_id=action.user_id,
            data=action.data,
            created_at=action.created_at,
        )
        for action in actions
    ]

    counts = count_by(entries, attrgetter("type"), list(ActionType))

    return ActivitySummary(
        total_actions=len(entries),
        by_type={action_type.value: count for action_type, count in counts.items()},
        recent_actions=most_recent(entries),
        all_actions=entries,
    )
