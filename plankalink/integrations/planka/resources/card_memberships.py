"""
Card membership operations (assigning users to cards).

Removal is addressed by user, not by membership id:
    DELETE /api/cards/{cardId}/card-memberships/userId:{userId}
"""

from __future__ import annotations

import logging
from operator import attrgetter

from plankalink.integrations.planka.included import Included, left_join
from plankalink.integrations.planka.resources.base import Resource, operation
from plankalink.integrations.planka.schemas import (
    INTEGRATION,
    CardDetailEnvelope,
    CardMember,
    CardMemberParams,
    CardMembership,
    CardParams,
    ItemEnvelope,
    User,
)

logger = logging.getLogger(__name__)


class CardMembershipOperations(Resource):
    """Add, remove and list card members."""

    @operation("add member to card")
    async def add(self, card_id: str, user_id: str) -> CardMembership:
        params = self._params(CardMemberParams, card_id=card_id, user_id=user_id)

        logger.info(f"[{INTEGRATION}] Adding user {params.user_id} to card {params.card_id}")

        response = await self._call(
            ItemEnvelope[CardMembership],
            f"/api/cards/{params.card_id}/card-memberships",
            method="POST",
            body={"userId": params.user_id},
        )
        return response.item

    @operation("remove member from card")
    async def remove(self, card_id: str, user_id: str) -> CardMembership:
        params = self._params(CardMemberParams, card_id=card_id, user_id=user_id)

        logger.info(f"[{INTEGRATION}] Removing user {params.user_id} from card {params.card_id}")

        response = await self._call(
            ItemEnvelope[CardMembership],
            f"/api/cards/{params.card_id}/card-memberships/userId:{params.user_id}",
            method="DELETE",
        )
        return response.item

    @operation("get card members")
    async def list_for_card(self, card_id: str) -> list[CardMember]:
        """
        Card memberships joined to their users.

        A membership whose user was not side-loaded is kept with user=None.
        """
        params = self._params(CardParams, card_id=card_id)

        card = await self._call(CardDetailEnvelope, f"/api/cards/{params.card_id}")
        included = Included(card.included)

        pairs = left_join(
            included.entities("cardMemberships", CardMembership),
            included.entities("users", User),
            foreign_key=attrgetter("user_id"),
        )
        return [CardMember(membership=membership, user=user) for membership, user in pairs]
