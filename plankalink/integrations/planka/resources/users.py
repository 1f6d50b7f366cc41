"""
User directory operations.

Searches run client-side over the full `/api/users` collection (the server
returns it unpaginated). Name search is a substring match; email and
username searches are exact. All comparisons ignore case.
"""

from __future__ import annotations

import logging

from plankalink.integrations.planka.included import contains_casefold, equals_casefold
from plankalink.integrations.planka.resources.base import Resource, operation
from plankalink.integrations.planka.schemas import (
    GetUserParams,
    ItemEnvelope,
    ItemsEnvelope,
    SearchUsersByEmailParams,
    SearchUsersByNameParams,
    SearchUsersByUsernameParams,
    User,
)

logger = logging.getLogger(__name__)


class UserOperations(Resource):
    """Look up and search users."""

    @operation("get users")
    async def list(self) -> list[User]:
        response = await self._call(ItemsEnvelope[User], "/api/users")
        return response.items

    @operation("get user")
    async def get(self, user_id: str) -> User:
        params = self._params(GetUserParams, id=user_id)

        response = await self._call(ItemEnvelope[User], f"/api/users/{params.id}")
        return response.item

    @operation("search users by name")
    async def search_by_name(self, name: str) -> list[User]:
        params = self._params(SearchUsersByNameParams, name=name)

        users = await self.list()
        return [user for user in users if contains_casefold(user.name, params.name)]

    @operation("search users by email")
    async def search_by_email(self, email: str) -> list[User]:
        params = self._params(SearchUsersByEmailParams, email=email)

        users = await self.list()
        return [user for user in users if equals_casefold(user.email, params.email)]

    @operation("search users by username")
    async def search_by_username(self, username: str) -> list[User]:
        params = self._params(SearchUsersByUsernameParams, username=username)

        users = await self.list()
        return [user for user in users if equals_casefold(user.username, params.username)]

    @operation("get user ID by name")
    async def get_id_by_name(self, name: str) -> str | None:
        """Id of the first user whose name matches, or None."""
        users = await self.search_by_name(name)
        return users[0].id if users else None
