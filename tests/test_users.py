"""
Tests for user operations.
"""

import logging

import pytest

from payloads import user_payload
from plankalink.integrations.base import OperationError, TransportError, ValidationError
from plankalink.integrations.planka.resources.users import UserOperations


@pytest.fixture
def directory(transport):
    """Transport serving a small user directory."""
    transport.request.return_value = {
        "items": [
            user_payload("u1", name="Alice Smith", username="alice", email="x@y.com"),
            user_payload("u2", name="Bob", username="bob", email="x@y.com.au"),
            user_payload("u3", name="alice cooper", username="Cooper", email="cooper@y.com"),
            user_payload("u4", name=None, username="bot", email=None),
        ]
    }
    return transport


class TestReadUsers:
    """Tests for list and get."""

    @pytest.mark.asyncio
    async def test_list(self, directory):
        operations = UserOperations(directory)

        users = await operations.list()

        assert [u.id for u in users] == ["u1", "u2", "u3", "u4"]
        directory.request.assert_awaited_once_with("/api/users", method="GET", body=None)

    @pytest.mark.asyncio
    async def test_list_is_repeatable(self, directory):
        operations = UserOperations(directory)

        first = await operations.list()
        second = await operations.list()

        assert first == second
        assert directory.request.await_count == 2

    @pytest.mark.asyncio
    async def test_get(self, transport):
        transport.request.return_value = {"item": user_payload("u9", name="Zed")}
        operations = UserOperations(transport)

        user = await operations.get("u9")

        assert user.name == "Zed"
        transport.request.assert_awaited_once_with("/api/users/u9", method="GET", body=None)

    @pytest.mark.asyncio
    async def test_get_requires_id(self, transport):
        operations = UserOperations(transport)

        with pytest.raises(OperationError) as exc_info:
            await operations.get("")

        assert isinstance(exc_info.value.cause, ValidationError)
        transport.request.assert_not_awaited()


class TestSearch:
    """Tests for the client-side searches."""

    @pytest.mark.asyncio
    async def test_name_is_case_insensitive_substring(self, directory):
        operations = UserOperations(directory)

        users = await operations.search_by_name("ALICE")

        assert [u.id for u in users] == ["u1", "u3"]

    @pytest.mark.asyncio
    async def test_email_is_exact(self, directory):
        operations = UserOperations(directory)

        users = await operations.search_by_email("X@Y.com")

        assert [u.id for u in users] == ["u1"]

    @pytest.mark.asyncio
    async def test_username_is_exact(self, directory):
        operations = UserOperations(directory)

        assert [u.id for u in await operations.search_by_username("cooper")] == ["u3"]
        assert await operations.search_by_username("coop") == []

    @pytest.mark.asyncio
    async def test_no_match(self, directory):
        operations = UserOperations(directory)

        assert await operations.search_by_name("nobody") == []

    @pytest.mark.asyncio
    async def test_id_by_name_first_match(self, directory):
        operations = UserOperations(directory)

        assert await operations.get_id_by_name("alice") == "u1"

    @pytest.mark.asyncio
    async def test_id_by_name_none(self, directory):
        operations = UserOperations(directory)

        assert await operations.get_id_by_name("nobody") is None

    @pytest.mark.asyncio
    async def test_search_failure(self, transport):
        transport.request.side_effect = TransportError("Network error: refused", "planka")
        operations = UserOperations(transport)

        with pytest.raises(OperationError) as exc_info:
            await operations.search_by_email("x@y.com")

        assert exc_info.value.message == (
            "Failed to search users by email: Failed to get users: Network error: refused"
        )
        assert isinstance(exc_info.value.cause, TransportError)

    @pytest.mark.asyncio
    async def test_nested_failure_logged_once_as_error(self, transport, caplog):
        transport.request.side_effect = TransportError("Network error: refused", "planka")
        operations = UserOperations(transport)

        with caplog.at_level(logging.DEBUG, logger="plankalink"):
            with pytest.raises(OperationError):
                await operations.search_by_email("x@y.com")

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert [r.getMessage() for r in errors] == ["[planka] Failed to get users: Network error: refused"]
        assert any(
            r.levelno == logging.DEBUG and "Failed to search users by email" in r.getMessage()
            for r in caplog.records
        )
