"""
Tests for the join/summarize helpers.
"""

from operator import attrgetter, itemgetter

import pytest

from payloads import membership_payload, user_payload
from plankalink.integrations.base import ValidationError
from plankalink.integrations.planka.included import (
    UNKNOWN_USER,
    Included,
    contains_casefold,
    count_by,
    display_name,
    equals_casefold,
    index_by,
    left_join,
    most_recent,
)
from plankalink.integrations.planka.schemas import CardMembership, User


class TestIncluded:
    """Tests for the keyed `included` lookup."""

    def test_records_for_present_key(self):
        included = Included({"users": [user_payload()]})

        assert included.records("users") == [user_payload()]
        assert "users" in included

    def test_missing_key_is_empty(self):
        included = Included({"users": [user_payload()]})

        assert included.records("attachments") == []
        assert included.entities("attachments", User) == []

    def test_none_and_non_list_are_empty(self):
        assert Included(None).records("users") == []
        assert Included({"users": {"id": "u1"}}).records("users") == []

    def test_entities_are_validated(self):
        included = Included({"users": [user_payload(), {"name": "no id"}]})

        with pytest.raises(ValidationError):
            included.entities("users", User)


class TestLeftJoin:
    """Tests for left_join."""

    def test_memberships_join_users(self):
        """Test unmatched memberships are kept with user None."""
        memberships = [
            CardMembership.model_validate(membership_payload("m1", user_id="u1")),
            CardMembership.model_validate(membership_payload("m2", user_id="u2")),
        ]
        users = [User.model_validate(user_payload("u1", name="A"))]

        pairs = left_join(memberships, users, foreign_key=attrgetter("user_id"))

        assert [m.id for m, _ in pairs] == ["m1", "m2"]
        assert pairs[0][1].name == "A"
        assert pairs[1][1] is None

    def test_works_on_plain_dicts(self):
        pairs = left_join(
            [{"userId": "u1"}, {"userId": "u2"}],
            [{"id": "u1", "name": "A"}],
            foreign_key=itemgetter("userId"),
            key=itemgetter("id"),
        )

        assert pairs == [
            ({"userId": "u1"}, {"id": "u1", "name": "A"}),
            ({"userId": "u2"}, None),
        ]

    def test_empty_secondary(self):
        pairs = left_join([{"userId": "u1"}], [], foreign_key=itemgetter("userId"), key=itemgetter("id"))

        assert pairs == [({"userId": "u1"}, None)]


class TestAggregation:
    """Tests for index_by, count_by and most_recent."""

    def test_index_by_first_wins(self):
        index = index_by([{"id": "x", "n": 1}, {"id": "x", "n": 2}], key=itemgetter("id"))

        assert index["x"]["n"] == 1

    def test_count_by_includes_every_category(self):
        counts = count_by(["a", "b", "b", "z"], key=lambda v: v, categories=["a", "b", "c"])

        assert counts == {"a": 1, "b": 2, "c": 0}

    def test_most_recent_preserves_order(self):
        items = list(range(15))

        assert most_recent(items) == list(range(10))
        assert most_recent(items[:3]) == [0, 1, 2]
        assert most_recent(items, limit=2) == [0, 1]


class TestPredicates:
    """Tests for display names and case-insensitive matching."""

    def test_display_name_fallbacks(self):
        assert display_name(User(id="u1", name="Alice", username="al")) == "Alice"
        assert display_name(User(id="u1", username="al", email="a@x.io")) == "al"
        assert display_name(User(id="u1", email="a@x.io")) == "a@x.io"
        assert display_name(User(id="u1")) == UNKNOWN_USER
        assert display_name(None) == UNKNOWN_USER

    def test_contains_casefold(self):
        assert contains_casefold("Alice Smith", "SMI")
        assert not contains_casefold("Alice", "bob")
        assert not contains_casefold(None, "a")

    def test_equals_casefold(self):
        assert equals_casefold("x@y.com", "X@Y.com")
        assert not equals_casefold("x@y.com.au", "X@Y.com")
        assert not equals_casefold(None, "x")
