"""
Join and summarize helpers for Planka's `included` side-channel.

Planka piggy-backs related records on responses under `included`, keyed by
plural entity-type name:

    {"item": {...card...},
     "included": {"cardMemberships": [...], "users": [...], "attachments": [...]}}

Everything here is pure and synchronous: lookups, left joins by foreign key,
counting by a discriminator, and case-insensitive predicates. No I/O.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from operator import attrgetter
from typing import Any, TypeVar

from plankalink.integrations.planka.schemas import User, validate

P = TypeVar("P")
S = TypeVar("S")
ModelT = TypeVar("ModelT")

UNKNOWN_USER = "Unknown user"
RECENT_LIMIT = 10


class Included:
    """
    Keyed lookup over an `included` mapping.

    Missing keys and non-list values read as empty collections.

    Example:
        included = Included(response["included"])
        users = included.entities("users", User)
        members = left_join(
            included.entities("cardMemberships", CardMembership),
            users,
            foreign_key=attrgetter("user_id"),
        )
    """

    def __init__(self, raw: Mapping[str, Any] | None = None):
        self._raw: Mapping[str, Any] = raw or {}

    def records(self, key: str) -> list[Any]:
        """Raw records for a plural entity-type name."""
        value = self._raw.get(key)
        if not isinstance(value, list):
            return []
        return list(value)

    def entities(self, key: str, model: type[ModelT]) -> list[ModelT]:
        """Records for `key`, each validated against `model`."""
        return [validate(model, record) for record in self.records(key)]

    def keys(self) -> list[str]:
        return list(self._raw.keys())

    def __contains__(self, key: str) -> bool:
        return key in self._raw

    def __repr__(self) -> str:
        return f"<Included keys={self.keys()}>"


def index_by(
    items: Iterable[S],
    key: Callable[[S], Hashable] = attrgetter("id"),
) -> dict[Hashable, S]:
    """Map each item by key; the first occurrence of a key wins."""
    index: dict[Hashable, S] = {}
    for item in items:
        index.setdefault(key(item), item)
    return index


def left_join(
    primary: Iterable[P],
    secondary: Iterable[S],
    *,
    foreign_key: Callable[[P], Hashable],
    key: Callable[[S], Hashable] = attrgetter("id"),
) -> list[tuple[P, S | None]]:
    """
    Pair every primary item with its secondary match, or None.

    Primary order is preserved and unmatched items are kept.
    """
    lookup = index_by(secondary, key)
    return [(item, lookup.get(foreign_key(item))) for item in primary]


def count_by(
    items: Iterable[P],
    key: Callable[[P], Hashable],
    categories: Sequence[Hashable],
) -> dict[Hashable, int]:
    """Count items per category; every category appears, others are ignored."""
    counts = dict.fromkeys(categories, 0)
    for item in items:
        category = key(item)
        if category in counts:
            counts[category] += 1
    return counts


def most_recent(items: Sequence[P], limit: int = RECENT_LIMIT) -> list[P]:
    """
    First `limit` items.

    Planka returns activity newest-first, so this does not sort.
    """
    return list(items[:limit])


def display_name(user: User | None) -> str:
    """Best human-readable label for a user."""
    if user is None:
        return UNKNOWN_USER
    return user.name or user.username or user.email or UNKNOWN_USER


def contains_casefold(value: str | None, query: str) -> bool:
    return query.casefold() in (value or "").casefold()


def equals_casefold(value: str | None, query: str) -> bool:
    return (value or "").casefold() == query.casefold()
