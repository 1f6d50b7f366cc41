"""
Shared plumbing for Planka resource operations.

Every operation follows the same template:

    1. validate parameters against their schema
    2. call the transport (path, method, body)
    3. validate the response envelope
    4. unwrap, or join/summarize side-loaded records

`PlankaTransport` is the only thing a resource depends on. `PlankaClient`
implements it over httpx; tests substitute a spy.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

from plankalink.integrations.base import OperationError
from plankalink.integrations.planka.schemas import INTEGRATION, validate

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")
ModelT = TypeVar("ModelT", bound=BaseModel)


@runtime_checkable
class PlankaTransport(Protocol):
    """Authenticated access to a Planka server."""

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Perform a JSON request and return the decoded body."""
        ...

    async def get_token(self) -> str:
        """Return a bearer token (acquired once, then reused)."""
        ...

    async def upload_file(self, path: str, file_path: str, *, token: str) -> Any:
        """Stream a local file as multipart/form-data and return the decoded body."""
        ...


def operation(purpose: str) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Wrap an async operation so any failure surfaces as one OperationError.

    Args:
        purpose: Verb phrase used in the message ("upload attachment")
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                error = OperationError(purpose, e, INTEGRATION)
                if isinstance(e, OperationError):
                    # Already logged where it first failed
                    logger.debug(f"[{INTEGRATION}] {error.message}")
                else:
                    logger.error(f"[{INTEGRATION}] {error.message}")
                raise error from e

        return wrapper

    return decorator


class Resource:
    """Base class for a group of operations on one Planka entity."""

    def __init__(self, transport: PlankaTransport):
        self._transport = transport

    @staticmethod
    def _params(model: type[ModelT], **values: Any) -> ModelT:
        """
        Validate operation parameters.

        Keyword names are translated to their wire aliases first, so errors
        report `userId` whether the call came from Python or from a tool.
        """
        fields = model.model_fields
        wire = {
            (fields[name].alias or name) if name in fields else name: value
            for name, value in values.items()
        }
        return validate(model, wire)

    async def _call(
        self,
        envelope: type[ModelT],
        path: str,
        *,
        method: str = "GET",
        body: dict[str, Any] | None = None,
    ) -> ModelT:
        """Perform a request and validate the response envelope."""
        raw = await self._transport.request(path, method=method, body=body)
        return validate(envelope, raw)
