"""
Tool registry: the set of Planka tools a dispatcher can call, by name.

Usage:
    registry = create_planka_registry(client)
    result = await registry.get_required("planka_get_card_members").execute(
        {"cardId": "card-1"}
    )
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from plankalink.tools.base import Tool

logger = logging.getLogger(__name__)


class ToolRegistryError(Exception):
    """Duplicate, malformed or unknown tool."""


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Add a tool.

        Raises:
            ToolRegistryError: If the name is taken or the input schema is
                not a JSON Schema object
        """
        if tool.name in self._tools:
            raise ToolRegistryError(f"Duplicate tool name: {tool.name}")

        schema = tool.input_schema
        if schema.get("type") != "object" or not isinstance(schema.get("properties"), dict):
            raise ToolRegistryError(f"{tool.name}: input schema must be an object with properties")

        self._tools[tool.name] = tool
        logger.debug(f"[tool_registry] Registered {tool.name}")

    def register_all(self, tools: Iterable[Tool]) -> None:
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def get_required(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolRegistryError(f"Unknown tool: {name}") from None

    def list_names(self) -> list[str]:
        """Tool names in registration order."""
        return list(self._tools)

    def to_mcp_schemas(self) -> list[dict[str, Any]]:
        return [tool.to_mcp_schema() for tool in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
