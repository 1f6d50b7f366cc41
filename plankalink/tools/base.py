"""
Tool primitives for plankalink.

A tool is one Planka operation packaged for a tool-calling client: a name,
a JSON Schema for its arguments, behavioral hints, and an async `execute`
that never raises for operation failures. Failures come back as an error
ToolResult carrying the message and, when the server answered, its HTTP
status.

Shapes follow the Model Context Protocol tool listing and call result:
    https://modelcontextprotocol.io/specification/
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from plankalink.integrations.base import IntegrationError


class ContentType(Enum):
    TEXT = "text"
    RESOURCE_LINK = "resource_link"


@dataclass(frozen=True, slots=True)
class ContentBlock:
    """A text block, or a link to a resource on the Planka server."""

    type: ContentType
    text: str | None = None
    uri: str | None = None
    name: str | None = None

    @classmethod
    def text_block(cls, text: str) -> ContentBlock:
        return cls(type=ContentType.TEXT, text=text)

    @classmethod
    def link(cls, uri: str, name: str | None = None) -> ContentBlock:
        """Link to a downloadable resource, e.g. an attachment URL."""
        return cls(type=ContentType.RESOURCE_LINK, uri=uri, name=name)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value}
        for key in ("text", "uri", "name"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True, slots=True)
class ToolAnnotations:
    """
    Advisory hints about what a tool does to the board.

    Attributes:
        title: Display title
        read_only: Only reads from Planka
        destructive: Removes data (attachments, memberships)
        idempotent: Repeating the call changes nothing further
    """

    title: str | None = None
    read_only: bool = False
    destructive: bool = False
    idempotent: bool = False

    def with_title(self, title: str) -> ToolAnnotations:
        return ToolAnnotations(
            title=title,
            read_only=self.read_only,
            destructive=self.destructive,
            idempotent=self.idempotent,
        )

    def to_dict(self) -> dict[str, Any]:
        # Every Planka tool talks to a remote server
        data: dict[str, Any] = {
            "readOnlyHint": self.read_only,
            "destructiveHint": self.destructive,
            "idempotentHint": self.idempotent,
            "openWorldHint": True,
        }
        if self.title is not None:
            data["title"] = self.title
        return data


# Presets used by the Planka tools
READ_ONLY = ToolAnnotations(read_only=True, idempotent=True)
CREATES = ToolAnnotations()
UPDATES = ToolAnnotations(idempotent=True)
DELETES = ToolAnnotations(destructive=True, idempotent=True)


@dataclass(frozen=True, slots=True)
class ToolResult:
    """
    Outcome of a tool call.

    `structured_content` holds the operation result as JSON-ready data; on
    failure it holds the error message and HTTP status.
    """

    content: tuple[ContentBlock, ...]
    is_error: bool = False
    structured_content: dict[str, Any] | None = None
    status_code: int | None = None

    @classmethod
    def ok(
        cls,
        text: str,
        structured: dict[str, Any],
        links: tuple[ContentBlock, ...] = (),
    ) -> ToolResult:
        return cls(
            content=(ContentBlock.text_block(text), *links),
            structured_content=structured,
        )

    @classmethod
    def failure(cls, error: IntegrationError) -> ToolResult:
        """Error result for a failed operation."""
        return cls(
            content=(ContentBlock.text_block(f"Error: {error.message}"),),
            is_error=True,
            structured_content={"error": error.message, "status": error.status_code},
            status_code=error.status_code,
        )

    @property
    def text(self) -> str:
        """First text block, or an empty string."""
        return next(
            (block.text for block in self.content if block.type is ContentType.TEXT and block.text),
            "",
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "content": [block.to_dict() for block in self.content],
            "isError": self.is_error,
        }
        if self.structured_content is not None:
            data["structuredContent"] = self.structured_content
        return data


class Tool(ABC):
    """A named, schema-described async callable."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def description(self) -> str: ...

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema object for the arguments."""
        ...

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations()

    @abstractmethod
    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """Run the tool; operation failures are returned, not raised."""
        ...

    def to_mcp_schema(self) -> dict[str, Any]:
        """Entry for an MCP `tools/list` response."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
            "annotations": self.annotations.to_dict(),
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
