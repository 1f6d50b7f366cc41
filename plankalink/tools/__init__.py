"""
plankalink Tools.

Tools wrap client operations into callable units for tool-calling clients
(MCP-shaped listings and results).
"""

from .base import (
    CREATES,
    DELETES,
    READ_ONLY,
    UPDATES,
    ContentBlock,
    ContentType,
    Tool,
    ToolAnnotations,
    ToolResult,
)
from .registry import ToolRegistry, ToolRegistryError

__all__ = [
    "CREATES",
    "DELETES",
    "READ_ONLY",
    "UPDATES",
    "ContentBlock",
    "ContentType",
    "Tool",
    "ToolAnnotations",
    "ToolRegistry",
    "ToolRegistryError",
    "ToolResult",
]
