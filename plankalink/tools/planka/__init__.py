"""
Planka Tools.

One MCP-aligned tool per Planka operation, generated from the operation's
parameter model.

Usage:
    from plankalink.tools.planka import create_planka_registry

    registry = create_planka_registry(client)
    result = await registry.get_required("planka_get_card_members").execute(
        {"cardId": "card-1"}
    )
"""

from .operations import PlankaOperationTool, build_planka_tools, create_planka_registry

__all__ = [
    "PlankaOperationTool",
    "build_planka_tools",
    "create_planka_registry",
]
