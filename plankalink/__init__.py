"""
plankalink - validated async operations for the Planka kanban API.

plankalink turns tool invocations into Planka REST calls:

- **Schema validation**: Parameters and responses pass through pydantic models
- **Side-loaded joins**: `included` records are joined onto their owners
- **Single error surface**: Every operation fails with one OperationError
- **MCP-aligned tools**: One tool per operation, schema from its parameters

Quick Start:
    >>> from plankalink import PlankaClient, PlankaConfig
    >>>
    >>> async with PlankaClient(PlankaConfig(
    ...     base_url="https://planka.example.com",
    ...     email_or_username="agent@example.com",
    ...     password="secret",
    ... )) as client:
    ...     members = await client.card_memberships.list_for_card("card-1")
"""

__version__ = "0.1.0"
__license__ = "MIT"

from plankalink.integrations import IntegrationError, OperationError, ValidationError
from plankalink.integrations.planka import PlankaClient, PlankaConfig
from plankalink.tools.planka import create_planka_registry

__all__ = [
    "__version__",
    "__license__",
    "IntegrationError",
    "OperationError",
    "PlankaClient",
    "PlankaConfig",
    "ValidationError",
    "create_planka_registry",
]
