"""
plankalink Integrations Layer.

Each integration follows a consistent pattern:

1. Client: Handles authentication and API communication
2. Schemas: Pydantic models for request/response validation
3. Resources: One operation class per entity group
4. Tools: MCP-aligned wrappers (in plankalink/tools/)

Directory Structure:
    integrations/
    ├── base.py           # Errors, config and the base HTTP client
    └── planka/           # Planka kanban boards
        ├── client.py     # PlankaClient
        ├── schemas.py    # Pydantic models and validate()
        ├── included.py   # Join/summarize helpers
        └── resources/    # Operations per entity
"""

from plankalink.integrations.base import (
    AuthenticationError,
    BatchOperationError,
    EmptyDownloadError,
    IntegrationClient,
    IntegrationConfig,
    IntegrationError,
    LocalFileNotFoundError,
    NotFoundError,
    OperationError,
    TransportError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "BatchOperationError",
    "EmptyDownloadError",
    "IntegrationClient",
    "IntegrationConfig",
    "IntegrationError",
    "LocalFileNotFoundError",
    "NotFoundError",
    "OperationError",
    "TransportError",
    "ValidationError",
]
