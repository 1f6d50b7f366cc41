"""
Dependency Injection for plankalink.

Provides process-wide instances of the settings, the Planka client and the
tool registry for whatever dispatch layer hosts the tools.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional

from plankalink.config.schemas import AppSettings
from plankalink.integrations.planka import PlankaClient
from plankalink.tools.planka import create_planka_registry
from plankalink.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return AppSettings(
        # Planka
        planka_base_url=os.getenv("PLANKA_BASE_URL", ""),
        planka_agent_email=os.getenv("PLANKA_AGENT_EMAIL", ""),
        planka_agent_password=os.getenv("PLANKA_AGENT_PASSWORD", ""),
        planka_access_token=os.getenv("PLANKA_ACCESS_TOKEN"),
        # HTTP
        timeout=float(os.getenv("PLANKALINK_TIMEOUT", "30")),
        download_timeout=float(os.getenv("PLANKALINK_DOWNLOAD_TIMEOUT", "60")),
        # Attachments
        temp_dir=os.getenv("PLANKALINK_TEMP_DIR"),
        # Logging
        log_level=os.getenv("PLANKALINK_LOG_LEVEL", "INFO").upper(),
        log_requests=os.getenv("PLANKALINK_LOG_REQUESTS", "false").lower() == "true",
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the process."""
    logging.basicConfig(
        level=level or get_settings().log_level,
        format=LOG_FORMAT,
    )


# Global instances (initialized on first access)
_client: Optional[PlankaClient] = None
_registry: Optional[ToolRegistry] = None


def get_planka_client() -> PlankaClient:
    """
    Get the Planka client.

    Initializes the client on first call.

    Raises:
        ValueError: If the environment lacks a base URL or credentials
    """
    global _client
    if _client is None:
        settings = get_settings()
        _client = PlankaClient(settings.to_planka_config())
        logger.info(f"Planka client configured for {settings.planka_base_url}")
    return _client


def get_tool_registry() -> ToolRegistry:
    """Get the registry of Planka tools."""
    global _registry
    if _registry is None:
        _registry = create_planka_registry(get_planka_client())
    return _registry


async def initialize_services() -> None:
    """Configure logging and build the client and tool registry."""
    configure_logging()
    client = get_planka_client()
    get_tool_registry()

    if not await client.health_check():
        logger.warning("Planka server is not reachable with the configured credentials")


async def shutdown_services() -> None:
    """Close the client and drop the cached instances."""
    global _client, _registry
    if _client is not None:
        await _client.close()
    _client = None
    _registry = None
    logger.info("plankalink services shut down")
