"""
Planka API Client.

This client provides async access to Planka's REST API. It handles
authentication (access token acquisition and caching), JSON requests,
streamed multipart uploads and error mapping. Resource operations hang off
the client:

Usage:
    async with PlankaClient(config) as client:
        members = await client.card_memberships.list_for_card("card-1")
        attachment = await client.attachments.upload("card-1", "/tmp/report.pdf")
        await client.notifications.mark_all_read()

API Reference:
    https://docs.planka.cloud/docs/api/
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from plankalink.integrations.base import (
    AuthenticationError,
    IntegrationClient,
    IntegrationConfig,
    TransportError,
)
from plankalink.integrations.planka.resources import (
    ActionOperations,
    AttachmentOperations,
    CardMembershipOperations,
    NotificationOperations,
    UserOperations,
)
from plankalink.integrations.planka.resources.attachments import DEFAULT_USER_AGENT
from plankalink.integrations.planka.schemas import TokenEnvelope, validate

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class PlankaConfig(IntegrationConfig):
    """Configuration for Planka client."""

    # Credentials (or a pre-issued access_token)
    email_or_username: str = ""
    password: str = ""

    # Attachments
    temp_dir: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    download_timeout: float = 60.0

    def __post_init__(self):
        """Validate configuration."""
        if not self.base_url:
            raise ValueError("Planka base URL is required")
        if not self.access_token and not (self.email_or_username and self.password):
            raise ValueError("Planka credentials are required (access token or email and password)")


# =============================================================================
# Client
# =============================================================================


class PlankaClient(IntegrationClient):
    """
    Async client for the Planka API.

    Implements PlankaTransport for the resource operations:
    - request(): authenticated JSON calls
    - get_token(): bearer token, acquired once and reused
    - upload_file(): multipart upload streamed from disk
    """

    def __init__(
        self,
        config: PlankaConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize Planka client.

        Args:
            config: Planka configuration
            transport: Optional httpx transport, also used for URL downloads
        """
        super().__init__(config, transport=transport)
        self._config: PlankaConfig = config
        self._token: str | None = config.access_token
        self._token_lock = asyncio.Lock()

        self.attachments = AttachmentOperations(
            self,
            temp_dir=config.temp_dir,
            user_agent=config.user_agent,
            download_timeout=config.download_timeout,
            download_transport=transport,
        )
        self.actions = ActionOperations(self)
        self.card_memberships = CardMembershipOperations(self)
        self.users = UserOperations(self)
        self.notifications = NotificationOperations(self)

    @property
    def name(self) -> str:
        """Integration name."""
        return "planka"

    # =========================================================================
    # Authentication
    # =========================================================================

    async def get_token(self) -> str:
        """
        Return a bearer token, logging in on first use.

        Raises:
            AuthenticationError: If the server rejects the credentials
        """
        if self._token:
            return self._token

        async with self._token_lock:
            if self._token:
                return self._token

            logger.info(f"[planka] Authenticating as {self._config.email_or_username}")

            try:
                response = await self._request(
                    "POST",
                    "/api/access-tokens",
                    json={
                        "emailOrUsername": self._config.email_or_username,
                        "password": self._config.password,
                    },
                    authenticated=False,
                )
            except TransportError as e:
                raise AuthenticationError(
                    f"Authentication failed: {e.message}",
                    self.name,
                    status_code=e.status_code,
                    response_body=e.response_body,
                ) from e

            self._token = validate(TokenEnvelope, self._decode(response)).item
            return self._token

    async def _get_auth_headers(self) -> dict[str, str]:
        """Return Planka authentication headers."""
        return {"Authorization": f"Bearer {await self.get_token()}"}

    # =========================================================================
    # Transport
    # =========================================================================

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Perform an authenticated JSON request.

        Args:
            path: API path, e.g. /api/cards/123
            method: HTTP method
            body: JSON body

        Returns:
            Decoded JSON body (None for an empty body)
        """
        response = await self._request(method, path, json=body)
        return self._decode(response)

    async def upload_file(self, path: str, file_path: str, *, token: str) -> Any:
        """
        Upload a local file as multipart/form-data.

        The file object is handed to httpx, which streams it in chunks.

        Args:
            path: Upload endpoint
            file_path: Local file
            token: Bearer token

        Returns:
            Decoded JSON body
        """
        local = Path(file_path)
        content_type = mimetypes.guess_type(local.name)[0] or "application/octet-stream"

        with open(local, "rb") as fh:
            response = await self._request(
                "POST",
                path,
                files={"file": (local.name, fh, content_type)},
                headers={"Authorization": f"Bearer {token}"},
                authenticated=False,
            )

        return self._decode(response)

    def _decode(self, response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Failed to parse response: {response.text[:200]}",
                self.name,
                status_code=response.status_code,
                response_body=response.text,
            ) from e

    # =========================================================================
    # Health Check
    # =========================================================================

    async def health_check(self) -> bool:
        """
        Check if the Planka API is reachable with the configured credentials.

        Returns:
            True if healthy
        """
        try:
            await self.request("/api/users/me")
            return True
        except Exception as e:
            logger.warning(f"[planka] Health check failed: {e}")
            return False
