"""
Base classes for plankalink integrations.

This module defines the foundational abstractions for the REST integration,
so every resource operation shares one error model and one HTTP client.

Design Principles:
1. Async-first: All I/O operations are async
2. Type-safe: Pydantic models for all data crossing the wire
3. Observable: Request/response logging hooks
4. Fail fast: No automatic retries; every failure surfaces once

Error Model:
    - TransportError: network failures and non-2xx responses
    - ValidationError: a value failed its schema (input or output)
    - OperationError: the single wrapped error each operation raises
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class IntegrationError(Exception):
    """Base exception for integration errors."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.integration = integration
        self.status_code = status_code
        self.response_body = response_body

    @property
    def message(self) -> str:
        return self.args[0]

    def __str__(self) -> str:
        parts = [f"[{self.integration}] {self.message}"]
        if self.status_code:
            parts.append(f"(status={self.status_code})")
        return " ".join(parts)


class TransportError(IntegrationError):
    """Raised for network failures and non-2xx responses."""


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403 or token acquisition)."""


class NotFoundError(TransportError):
    """Raised when a remote resource is not found (404)."""


class ValidationError(IntegrationError):
    """Raised when a value does not match its schema."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        path: str = "",
        expected: str = "",
        actual: Any = None,
        validation_errors: list[dict[str, Any]] | None = None,
        **kwargs,
    ):
        super().__init__(message, integration, **kwargs)
        self.path = path
        self.expected = expected
        self.actual = actual
        self.validation_errors = validation_errors or []


class LocalFileNotFoundError(IntegrationError):
    """Raised when a local file to upload does not exist."""

    def __init__(self, file_path: str, integration: str):
        super().__init__(f"File not found: {file_path}", integration)
        self.file_path = file_path


class EmptyDownloadError(IntegrationError):
    """Raised when a remote resource downloads as zero bytes."""

    def __init__(self, url: str, integration: str):
        super().__init__(f"Downloaded file is empty: {url}", integration)
        self.url = url


class BatchOperationError(IntegrationError):
    """Raised when any item of a concurrent batch fails."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        failures: dict[str, BaseException],
        total: int,
    ):
        super().__init__(message, integration)
        self.failures = failures
        self.total = total


class OperationError(IntegrationError):
    """
    Wrapped failure of a single operation.

    The message is "Failed to <purpose>: <cause message>". `cause` always
    points at the innermost non-wrapper exception, so nested operations
    (upload from URL delegating to upload) still expose the original kind.
    """

    def __init__(self, operation: str, cause: BaseException, integration: str):
        if isinstance(cause, IntegrationError):
            detail = cause.message
        else:
            detail = str(cause) or type(cause).__name__

        root = cause.cause if isinstance(cause, OperationError) else cause

        super().__init__(
            f"Failed to {operation}: {detail}",
            integration,
            status_code=getattr(root, "status_code", None),
            response_body=getattr(root, "response_body", None),
        )
        self.operation = operation
        self.cause = root


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class IntegrationConfig:
    """Configuration for an integration client."""

    # Authentication
    access_token: str | None = None

    # Connection
    base_url: str = ""
    timeout: float = 30.0

    # Observability
    log_requests: bool = False
    log_responses: bool = False


# =============================================================================
# Base Client
# =============================================================================


class IntegrationClient(ABC):
    """
    Abstract base class for integration clients.

    Provides common functionality:
    - HTTP client management
    - Authentication header injection
    - Error mapping
    - Request/response logging

    Subclasses must implement:
    - name: Integration identifier
    - _get_auth_headers(): Return authentication headers
    """

    def __init__(
        self,
        config: IntegrationConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the integration client.

        Args:
            config: Integration configuration
            transport: Optional httpx transport (mock transports in tests)
        """
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this integration."""
        ...

    @abstractmethod
    async def _get_auth_headers(self) -> dict[str, str]:
        """Return authentication headers for requests."""
        ...

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        """
        Execute a single HTTP request.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: URL path (will be appended to base_url)
            params: Query parameters
            json: JSON body
            files: Multipart files (file objects are streamed)
            headers: Additional headers
            authenticated: Whether to inject authentication headers

        Returns:
            httpx.Response

        Raises:
            TransportError: On network failure or non-2xx status
        """
        client = await self._get_client()

        request_headers: dict[str, str] = {}
        if authenticated:
            request_headers.update(await self._get_auth_headers())
        if headers:
            request_headers.update(headers)

        if self.config.log_requests:
            logger.debug(f"[{self.name}] {method} {path} params={params} body={json}")

        try:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=json,
                files=files,
                headers=request_headers,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timeout: {e}", self.name) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}", self.name) from e

        if self.config.log_responses:
            logger.debug(
                f"[{self.name}] Response: status={response.status_code} "
                f"body={response.text[:500] if response.text else 'empty'}"
            )

        self._check_response(response)
        return response

    def _check_response(self, response: httpx.Response) -> None:
        """
        Check response for errors and raise appropriate exceptions.

        Args:
            response: HTTP response to check

        Raises:
            AuthenticationError: For 401/403
            NotFoundError: For 404
            TransportError: For other non-2xx statuses
        """
        if response.is_success:
            return

        status = response.status_code
        body = response.text

        if status == 401 or status == 403:
            raise AuthenticationError(
                f"Authentication failed: {body}",
                self.name,
                status_code=status,
                response_body=body,
            )

        if status == 404:
            raise NotFoundError(
                f"Resource not found: {body}",
                self.name,
                status_code=status,
                response_body=body,
            )

        raise TransportError(
            f"Request failed ({status}): {body}",
            self.name,
            status_code=status,
            response_body=body,
        )

    async def health_check(self) -> bool:
        """
        Check if the integration is healthy/reachable.

        Returns:
            True if healthy, False otherwise
        """
        return True

    async def __aenter__(self) -> IntegrationClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
