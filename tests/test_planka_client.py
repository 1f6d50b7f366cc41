"""
Tests for the Planka HTTP client.

Uses httpx.MockTransport so requests never leave the process.
"""

import asyncio
import json

import httpx
import pytest

from payloads import attachment_payload, membership_payload, user_payload
from plankalink.integrations.base import (
    AuthenticationError,
    NotFoundError,
    OperationError,
    TransportError,
)
from plankalink.integrations.planka import PlankaClient, PlankaConfig
from plankalink.integrations.planka.resources import PlankaTransport

BASE_URL = "https://planka.example.com"


class FakePlanka:
    """Minimal Planka server behind a MockTransport."""

    def __init__(self, token="tok-123"):
        self.token = token
        self.logins = 0
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, dict]] = {}

    def route(self, method, path, status=200, payload=None, text=None):
        body = {"text": text} if text is not None else {"json": payload}
        self.routes[(method, path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path == "/api/access-tokens":
            self.logins += 1
            body = json.loads(request.content)
            if body["password"] != "secret":
                return httpx.Response(401, text="Invalid credentials")
            return httpx.Response(200, json={"item": self.token})

        if request.headers.get("authorization") != f"Bearer {self.token}":
            return httpx.Response(401, text="Unauthorized")

        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="Not found")
        status, body = route
        return httpx.Response(status, **body)

    def client(self, **overrides):
        config = PlankaConfig(
            base_url=BASE_URL,
            email_or_username=overrides.pop("email_or_username", "agent@example.com"),
            password=overrides.pop("password", "secret"),
            **overrides,
        )
        return PlankaClient(config, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def server():
    return FakePlanka()


# =============================================================================
# Configuration Tests
# =============================================================================


class TestPlankaConfig:
    """Tests for PlankaConfig validation."""

    def test_requires_base_url(self):
        with pytest.raises(ValueError, match="base URL"):
            PlankaConfig(email_or_username="a", password="b")

    def test_requires_credentials(self):
        with pytest.raises(ValueError, match="credentials"):
            PlankaConfig(base_url=BASE_URL, email_or_username="a")

    def test_access_token_is_enough(self):
        config = PlankaConfig(base_url=BASE_URL, access_token="tok")

        assert config.access_token == "tok"
        assert config.timeout == 30.0

    def test_client_satisfies_transport_protocol(self, server):
        assert isinstance(server.client(), PlankaTransport)


# =============================================================================
# Authentication Tests
# =============================================================================


class TestAuthentication:
    """Tests for token acquisition."""

    @pytest.mark.asyncio
    async def test_logs_in_once(self, server):
        server.route("GET", "/api/users", payload={"items": [user_payload()]})

        async with server.client() as client:
            await client.users.list()
            await client.users.list()

        assert server.logins == 1
        login = server.requests[0]
        assert json.loads(login.content) == {
            "emailOrUsername": "agent@example.com",
            "password": "secret",
        }
        assert "authorization" not in login.headers

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_login(self, server):
        async with server.client() as client:
            tokens = await asyncio.gather(*(client.get_token() for _ in range(5)))

        assert set(tokens) == {"tok-123"}
        assert server.logins == 1

    @pytest.mark.asyncio
    async def test_access_token_skips_login(self, server):
        server.route("GET", "/api/users", payload={"items": []})
        config = PlankaConfig(base_url=BASE_URL, access_token="tok-123")

        async with PlankaClient(config, transport=httpx.MockTransport(server.handler)) as client:
            assert await client.users.list() == []

        assert server.logins == 0

    @pytest.mark.asyncio
    async def test_bad_credentials(self, server):
        async with server.client(password="wrong") as client:
            with pytest.raises(AuthenticationError) as exc_info:
                await client.get_token()

        assert exc_info.value.status_code == 401
        assert "Invalid credentials" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_bad_credentials_through_operation(self, server):
        async with server.client(password="wrong") as client:
            with pytest.raises(OperationError) as exc_info:
                await client.users.list()

        assert isinstance(exc_info.value.cause, AuthenticationError)
        assert exc_info.value.message.startswith("Failed to get users: Authentication failed")


# =============================================================================
# Request Tests
# =============================================================================


class TestRequests:
    """Tests for JSON requests and error mapping."""

    @pytest.mark.asyncio
    async def test_json_body(self, server):
        server.route("POST", "/api/cards/c1/card-memberships", payload={"item": membership_payload()})

        async with server.client() as client:
            membership = await client.card_memberships.add("c1", "u1")

        assert membership.id == "m1"
        sent = server.requests[-1]
        assert json.loads(sent.content) == {"userId": "u1"}
        assert sent.headers["accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_not_found(self, server):
        async with server.client() as client:
            with pytest.raises(NotFoundError) as exc_info:
                await client.request("/api/cards/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.response_body == "Not found"

    @pytest.mark.asyncio
    async def test_server_error(self, server):
        server.route("GET", "/api/notifications", status=500, text="boom")

        async with server.client() as client:
            with pytest.raises(TransportError) as exc_info:
                await client.request("/api/notifications")

        assert exc_info.value.message == "Request failed (500): boom"

    @pytest.mark.asyncio
    async def test_unauthorized(self, server):
        server.route("GET", "/api/users", payload={"items": []})
        config = PlankaConfig(base_url=BASE_URL, access_token="stale")

        async with PlankaClient(config, transport=httpx.MockTransport(server.handler)) as client:
            with pytest.raises(AuthenticationError) as exc_info:
                await client.request("/api/users")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_empty_body(self, server):
        server.route("DELETE", "/api/attachments/att1", status=204, text="")

        async with server.client() as client:
            assert await client.request("/api/attachments/att1", method="DELETE") is None
            assert await client.attachments.delete("att1") == {"success": True}

    @pytest.mark.asyncio
    async def test_unparseable_body(self, server):
        server.route("GET", "/api/users", text="<html>proxy error</html>")

        async with server.client() as client:
            with pytest.raises(TransportError, match="Failed to parse response"):
                await client.request("/api/users")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        config = PlankaConfig(base_url=BASE_URL, access_token="tok")
        async with PlankaClient(config, transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(TransportError, match="Network error"):
                await client.request("/api/users")

    @pytest.mark.asyncio
    async def test_health_check(self, server):
        server.route("GET", "/api/users/me", payload={"item": user_payload()})

        async with server.client() as client:
            assert await client.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure(self, server):
        async with server.client() as client:
            assert await client.health_check() is False


# =============================================================================
# Upload Tests
# =============================================================================


class TestUpload:
    """Tests for multipart uploads."""

    @pytest.mark.asyncio
    async def test_multipart_upload(self, server, sample_file):
        server.route("POST", "/api/cards/c1/attachments", payload={"item": attachment_payload()})

        async with server.client() as client:
            attachment = await client.attachments.upload("c1", str(sample_file))

        assert attachment.name == "report.pdf"
        upload = server.requests[-1]
        assert upload.headers["authorization"] == "Bearer tok-123"
        assert upload.headers["content-type"].startswith("multipart/form-data")
        assert b'name="file"; filename="report.pdf"' in upload.content
        assert b"Content-Type: application/pdf" in upload.content
        assert b"%PDF-1.4 test document" in upload.content

    @pytest.mark.asyncio
    async def test_upload_from_url_uses_client_transport(self, server, tmp_path):
        server.route("POST", "/api/cards/c1/attachments", payload={"item": attachment_payload(name="logo.png")})

        def handler(request):
            if request.url.host == "cdn.example.com":
                return httpx.Response(200, content=b"\x89PNG data", headers={"content-type": "image/png"})
            return server.handler(request)

        config = PlankaConfig(
            base_url=BASE_URL,
            email_or_username="agent@example.com",
            password="secret",
            temp_dir=str(tmp_path / "downloads"),
        )
        async with PlankaClient(config, transport=httpx.MockTransport(handler)) as client:
            attachment = await client.attachments.upload_from_url("c1", "https://cdn.example.com/images/logo")

        assert attachment.name == "logo.png"
        upload = server.requests[-1]
        assert b'filename="logo.png"' in upload.content
        assert b"\x89PNG data" in upload.content
        assert list((tmp_path / "downloads").iterdir()) == []
