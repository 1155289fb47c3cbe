"""Pytest configuration and fixtures."""

import asyncio
import base64
import json
from typing import Any, Callable, Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from app.relay.config import PlatformProfile, Settings, get_settings
from app.relay.main import app
from app.relay.routers.extract import get_server_profile, get_upstream_client
from app.relay.services.ai import AnthropicClient

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

UPSTREAM_SUCCESS_BODY = {
    "id": "msg_01",
    "type": "message",
    "role": "assistant",
    "content": [
        {
            "type": "text",
            "text": json.dumps(
                {
                    "clientName": {
                        "data": "Jane Doe",
                        "confidence": "high",
                        "source": "RE: Jane Doe",
                        "notes": "",
                        "location": "Header",
                    }
                }
            ),
        }
    ],
}


class UpstreamStub:
    """Records requests sent upstream and answers with a canned response."""

    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        content: bytes | None = None,
        hang: bool = False,
        error: Exception | None = None,
    ):
        self.status_code = status_code
        self.body = UPSTREAM_SUCCESS_BODY if body is None else body
        self.content = content
        self.hang = hang
        self.error = error
        self.requests: list[httpx.Request] = []
        self.cancelled = False

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.hang:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


def make_body(
    data: str | None = None,
    media_type: str = "image/png",
    content_type: str = "image",
    encoding: str = "base64",
) -> dict[str, Any]:
    """Build an inbound /extract body in Messages API shape."""
    if data is None:
        data = base64.b64encode(PNG_BYTES).decode("ascii")
    return {
        "messages": [
            {
                "role": "user",
                "content": [
                    {
                        "type": content_type,
                        "source": {"type": encoding, "media_type": media_type, "data": data},
                    }
                ],
            }
        ]
    }


@pytest.fixture
def settings() -> Settings:
    """Settings with a test API key, isolated from any .env file."""
    return Settings(_env_file=None, anthropic_api_key="test-key")


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def valid_body() -> dict[str, Any]:
    return make_body()


@pytest.fixture
def make_client(settings: Settings) -> Generator[Callable[..., TestClient], None, None]:
    """
    Factory for a test client whose upstream calls go to a stub.

    Accepts the stub plus optional settings and server profile overrides.
    """
    clients: list[TestClient] = []

    def _make(
        stub: UpstreamStub,
        app_settings: Settings | None = None,
        profile: PlatformProfile | None = None,
    ) -> TestClient:
        active_settings = app_settings or settings
        upstream_client = AnthropicClient.from_settings(active_settings, transport=stub.transport)
        app.dependency_overrides[get_settings] = lambda: active_settings
        app.dependency_overrides[get_upstream_client] = lambda: upstream_client
        if profile is not None:
            app.dependency_overrides[get_server_profile] = lambda: profile
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        test_client.__exit__(None, None, None)
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client: Callable[..., TestClient], upstream: UpstreamStub) -> TestClient:
    """Create a test client backed by the default successful upstream stub."""
    return make_client(upstream)
