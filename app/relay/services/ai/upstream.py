"""
Client for the Anthropic Messages API.

Sends one document plus the extraction prompt per call. Each call races the
HTTP request against a deadline; when the deadline wins, the request task is
cancelled so the connection is released before the platform kills the
invocation.
"""

import asyncio
import contextlib
import logging
from typing import Any

import httpx

from ...config import Settings
from ...models import ExtractionRequest
from .exceptions import TransportError, UpstreamError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

MESSAGES_PATH = "/v1/messages"


class AnthropicClient:
    """
    Minimal async client for a single Messages API endpoint.

    The client owns an ``httpx.AsyncClient``; close it with ``aclose()`` or use
    the client as an async context manager.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.anthropic.com",
        version: str = "2023-06-01",
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 4096,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Anthropic API key sent in the x-api-key header.
            base_url: API root, without the /v1/messages path.
            version: Value of the anthropic-version header.
            model: Model identifier to request.
            max_tokens: Upper bound on the generated response.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self.model = model
        self.max_tokens = max_tokens
        # Timing is governed by the per-call deadline, not by httpx.
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
                "anthropic-version": version,
            },
            timeout=httpx.Timeout(None),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "AnthropicClient":
        return cls(
            settings.anthropic_api_key or "",
            base_url=settings.anthropic_base_url,
            version=settings.anthropic_version,
            model=settings.anthropic_model,
            max_tokens=settings.max_tokens,
            transport=transport,
        )

    async def __aenter__(self) -> "AnthropicClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def build_payload(self, request: ExtractionRequest, prompt: str) -> dict[str, Any]:
        """Combine the document block and prompt into one user message."""
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        request.to_content_block(),
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        }

    async def create_message(
        self,
        request: ExtractionRequest,
        prompt: str,
        deadline_seconds: float,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> dict[str, Any]:
        """
        Send the document upstream and return the parsed JSON response.

        Args:
            request: Validated extraction request.
            prompt: Instruction text appended after the document block.
            deadline_seconds: Time allowed before the call is cancelled.
            log: Logger to use, usually tagged with the request id.

        Returns:
            The upstream JSON body, unchanged.

        Raises:
            UpstreamTimeoutError: If the deadline elapses first.
            UpstreamError: If upstream answers with a non-success status.
            TransportError: On network failures or an unreadable body.
        """
        log = log or logger
        payload = self.build_payload(request, prompt)

        task = asyncio.create_task(self._http.post(MESSAGES_PATH, json=payload))
        try:
            done, _ = await asyncio.wait({task}, timeout=deadline_seconds)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if task not in done:
            task.cancel()
            # Wait for the cancellation to finish so the connection is released.
            with contextlib.suppress(asyncio.CancelledError):
                await task
            log.warning("Upstream call cancelled after %.1fs deadline", deadline_seconds)
            raise UpstreamTimeoutError(deadline_seconds)

        try:
            response = task.result()
        except httpx.HTTPError as e:
            log.error("Upstream transport failure: %s", e)
            raise TransportError(f"Failed to reach upstream API: {e}") from e

        if not response.is_success:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            message = _error_message(error_data) or f"API Error: {response.status_code}"
            log.error("Upstream API error %d: %s", response.status_code, message)
            raise UpstreamError(response.status_code, message)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Upstream returned a response that is not valid JSON") from e


def _error_message(error_data: Any) -> str | None:
    """Pull error.message out of an upstream error body, if present."""
    if not isinstance(error_data, dict):
        return None
    error = error_data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None
