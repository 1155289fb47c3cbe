"""
Serverless function entry point for the extraction relay.

Accepts an API Gateway / Netlify style event and returns one response dict.
Each invocation is stateless: the upstream client is created and closed
inside the call, and the shorter "function" platform profile applies.
"""

import asyncio
import base64
import json
import logging
from typing import Any

import httpx

from ..config import Settings, get_settings
from ..models import RequestContext
from ..services.ai import AnthropicClient, ConfigurationError, TransportError
from ..services.relay_service import (
    CONFIGURATION_ERROR_MESSAGE,
    error_response,
    relay_extraction,
)

logger = logging.getLogger(__name__)

PROFILE_NAME = "function"


def _allowed_origin(settings: Settings, origin: str | None) -> str:
    """Echo the caller origin when it is allowed, otherwise the first allowed origin."""
    origins = settings.cors_origins
    if "*" in origins:
        return "*"
    if origin in origins:
        return origin
    return origins[0]


def _cors_headers(settings: Settings, origin: str | None = None) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": _allowed_origin(settings, origin),
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
    }


def _create_response(
    status_code: int, body: Any, settings: Settings, origin: str | None = None
) -> dict[str, Any]:
    """Create an API Gateway compatible JSON response."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **_cors_headers(settings, origin)},
        "body": json.dumps(body),
    }


def _parse_body(event: dict[str, Any]) -> Any:
    """
    Decode the JSON body of the event.

    Raises:
        TransportError: If the body is not valid JSON.
    """
    body = event.get("body") or ""
    if isinstance(body, (dict, list)):
        return body
    try:
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")
        return json.loads(body)
    except ValueError as e:
        raise TransportError(f"Invalid JSON in request body: {e}") from e


async def handle_event(
    event: dict[str, Any],
    context: Any = None,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """
    Handle one function invocation.

    Args:
        event: Event with httpMethod, body and optional isBase64Encoded.
        context: Platform context; its aws_request_id is reused when present.
        settings: Configuration; defaults to the cached environment settings.
        transport: Optional httpx transport for the upstream client.

    Returns:
        Dict with statusCode, headers and a JSON string body.
    """
    settings = settings or get_settings()
    method = (event.get("httpMethod") or "").upper()
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    origin = headers.get("origin")

    if method == "OPTIONS":
        response = _create_response(200, None, settings, origin)
        response["body"] = ""
        return response

    if method != "POST":
        return _create_response(405, {"error": "Method Not Allowed"}, settings, origin)

    profile = settings.profile(PROFILE_NAME)
    request_context = RequestContext(deadline_seconds=profile.deadline_seconds)
    request_id = getattr(context, "aws_request_id", None)
    if request_id:
        request_context = request_context.model_copy(update={"request_id": request_id})

    if not settings.api_configured:
        request_context.logger(__name__).error("ANTHROPIC_API_KEY not found in environment variables")
        result = error_response(ConfigurationError(CONFIGURATION_ERROR_MESSAGE), request_context)
        return _create_response(result.status_code, result.body, settings, origin)

    try:
        body = _parse_body(event)
    except TransportError as e:
        request_context.logger(__name__).warning("%s", e)
        result = error_response(e, request_context)
        return _create_response(result.status_code, result.body, settings, origin)

    async with AnthropicClient.from_settings(settings, transport=transport) as client:
        result = await relay_extraction(
            body,
            settings=settings,
            profile=profile,
            client=client,
            context=request_context,
        )
    return _create_response(result.status_code, result.body, settings, origin)


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Synchronous entry point invoked by the function runtime."""
    return asyncio.run(handle_event(event, context))
