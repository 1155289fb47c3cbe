"""
Router for the extraction relay endpoints.

Handles:
- Document extraction relay
- Health check
"""

import json
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import PlatformProfile, Settings, get_settings
from ..models import HealthResponse, RequestContext
from ..services.ai import AnthropicClient, ConfigurationError, TransportError
from ..services.relay_service import CONFIGURATION_ERROR_MESSAGE, relay_extraction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["extract"])


def get_server_profile(settings: Settings = Depends(get_settings)) -> PlatformProfile:
    """Platform profile of the long-running server process."""
    return settings.profile("server")


def get_upstream_client(request: Request) -> AnthropicClient:
    """Upstream client created by the application lifespan."""
    return request.app.state.upstream_client


@router.post("/extract")
async def extract(
    request: Request,
    settings: Settings = Depends(get_settings),
    profile: PlatformProfile = Depends(get_server_profile),
    client: AnthropicClient = Depends(get_upstream_client),
) -> JSONResponse:
    """
    Relay a base64 document to the upstream model and return its JSON response.

    The body follows the Messages API shape:
    ``{"messages": [{"role": "user", "content": [{"type": ..., "source": ...}]}]}``.
    """
    context = RequestContext(deadline_seconds=profile.deadline_seconds)
    request.state.context = context
    context.logger(__name__).info("Processing document extraction request")

    if not settings.api_configured:
        raise ConfigurationError(CONFIGURATION_ERROR_MESSAGE)

    try:
        body = json.loads(await request.body())
    except ValueError as e:
        raise TransportError("Request body is not valid JSON") from e

    result = await relay_extraction(
        body,
        settings=settings,
        profile=profile,
        client=client,
        context=context,
    )
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.get("/health", response_model=HealthResponse, response_model_by_alias=True)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """Liveness probe; always 200."""
    started_at = getattr(request.app.state, "started_at", None)
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=time.monotonic() - started_at if started_at is not None else None,
        api_configured=settings.api_configured,
    )
