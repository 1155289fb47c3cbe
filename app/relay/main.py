"""
FastAPI application for the settlement document extraction relay.

Provides endpoints for:
- Relaying base64 documents to the Anthropic Messages API
- Health checks
- Serving the static landing page
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .routers import extract, pages
from .services.ai import AnthropicClient, RelayError
from .services.relay_service import error_response

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def log_startup_banner() -> None:
    """Log a configuration summary without revealing the API key."""
    settings = get_settings()
    profile = settings.profile("server")
    logger.info("Server running on port %d", settings.port)
    logger.info("Environment: %s", settings.environment)
    logger.info("Model: %s", settings.anthropic_model)
    logger.info(
        "Deadline: %.1fs (platform limit %.1fs), max document size: %d bytes",
        profile.deadline_seconds,
        profile.ceiling_seconds,
        profile.max_document_bytes,
    )
    logger.info("API Key configured: %s", settings.api_configured)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Extraction Relay...")
    app.state.started_at = time.monotonic()
    app.state.upstream_client = AnthropicClient.from_settings(get_settings())
    log_startup_banner()
    yield
    logger.info("Shutting down Extraction Relay...")
    await app.state.upstream_client.aclose()


# Create FastAPI application
app = FastAPI(
    title="Settlement Extraction Relay",
    description="Relays settlement documents to an LLM for structured extraction",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(extract.router)
app.include_router(pages.router)  # Catch-all, must stay last


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    """Handle relay errors raised outside the relay itself."""
    context = getattr(request.state, "context", None)
    logger.error("Request failed: %s", exc)
    response = error_response(exc, context)
    return JSONResponse(status_code=response.status_code, content=response.body)
