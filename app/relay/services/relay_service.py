"""
Core extraction relay shared by every deployment adapter.

Validates the inbound document, forwards it upstream under the platform
deadline, and maps every outcome onto a status code and JSON body.
"""

import logging
from typing import Any

from ..config import PlatformProfile, Settings
from ..models import ErrorResponse, RelayResponse, RequestContext
from .ai.exceptions import (
    ConfigurationError,
    RelayError,
    RequestValidationError,
    TransportError,
    UpstreamError,
    UpstreamTimeoutError,
)
from .ai.prompts import build_extraction_prompt
from .ai.upstream import AnthropicClient
from .ai.validation import validate_extraction_request

logger = logging.getLogger(__name__)

CONFIGURATION_ERROR_MESSAGE = (
    "API Key is not configured. Please set ANTHROPIC_API_KEY in the environment."
)
INVALID_CREDENTIAL_MESSAGE = "Upstream API rejected the configured API key. Contact the administrator."
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment and try again."
GENERIC_FAILURE_MESSAGE = "Failed to process document"


def _error_body(
    message: str, context: RequestContext | None, details: list[str] | None = None
) -> dict[str, Any]:
    return ErrorResponse(
        error=message,
        request_id=context.request_id if context else None,
        details=details,
    ).model_dump(by_alias=True, exclude_none=True)


def error_response(exc: RelayError, context: RequestContext | None = None) -> RelayResponse:
    """
    Map a relay failure onto a caller-facing response.

    Credential-related upstream failures never carry the upstream message.
    """
    if isinstance(exc, ConfigurationError):
        return RelayResponse(status_code=500, body=_error_body(CONFIGURATION_ERROR_MESSAGE, context))

    if isinstance(exc, RequestValidationError):
        return RelayResponse(
            status_code=400,
            body=_error_body("Invalid request", context, details=exc.errors),
        )

    if isinstance(exc, UpstreamTimeoutError):
        message = (
            f"Timeout: Processing took longer than {exc.deadline_seconds:g} seconds. "
            "Please upload a smaller file or a screenshot image instead of a full multi-page PDF."
        )
        return RelayResponse(status_code=504, body=_error_body(message, context))

    if isinstance(exc, UpstreamError):
        if exc.status_code == 401:
            return RelayResponse(status_code=500, body=_error_body(INVALID_CREDENTIAL_MESSAGE, context))
        if exc.status_code == 429:
            return RelayResponse(status_code=429, body=_error_body(RATE_LIMIT_MESSAGE, context))
        if exc.status_code == 400:
            message = f"The document could not be processed. It may be malformed or unsupported: {exc.message}"
            return RelayResponse(status_code=400, body=_error_body(message, context))
        return RelayResponse(status_code=500, body=_error_body(exc.message, context))

    # TransportError and anything else derived from RelayError
    return RelayResponse(status_code=500, body=_error_body(GENERIC_FAILURE_MESSAGE, context))


async def relay_extraction(
    body: Any,
    *,
    settings: Settings,
    profile: PlatformProfile,
    client: AnthropicClient,
    context: RequestContext | None = None,
) -> RelayResponse:
    """
    Relay one extraction request upstream.

    Args:
        body: Decoded JSON body of the inbound request.
        settings: Process-wide configuration.
        profile: Deadline and size limits of the hosting target.
        client: Upstream API client.
        context: Per-request context; created if not supplied.

    Returns:
        RelayResponse with the upstream body on success, or an error body.
    """
    context = context or RequestContext(deadline_seconds=profile.deadline_seconds)
    log = context.logger(__name__)

    try:
        if not settings.api_configured:
            log.error("ANTHROPIC_API_KEY not found in environment variables")
            raise ConfigurationError(CONFIGURATION_ERROR_MESSAGE)

        result = validate_extraction_request(body, profile.max_document_bytes)
        if not result.is_valid:
            log.warning("Rejected request: %s", "; ".join(result.errors))
            raise RequestValidationError(result.errors)

        log.info(
            "Processing %s extraction (%s, %d base64 chars, %.1fs deadline)",
            result.request.content_type.value,
            result.request.source.media_type,
            len(result.request.source.data),
            context.deadline_seconds,
        )
        # The deadline counts from receipt, not from the start of the upstream call.
        remaining = context.remaining()
        if remaining <= 0:
            log.warning("Deadline elapsed before the upstream call could start")
            raise UpstreamTimeoutError(context.deadline_seconds)
        try:
            data = await client.create_message(
                result.request,
                build_extraction_prompt(),
                deadline_seconds=remaining,
                log=log,
            )
        except UpstreamTimeoutError as e:
            raise UpstreamTimeoutError(context.deadline_seconds) from e
    except RelayError as e:
        return error_response(e, context)
    except Exception:
        log.exception("Unexpected error while relaying document")
        return error_response(TransportError(GENERIC_FAILURE_MESSAGE), context)

    log.info("Document processed successfully in %.2fs", context.elapsed())
    return RelayResponse(status_code=200, body=data)
