"""
Pydantic models for the extraction relay.

Defines the inbound document request, the per-request context, and the
caller-facing response envelopes.
"""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContentType(str, Enum):
    """Content block types accepted by the upstream Messages API."""

    IMAGE = "image"
    DOCUMENT = "document"


class DocumentSource(BaseModel):
    """Base64 payload of the uploaded document, in upstream wire format."""

    type: str = Field(default="base64", description="Source encoding tag")
    media_type: str = Field(..., description="MIME type of the document")
    data: str = Field(..., description="Base64-encoded document bytes")


class ExtractionRequest(BaseModel):
    """
    A validated document ready to be relayed upstream.

    Attributes:
        content_type: Whether the payload is sent as an image or document block.
        source: The base64 source block, forwarded verbatim.
    """

    content_type: ContentType
    source: DocumentSource

    def to_content_block(self) -> dict[str, Any]:
        """Render the document as a Messages API content block."""
        return {
            "type": self.content_type.value,
            "source": self.source.model_dump(),
        }


class ValidationResult(BaseModel):
    """Outcome of validating an inbound extraction request."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    request: ExtractionRequest | None = None


class RequestContext(BaseModel):
    """
    Correlation state for a single inbound request.

    Created when the request arrives and discarded once the response is sent.
    """

    model_config = ConfigDict(frozen=True)

    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    deadline_seconds: float = Field(..., gt=0)

    def elapsed(self) -> float:
        """Seconds since the request was received."""
        return (datetime.now(timezone.utc) - self.created_at).total_seconds()

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.deadline_seconds - self.elapsed())

    def logger(self, name: str) -> logging.LoggerAdapter:
        """Logger that tags every line with this request's identifier."""
        return _RequestLoggerAdapter(logging.getLogger(name), {"request_id": self.request_id})


class _RequestLoggerAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        return f"[{self.extra['request_id']}] {msg}", kwargs


class RelayResponse(BaseModel):
    """Transport-neutral result of a relay call, wrapped by each adapter."""

    status_code: int = Field(..., ge=100, le=599)
    body: Any


class ErrorResponse(BaseModel):
    """Error body returned to the caller."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Human-readable error message")
    request_id: str | None = Field(default=None, alias="requestId")
    details: list[str] | None = Field(
        default=None,
        description="Validation failures, when the request was rejected",
    )


class HealthResponse(BaseModel):
    """Health check response."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(default="ok")
    timestamp: str = Field(..., description="ISO-8601 time of the check")
    uptime: float | None = Field(default=None, description="Seconds since startup")
    api_configured: bool | None = Field(default=None, alias="apiConfigured")
