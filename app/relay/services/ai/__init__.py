"""
AI package for relaying documents to the upstream model.

This package is split into:
- exceptions: Error taxonomy surfaced to callers
- prompts: Versioned extraction prompt template
- upstream: Anthropic Messages API client with deadline cancellation
- validation: Inbound request validation
"""

from .exceptions import (
    ConfigurationError,
    RelayError,
    RequestValidationError,
    TransportError,
    UpstreamError,
    UpstreamTimeoutError,
)
from .prompts import DEFAULT_TEMPLATE, NOT_FOUND, PromptTemplate, build_extraction_prompt
from .upstream import AnthropicClient
from .validation import ALLOWED_MEDIA_TYPES, validate_extraction_request

__all__ = [
    "ALLOWED_MEDIA_TYPES",
    "AnthropicClient",
    "ConfigurationError",
    "DEFAULT_TEMPLATE",
    "NOT_FOUND",
    "PromptTemplate",
    "RelayError",
    "RequestValidationError",
    "TransportError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "build_extraction_prompt",
    "validate_extraction_request",
]
