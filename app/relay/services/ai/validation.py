"""
Validation of inbound extraction requests.

Checks the shape, media type and size of the uploaded document before any
upstream call is made. Failures are collected rather than stopping at the
first one, so the caller sees every problem at once.
"""

import logging
from typing import Any

from ...models import ContentType, DocumentSource, ExtractionRequest, ValidationResult

logger = logging.getLogger(__name__)

MISSING_CONTENT_ERROR = "Missing document content"

SOURCE_ENCODING = "base64"

ALLOWED_MEDIA_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)

# Four base64 characters encode three bytes.
BASE64_DECODED_RATIO = 0.75


def estimate_decoded_size(data: str) -> float:
    """Estimate the decoded byte length of a base64 string."""
    return len(data) * BASE64_DECODED_RATIO


def _first_content_block(body: Any) -> dict[str, Any] | None:
    """Return messages[0].content[0] if it exists and carries a source object."""
    if not isinstance(body, dict):
        return None
    messages = body.get("messages")
    if not isinstance(messages, list) or not messages:
        return None
    first = messages[0]
    if not isinstance(first, dict):
        return None
    content = first.get("content")
    if not isinstance(content, list) or not content:
        return None
    block = content[0]
    if not isinstance(block, dict) or not isinstance(block.get("source"), dict):
        return None
    return block


def validate_extraction_request(body: Any, max_bytes: int) -> ValidationResult:
    """
    Validate a raw request body against the relay's input rules.

    Args:
        body: Decoded JSON body of the inbound request.
        max_bytes: Largest accepted decoded document size.

    Returns:
        ValidationResult with every failure found, and the parsed request
        when the body is valid.
    """
    block = _first_content_block(body)
    if block is None:
        return ValidationResult(is_valid=False, errors=[MISSING_CONTENT_ERROR])

    errors: list[str] = []
    source = block["source"]

    content_type = block.get("type")
    if content_type not in [c.value for c in ContentType]:
        errors.append(
            f"Invalid content type: {content_type!r}. Expected 'image' or 'document'"
        )

    encoding = source.get("type")
    if encoding != SOURCE_ENCODING:
        errors.append(f"Invalid source type: {encoding!r}. Expected '{SOURCE_ENCODING}'")

    data = source.get("data")
    if not isinstance(data, str) or not data:
        errors.append("Document data is empty")
        data = ""

    media_type = source.get("media_type")
    if media_type not in ALLOWED_MEDIA_TYPES:
        errors.append(
            f"Invalid media type: {media_type!r}. "
            f"Allowed types: {', '.join(ALLOWED_MEDIA_TYPES)}"
        )

    estimated = estimate_decoded_size(data)
    if estimated > max_bytes:
        errors.append(
            f"Document too large: {estimated / (1024 * 1024):.2f}MB exceeds "
            f"the {max_bytes / (1024 * 1024):.2f}MB limit"
        )

    if errors:
        logger.debug("Request rejected with %d validation errors", len(errors))
        return ValidationResult(is_valid=False, errors=errors)

    request = ExtractionRequest(
        content_type=ContentType(content_type),
        source=DocumentSource(type=encoding, media_type=media_type, data=data),
    )
    return ValidationResult(is_valid=True, errors=[], request=request)
