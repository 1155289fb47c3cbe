"""Tests for inbound request validation."""

import pytest

from app.relay.models import ContentType
from app.relay.services.ai.validation import (
    ALLOWED_MEDIA_TYPES,
    MISSING_CONTENT_ERROR,
    estimate_decoded_size,
    validate_extraction_request,
)
from tests.conftest import make_body

MAX_BYTES = 50 * 1024 * 1024


class TestMissingContent:
    """Tests for the short-circuiting content block check."""

    @pytest.mark.parametrize(
        "body",
        [
            None,
            [],
            {},
            {"messages": []},
            {"messages": [{"role": "user"}]},
            {"messages": [{"role": "user", "content": []}]},
            {"messages": [{"role": "user", "content": [{"type": "image"}]}]},
            {"messages": ["not a message"]},
        ],
    )
    def test_missing_content_is_rejected(self, body):
        """Test that bodies without a content block yield only the missing-content error."""
        result = validate_extraction_request(body, MAX_BYTES)
        assert result.is_valid is False
        assert result.errors == [MISSING_CONTENT_ERROR]
        assert result.request is None


class TestFieldChecks:
    """Tests for content type, encoding, data and media type checks."""

    def test_valid_png_passes(self):
        """Test that a small PNG image is accepted."""
        result = validate_extraction_request(make_body(), MAX_BYTES)
        assert result.is_valid is True
        assert result.errors == []
        assert result.request.content_type == ContentType.IMAGE
        assert result.request.source.media_type == "image/png"

    @pytest.mark.parametrize("media_type", ALLOWED_MEDIA_TYPES)
    def test_all_allowed_media_types_pass(self, media_type):
        """Test every allow-listed media type."""
        content_type = "document" if media_type == "application/pdf" else "image"
        body = make_body(media_type=media_type, content_type=content_type)
        assert validate_extraction_request(body, MAX_BYTES).is_valid

    def test_invalid_media_type_lists_allowed_set(self):
        """Test that a zip upload is rejected with the allowed set verbatim."""
        body = make_body(media_type="application/zip", content_type="document")
        result = validate_extraction_request(body, MAX_BYTES)
        assert result.is_valid is False
        assert len(result.errors) == 1
        assert "application/zip" in result.errors[0]
        assert (
            "application/pdf, image/jpeg, image/jpg, image/png, image/gif, image/webp"
            in result.errors[0]
        )

    def test_invalid_content_type(self):
        """Test that content types other than image/document are rejected."""
        result = validate_extraction_request(make_body(content_type="text"), MAX_BYTES)
        assert result.is_valid is False
        assert any("content type" in e for e in result.errors)

    def test_invalid_encoding(self):
        """Test that only base64 sources are accepted."""
        result = validate_extraction_request(make_body(encoding="url"), MAX_BYTES)
        assert result.is_valid is False
        assert any("base64" in e for e in result.errors)

    def test_empty_data(self):
        """Test that an empty payload is rejected."""
        result = validate_extraction_request(make_body(data=""), MAX_BYTES)
        assert result.is_valid is False
        assert any("empty" in e for e in result.errors)

    def test_errors_are_collected(self):
        """Test that every failing check is reported, not just the first."""
        body = make_body(
            data="",
            media_type="text/plain",
            content_type="video",
            encoding="hex",
        )
        result = validate_extraction_request(body, MAX_BYTES)
        assert result.is_valid is False
        assert len(result.errors) == 4


class TestSizeLimit:
    """Tests for the estimated decoded size check."""

    def test_estimate_uses_base64_ratio(self):
        """Test that four base64 characters count as three bytes."""
        assert estimate_decoded_size("A" * 400) == 300

    def test_exactly_at_maximum_passes(self):
        """Test that a payload whose estimate equals the maximum is accepted."""
        result = validate_extraction_request(make_body(data="A" * 400), max_bytes=300)
        assert result.is_valid is True

    def test_just_over_maximum_fails(self):
        """Test that one more base64 character tips the estimate over the limit."""
        result = validate_extraction_request(make_body(data="A" * 401), max_bytes=300)
        assert result.is_valid is False
        assert len(result.errors) == 1
        assert "too large" in result.errors[0]

    def test_one_byte_over_fails(self):
        """Test a limit exceeded by a whole byte."""
        # 404 characters estimate to 303 bytes
        result = validate_extraction_request(make_body(data="A" * 404), max_bytes=302)
        assert result.is_valid is False
