"""Tests for vision macro estimation."""

import asyncio
import base64

import pytest

from ninja_training.domain.errors import (
    InvalidVisionResponseError,
    VisionUpstreamError,
)
from ninja_training.services.vision import (
    VisionService,
    _detect_mime_type,
    _to_data_url,
    parse_estimate,
)
from tests.conftest import FakeVisionClient


class _StatusError(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"status {status_code}")
        self.status_code = status_code


def test_estimate_parses_fenced_json() -> None:
    service = VisionService(client=FakeVisionClient(), model="gpt-4o")

    result = asyncio.run(service.estimate(b"\xff\xd8\xff\xe0fake"))

    assert result.description == "Grilled chicken with rice (350g)"
    assert result.macros.calories == 520
    assert result.macros.protein == 42


def test_estimate_without_content_raises() -> None:
    service = VisionService(client=FakeVisionClient(content=None), model="gpt-4o")

    with pytest.raises(InvalidVisionResponseError) as exc_info:
        asyncio.run(service.estimate(b"img"))

    assert exc_info.value.message == "No response content from OpenAI"


@pytest.mark.parametrize(
    ("status_code", "message"),
    [
        (401, "Invalid OpenAI API key. Please check your configuration."),
        (429, "Rate limit exceeded. Please try again in a few moments."),
        (500, "Failed to analyze image. Please try again."),
    ],
)
def test_estimate_maps_upstream_errors(status_code: int, message: str) -> None:
    service = VisionService(
        client=FakeVisionClient(error=_StatusError(status_code)), model="gpt-4o"
    )

    with pytest.raises(VisionUpstreamError) as exc_info:
        asyncio.run(service.estimate(b"img"))

    assert exc_info.value.message == message


def test_parse_estimate_accepts_plain_json() -> None:
    result = parse_estimate(
        '{"description": "Apple", "macros": '
        '{"calories": 95, "protein": 0.5, "carbs": 25, "fats": 0.3}}'
    )

    assert result.macros.carbs == 25


@pytest.mark.parametrize(
    "content",
    [
        "I think this is a salad.",
        '{"description": "Salad"}',
        '{"description": "Salad", "macros": '
        '{"calories": -5, "protein": 1, "carbs": 1, "fats": 1}}',
    ],
)
def test_parse_estimate_rejects_malformed_content(content: str) -> None:
    with pytest.raises(InvalidVisionResponseError):
        parse_estimate(content)


def test_data_url_encodes_png() -> None:
    image = b"\x89PNG\r\n\x1a\nrest"

    url = _to_data_url(image)

    assert url == "data:image/png;base64," + base64.b64encode(image).decode()


def test_detect_mime_type_defaults_to_jpeg() -> None:
    assert _detect_mime_type(b"GIF89a....") == "image/gif"
    assert _detect_mime_type(b"RIFF\x00\x00\x00\x00WEBPVP8") == "image/webp"
    assert _detect_mime_type(b"unknown") == "image/jpeg"
