"""Macro estimation from food photos using a vision model."""

import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from ninja_training.domain.errors import (
    InvalidVisionResponseError,
    VisionUpstreamError,
)
from ninja_training.domain.macros import MacroData, MacroProfile
from ninja_training.domain.vision import VisionMacroEstimate

_logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```json\s*|\s*```")

SYSTEM_PROMPT = """You are a professional nutritionist and food analyst. Your task is to:
1. Precisely identify food items, portions, and preparation methods
2. Calculate exact macro breakdowns based on standard USDA database values
3. Consider portion sizes, cooking methods, and visible ingredients
4. Provide detailed measurements in grams/ounces where possible
5. Account for added oils, sauces, and condiments in calculations
6. Break down mixed dishes into their components for accurate macro assessment"""

USER_PROMPT = (
    "Analyze this food image and provide precise macro estimates. "
    "Include portion sizes and detailed breakdown. "
    "Return ONLY a JSON object with this exact format: "
    '{ "description": "detailed food description with portion sizes", '
    '"macros": { "calories": number, "protein": number, '
    '"carbs": number, "fats": number } }'
)

_STATUS_MESSAGES = {
    400: "Invalid request. Please check the image format and try again.",
    401: "Invalid OpenAI API key. Please check your configuration.",
    429: "Rate limit exceeded. Please try again in a few moments.",
}


class VisionClient(Protocol):
    """Interface for a chat model that accepts images."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        image_data_url: str,
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        """Return the raw text content of the model reply."""


@dataclass
class VisionService:
    """Prepares the prompt and validates the model's macro estimate."""

    client: VisionClient
    model: str
    max_tokens: int = 500
    temperature: float = 0.3

    async def estimate(self, image_bytes: bytes) -> MacroData:
        """Estimate macros for the food in ``image_bytes``."""
        try:
            content = await self.client.complete(
                model=self.model,
                system_prompt=SYSTEM_PROMPT,
                user_prompt=USER_PROMPT,
                image_data_url=_to_data_url(image_bytes),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as exc:
            _logger.exception("Vision model call failed")
            status_code = _status_code_from_exception(exc)
            raise VisionUpstreamError(_STATUS_MESSAGES.get(status_code)) from exc
        if not content:
            raise InvalidVisionResponseError("No response content from OpenAI")
        return parse_estimate(content)


def parse_estimate(content: str) -> MacroData:
    """Parse model output into macros, tolerating Markdown code fences."""
    cleaned = _CODE_FENCE.sub("", content).strip()
    try:
        estimate = VisionMacroEstimate.model_validate(json.loads(cleaned))
    except (json.JSONDecodeError, ValidationError) as exc:
        _logger.warning("Failed to parse vision response: %s", content)
        raise InvalidVisionResponseError() from exc
    return MacroData(
        description=estimate.description,
        macros=MacroProfile(
            calories=estimate.macros.calories,
            protein=estimate.macros.protein,
            carbs=estimate.macros.carbs,
            fats=estimate.macros.fats,
        ),
    )


def _status_code_from_exception(exc: Exception) -> int | None:
    """Extract an HTTP status code from an SDK exception, if available."""
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
