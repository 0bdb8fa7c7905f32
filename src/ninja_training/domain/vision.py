"""Models for vision macro estimates."""

from pydantic import BaseModel, Field


class VisionMacros(BaseModel):
    """Macros guessed by the vision model."""

    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fats: float = Field(ge=0.0)


class VisionMacroEstimate(BaseModel):
    """Structured output expected from the vision model."""

    description: str
    macros: VisionMacros
