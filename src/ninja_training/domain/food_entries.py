"""Domain models for logged food entries."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class MacroSource(StrEnum):
    """Where the macros of a new entry came from."""

    IMAGE = "image"
    SEARCH = "search"
    BARCODE = "barcode"
    MANUAL = "manual"


@dataclass(frozen=True)
class FoodEntry:
    """A food entry owned by one user."""

    id: UUID
    user_id: UUID
    description: str
    calories: float
    protein: float
    carbs: float
    fats: float
    created_at: datetime
    updated_at: datetime | None = None
