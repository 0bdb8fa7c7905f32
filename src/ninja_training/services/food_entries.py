"""Food entry logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from ninja_training.domain.errors import EntryNotFoundError
from ninja_training.domain.food_entries import FoodEntry, MacroSource
from ninja_training.domain.macros import MacroData, MacroProfile

_logger = logging.getLogger(__name__)


class FoodEntryRepository(Protocol):
    """Persistence interface for food entries."""

    def create_entry(self, user_id: UUID, data: MacroData) -> FoodEntry:
        """Insert an entry and return the stored row."""

    def list_entries(self, user_id: UUID) -> list[FoodEntry]:
        """Return a user's entries, newest first."""

    def get_entry(self, entry_id: UUID) -> FoodEntry | None:
        """Return an entry by id."""

    def update_entry(
        self, entry_id: UUID, data: MacroData, updated_at: datetime
    ) -> FoodEntry:
        """Overwrite description and macros of an entry."""

    def delete_entry(self, entry_id: UUID) -> None:
        """Delete an entry by id."""


@dataclass
class FoodEntryService:
    """Creates, edits and summarizes a user's food entries."""

    repository: FoodEntryRepository

    def add_entry(
        self, user_id: UUID, data: MacroData, source: MacroSource
    ) -> FoodEntry:
        """Persist macros picked from any source.

        ``source`` is only logged for diagnostics; entries do not store it.
        """
        entry = self.repository.create_entry(user_id, data)
        _logger.info("Food entry %s added from %s", entry.id, source.value)
        return entry

    def list_entries(self, user_id: UUID) -> list[FoodEntry]:
        """Return entries, newest first."""
        return self.repository.list_entries(user_id)

    def update_entry(
        self, user_id: UUID, entry_id: UUID, data: MacroData
    ) -> FoodEntry:
        """Apply a manual edit to an entry the user owns."""
        self._owned_entry(user_id, entry_id)
        return self.repository.update_entry(
            entry_id, data, updated_at=datetime.now(tz=UTC)
        )

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete an entry the user owns."""
        self._owned_entry(user_id, entry_id)
        self.repository.delete_entry(entry_id)

    def _owned_entry(self, user_id: UUID, entry_id: UUID) -> FoodEntry:
        entry = self.repository.get_entry(entry_id)
        if entry is None or entry.user_id != user_id:
            raise EntryNotFoundError()
        return entry


def todays_totals(
    entries: list[FoodEntry], timezone_name: str, now: datetime | None = None
) -> MacroProfile:
    """Sum macros of entries created today in ``timezone_name``."""
    tz = ZoneInfo(timezone_name)
    today = (now or datetime.now(tz=UTC)).astimezone(tz).date()
    calories = protein = carbs = fats = 0.0
    for entry in entries:
        if entry.created_at.astimezone(tz).date() != today:
            continue
        calories += entry.calories
        protein += entry.protein
        carbs += entry.carbs
        fats += entry.fats
    return MacroProfile(
        calories=calories,
        protein=round(protein, 1),
        carbs=round(carbs, 1),
        fats=round(fats, 1),
    )


def latest_entry(entries: list[FoodEntry]) -> FoodEntry | None:
    """Return the most recently created entry."""
    if not entries:
        return None
    return max(entries, key=lambda entry: entry.created_at)
