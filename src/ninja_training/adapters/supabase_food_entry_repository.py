"""Supabase repository for food entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from ninja_training.domain.food_entries import FoodEntry
from ninja_training.domain.macros import MacroData
from ninja_training.services.food_entries import FoodEntryRepository

_COLUMNS = (
    "id, user_id, description, calories, protein, carbs, fats, "
    "created_at, updated_at"
)


@dataclass
class SupabaseFoodEntryRepository(FoodEntryRepository):
    """Supabase implementation for ``food_entries``."""

    client: Client

    def create_entry(self, user_id: UUID, data: MacroData) -> FoodEntry:
        """Insert an entry and return it."""
        response = (
            self.client.table("food_entries")
            .insert({"user_id": str(user_id), **_macro_payload(data)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_entry(response.data[0])

    def list_entries(self, user_id: UUID) -> list[FoodEntry]:
        """Return a user's entries, newest first."""
        response = (
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def get_entry(self, entry_id: UUID) -> FoodEntry | None:
        """Return an entry by id."""
        response = (
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def update_entry(
        self, entry_id: UUID, data: MacroData, updated_at: datetime
    ) -> FoodEntry:
        """Overwrite an entry's description and macros."""
        response = (
            self.client.table("food_entries")
            .update({**_macro_payload(data), "updated_at": updated_at.isoformat()})
            .eq("id", str(entry_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update food entry")
        return _parse_entry(response.data[0])

    def delete_entry(self, entry_id: UUID) -> None:
        """Delete an entry."""
        self.client.table("food_entries").delete().eq("id", str(entry_id)).execute()


def _macro_payload(data: MacroData) -> dict[str, object]:
    return {
        "description": data.description,
        "calories": data.macros.calories,
        "protein": data.macros.protein,
        "carbs": data.macros.carbs,
        "fats": data.macros.fats,
    }


def _parse_entry(row: dict[str, object]) -> FoodEntry:
    updated_at = row.get("updated_at")
    return FoodEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        description=str(row.get("description") or ""),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fats=float(row.get("fats") or 0.0),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(updated_at)) if updated_at else None,
    )
