"""Supabase repository for progress rows and workout days."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from ninja_training.domain.progress import UserProgress, WorkoutDay
from ninja_training.services.progress import ProgressRepository


@dataclass
class SupabaseProgressRepository(ProgressRepository):
    """Supabase implementation for ``user_progress`` and ``workout_days``."""

    client: Client

    def get_progress(self, user_id: UUID) -> UserProgress | None:
        """Return the progress row for a user."""
        response = (
            self.client.table("user_progress")
            .select("level, experience, streak, current_avatar_id")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProgress(
            level=int(row.get("level", 1)),
            experience=int(row.get("experience", 0)),
            streak=int(row.get("streak", 0)),
            current_avatar_id=int(row.get("current_avatar_id", 1)),
        )

    def create_progress(self, user_id: UUID, progress: UserProgress) -> None:
        """Insert the initial progress row."""
        response = (
            self.client.table("user_progress")
            .insert({"user_id": str(user_id), **_progress_payload(progress)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user progress")

    def update_progress(self, user_id: UUID, progress: UserProgress) -> None:
        """Persist level, experience, streak and avatar."""
        self.client.table("user_progress").update(
            {
                **_progress_payload(progress),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("user_id", str(user_id)).execute()

    def list_workout_days(self, user_id: UUID) -> list[WorkoutDay]:
        """Return all workout days for a user."""
        response = (
            self.client.table("workout_days")
            .select("date, completed")
            .eq("user_id", str(user_id))
            .execute()
        )
        return [
            WorkoutDay(
                day=date.fromisoformat(str(row["date"])[:10]),
                completed=bool(row.get("completed")),
            )
            for row in response.data or []
        ]

    def create_workout_day(self, user_id: UUID, workout_day: WorkoutDay) -> None:
        """Insert a workout day row."""
        response = (
            self.client.table("workout_days")
            .insert(
                {
                    "user_id": str(user_id),
                    "date": workout_day.day.isoformat(),
                    "completed": workout_day.completed,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record workout day")

    def delete_workout_day(self, user_id: UUID, day: date) -> None:
        """Delete the workout day row for ``day``."""
        self.client.table("workout_days").delete().eq("user_id", str(user_id)).eq(
            "date", day.isoformat()
        ).execute()


def _progress_payload(progress: UserProgress) -> dict[str, int]:
    return {
        "level": progress.level,
        "experience": progress.experience,
        "streak": progress.streak,
        "current_avatar_id": progress.current_avatar_id,
    }
