"""Domain models for workout progress."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

EXPERIENCE_PER_LEVEL = 100


@dataclass(frozen=True)
class WorkoutDay:
    """A single daily check-in."""

    day: date
    completed: bool


@dataclass(frozen=True)
class UserProgress:
    """Level, experience and streak state for one user."""

    level: int = 1
    experience: int = 0
    streak: int = 0
    current_avatar_id: int = 1
    workout_days: tuple[WorkoutDay, ...] = field(default_factory=tuple)

    @property
    def experience_to_next_level(self) -> int:
        """Experience required to leave the current level."""
        return self.level * EXPERIENCE_PER_LEVEL

    @property
    def level_progress_percent(self) -> float:
        """Share of the current level already earned, from 0 to 100."""
        return self.experience / self.experience_to_next_level * 100


class AvatarChange(StrEnum):
    """Outcome of an avatar change request."""

    ACCEPTED = "accepted"
    LOCKED = "locked"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CheckInResult:
    """Progress after a check-in and whether a new day was stored."""

    progress: UserProgress
    recorded: bool
    levels_gained: int = 0
