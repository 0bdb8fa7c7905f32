"""Workout check-ins, experience, streaks and avatars."""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from ninja_training.config import DuplicateCheckInPolicy
from ninja_training.domain.avatars import AVATARS, Avatar, find_avatar
from ninja_training.domain.errors import DuplicateCheckInError
from ninja_training.domain.progress import (
    EXPERIENCE_PER_LEVEL,
    AvatarChange,
    CheckInResult,
    UserProgress,
    WorkoutDay,
)

_logger = logging.getLogger(__name__)


class ProgressRepository(Protocol):
    """Persistence interface for progress rows and workout days."""

    def get_progress(self, user_id: UUID) -> UserProgress | None:
        """Return the stored progress row without workout days."""

    def create_progress(self, user_id: UUID, progress: UserProgress) -> None:
        """Create the progress row for a new user."""

    def update_progress(self, user_id: UUID, progress: UserProgress) -> None:
        """Persist level, experience, streak and avatar."""

    def list_workout_days(self, user_id: UUID) -> list[WorkoutDay]:
        """Return every workout day for a user."""

    def create_workout_day(self, user_id: UUID, workout_day: WorkoutDay) -> None:
        """Insert a workout day row."""

    def delete_workout_day(self, user_id: UUID, day: date) -> None:
        """Remove the workout day row for ``day``."""


def has_check_in(days: tuple[WorkoutDay, ...] | list[WorkoutDay], day: date) -> bool:
    """Return True when a check-in already exists for ``day``."""
    return any(existing.day == day for existing in days)


def apply_experience(
    level: int,
    experience: int,
    avatar_id: int,
    award: int,
    avatars: tuple[Avatar, ...] = AVATARS,
) -> tuple[int, int, int]:
    """Add experience and roll overflow into level-ups.

    Reaching a level that exactly matches an avatar's required level
    switches to that avatar. Levels skipped in a single award do not.
    """
    if isinstance(award, bool) or not isinstance(award, int) or award <= 0:
        raise ValueError("experience award must be a positive integer")
    experience += award
    while experience >= level * EXPERIENCE_PER_LEVEL:
        experience -= level * EXPERIENCE_PER_LEVEL
        level += 1
        for avatar in avatars:
            if avatar.required_level == level:
                avatar_id = avatar.id
    return level, experience, avatar_id


def calculate_streak(
    days: tuple[WorkoutDay, ...] | list[WorkoutDay], last_day: date
) -> int:
    """Count consecutive completed days ending at ``last_day``."""
    streak = 0
    expected = last_day
    for workout_day in sorted(days, key=lambda d: d.day, reverse=True):
        if workout_day.day == expected:
            if not workout_day.completed:
                break
            streak += 1
            expected -= timedelta(days=1)
        elif workout_day.day < expected:
            break
    return streak


def record_check_in(
    progress: UserProgress,
    day: date,
    completed: bool,
    experience_award: int,
    avatars: tuple[Avatar, ...] = AVATARS,
) -> UserProgress:
    """Return progress with the check-in applied.

    A second check-in for the same date leaves ``progress`` unchanged.
    """
    if has_check_in(progress.workout_days, day):
        return progress

    workout_days = (*progress.workout_days, WorkoutDay(day=day, completed=completed))
    level = progress.level
    experience = progress.experience
    avatar_id = progress.current_avatar_id
    if completed:
        level, experience, avatar_id = apply_experience(
            level, experience, avatar_id, experience_award, avatars
        )

    return UserProgress(
        level=level,
        experience=experience,
        streak=calculate_streak(workout_days, day),
        current_avatar_id=avatar_id,
        workout_days=workout_days,
    )


def change_avatar(
    progress: UserProgress,
    avatar_id: int,
    avatars: tuple[Avatar, ...] = AVATARS,
) -> AvatarChange:
    """Decide whether the user may switch to ``avatar_id``."""
    avatar = find_avatar(avatar_id, avatars)
    if avatar is None:
        return AvatarChange.UNKNOWN
    if avatar.required_level > progress.level:
        return AvatarChange.LOCKED
    return AvatarChange.ACCEPTED


@dataclass
class ProgressService:
    """Loads, updates and persists a user's training progress."""

    repository: ProgressRepository
    avatars: tuple[Avatar, ...] = AVATARS
    default_experience_award: int = 50
    duplicate_policy: DuplicateCheckInPolicy = DuplicateCheckInPolicy.IGNORE
    timezone: str = "UTC"

    def today(self) -> date:
        """Return the current date in the configured timezone."""
        return datetime.now(tz=ZoneInfo(self.timezone)).date()

    def get_progress(self, user_id: UUID) -> UserProgress:
        """Return progress for a user, creating defaults on first access."""
        stored = self.repository.get_progress(user_id)
        if stored is None:
            created = UserProgress()
            self.repository.create_progress(user_id, created)
            _logger.info("Created initial progress for user %s", user_id)
            return created
        days = self.repository.list_workout_days(user_id)
        return replace(stored, workout_days=tuple(days))

    def mark_workout(
        self,
        user_id: UUID,
        completed: bool,
        day: date | None = None,
        experience_award: int | None = None,
    ) -> CheckInResult:
        """Record a check-in and persist the resulting progress."""
        current = self.get_progress(user_id)
        check_in_day = day or self.today()
        award = (
            experience_award
            if experience_award is not None
            else self.default_experience_award
        )
        if has_check_in(current.workout_days, check_in_day):
            if self.duplicate_policy == DuplicateCheckInPolicy.REJECT:
                raise DuplicateCheckInError()
            _logger.info(
                "Ignoring duplicate check-in for user %s on %s", user_id, check_in_day
            )
            return CheckInResult(progress=current, recorded=False)

        updated = record_check_in(
            current, check_in_day, completed, award, self.avatars
        )
        self.repository.create_workout_day(
            user_id, WorkoutDay(day=check_in_day, completed=completed)
        )
        try:
            self.repository.update_progress(user_id, updated)
        except Exception:
            _logger.exception(
                "Progress update failed for user %s, removing day %s",
                user_id,
                check_in_day,
            )
            self.repository.delete_workout_day(user_id, check_in_day)
            raise
        return CheckInResult(
            progress=updated,
            recorded=True,
            levels_gained=updated.level - current.level,
        )

    def update_avatar(
        self, user_id: UUID, avatar_id: int
    ) -> tuple[AvatarChange, UserProgress]:
        """Switch avatar when the user's level allows it."""
        current = self.get_progress(user_id)
        outcome = change_avatar(current, avatar_id, self.avatars)
        if outcome != AvatarChange.ACCEPTED:
            return outcome, current
        updated = replace(current, current_avatar_id=avatar_id)
        self.repository.update_progress(user_id, updated)
        return outcome, updated
