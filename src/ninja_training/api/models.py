"""Pydantic request and response models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from ninja_training.domain.avatars import Avatar
from ninja_training.domain.food_entries import FoodEntry
from ninja_training.domain.macros import FoodCandidate, MacroData, MacroProfile
from ninja_training.domain.progress import CheckInResult, UserProgress

MAX_PORTION_GRAMS = 10_000


class CredentialsRequest(BaseModel):
    """Email and password form."""

    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class SessionResponse(BaseModel):
    """Tokens for a signed-in user."""

    access_token: str
    refresh_token: str
    user_id: UUID
    email: str | None = None


class SignUpResponse(BaseModel):
    """Result of a sign-up; session is absent until the email is confirmed."""

    session: SessionResponse | None = None
    confirmation_required: bool


class PasswordResetRequest(BaseModel):
    email: str = Field(min_length=3)


class PasswordUpdateRequest(BaseModel):
    password: str = Field(min_length=6)


class RecoveryRequest(BaseModel):
    """Redirect URL opened from a recovery email."""

    url: str


class RecoveryResponse(BaseModel):
    access_token: str | None = None
    refresh_token: str | None = None
    type: str | None = None
    is_recovery: bool


class WorkoutDayModel(BaseModel):
    date: date
    completed: bool


class ProgressResponse(BaseModel):
    """Training progress for the avatar card, streak and calendar."""

    level: int
    experience: int
    experience_to_next_level: int
    level_progress_percent: float
    streak: int
    current_avatar_id: int
    workout_days: list[WorkoutDayModel]

    @classmethod
    def from_domain(cls, progress: UserProgress) -> "ProgressResponse":
        return cls(
            level=progress.level,
            experience=progress.experience,
            experience_to_next_level=progress.experience_to_next_level,
            level_progress_percent=progress.level_progress_percent,
            streak=progress.streak,
            current_avatar_id=progress.current_avatar_id,
            workout_days=[
                WorkoutDayModel(date=day.day, completed=day.completed)
                for day in sorted(progress.workout_days, key=lambda d: d.day)
            ],
        )


class CheckInRequest(BaseModel):
    completed: bool


class AdminCheckInRequest(BaseModel):
    """Check-in recorded on behalf of a user for any date."""

    user_id: UUID
    completed: bool
    date: date
    experience_award: int = Field(default=50, gt=0)


class CheckInResponse(BaseModel):
    progress: ProgressResponse
    recorded: bool
    levels_gained: int

    @classmethod
    def from_domain(cls, result: CheckInResult) -> "CheckInResponse":
        return cls(
            progress=ProgressResponse.from_domain(result.progress),
            recorded=result.recorded,
            levels_gained=result.levels_gained,
        )


class AvatarRequest(BaseModel):
    avatar_id: int


class AvatarModel(BaseModel):
    """Catalog entry with its state for the current user."""

    id: int
    name: str
    image: str
    required_level: int
    unlocked: bool
    selected: bool

    @classmethod
    def from_domain(cls, avatar: Avatar, progress: UserProgress) -> "AvatarModel":
        return cls(
            id=avatar.id,
            name=avatar.name,
            image=avatar.image,
            required_level=avatar.required_level,
            unlocked=progress.level >= avatar.required_level,
            selected=progress.current_avatar_id == avatar.id,
        )


class MacrosModel(BaseModel):
    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fats: float = Field(ge=0.0)

    @classmethod
    def from_domain(cls, macros: MacroProfile) -> "MacrosModel":
        return cls(
            calories=macros.calories,
            protein=macros.protein,
            carbs=macros.carbs,
            fats=macros.fats,
        )


class MacroDataModel(BaseModel):
    """Description plus macros, as produced by a source or a manual edit."""

    description: str = Field(min_length=1)
    macros: MacrosModel

    @classmethod
    def from_domain(cls, data: MacroData) -> "MacroDataModel":
        return cls(
            description=data.description, macros=MacrosModel.from_domain(data.macros)
        )

    def to_domain(self) -> MacroData:
        return MacroData(
            description=self.description.strip(),
            macros=MacroProfile(
                calories=self.macros.calories,
                protein=self.macros.protein,
                carbs=self.macros.carbs,
                fats=self.macros.fats,
            ),
        )


class FoodEntryModel(BaseModel):
    id: UUID
    description: str
    calories: float
    protein: float
    carbs: float
    fats: float
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, entry: FoodEntry) -> "FoodEntryModel":
        return cls(
            id=entry.id,
            description=entry.description,
            calories=entry.calories,
            protein=entry.protein,
            carbs=entry.carbs,
            fats=entry.fats,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class EntriesResponse(BaseModel):
    """Entries list with today's intake and the most recent entry."""

    entries: list[FoodEntryModel]
    today: MacrosModel
    latest: FoodEntryModel | None = None


class SearchResultModel(BaseModel):
    index: int
    label: str
    brand: str | None = None
    macro_data: MacroDataModel | None = None

    @classmethod
    def from_domain(cls, index: int, candidate: FoodCandidate) -> "SearchResultModel":
        return cls(
            index=index,
            label=candidate.label,
            brand=candidate.record.brand,
            macro_data=(
                MacroDataModel.from_domain(candidate.macro_data)
                if candidate.macro_data
                else None
            ),
        )


class SearchSelectRequest(BaseModel):
    query: str = Field(min_length=1)
    index: int = Field(ge=0)
    grams: float = Field(default=100, gt=0, le=MAX_PORTION_GRAMS)


class BarcodeRequest(BaseModel):
    barcode: str = Field(min_length=1, pattern=r"^\s*[0-9]+\s*$")
    grams: float = Field(default=100, gt=0, le=MAX_PORTION_GRAMS)
