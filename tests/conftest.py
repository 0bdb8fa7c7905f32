"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from ninja_training.adapters.openfoodfacts_client import FoodDatabaseClient
from ninja_training.config import Settings
from ninja_training.containers import AppContainer
from ninja_training.domain.auth import AuthSession, AuthUser
from ninja_training.domain.errors import AuthError
from ninja_training.domain.food_entries import FoodEntry
from ninja_training.domain.macros import MacroData
from ninja_training.domain.progress import UserProgress, WorkoutDay
from ninja_training.services.auth import AuthClient, AuthService
from ninja_training.services.cache import InMemoryCache
from ninja_training.services.food_entries import FoodEntryRepository, FoodEntryService
from ninja_training.services.food_lookup import FoodLookupService
from ninja_training.services.progress import ProgressRepository, ProgressService
from ninja_training.services.vision import VisionClient, VisionService

USER_TOKEN = "user-token"


@dataclass
class InMemoryProgressRepository(ProgressRepository):
    """In-memory progress repository for tests."""

    progress: dict[UUID, UserProgress] = field(default_factory=dict)
    days: dict[UUID, list[WorkoutDay]] = field(default_factory=dict)
    fail_day_insert: bool = False
    fail_progress_update: bool = False

    def get_progress(self, user_id: UUID) -> UserProgress | None:
        stored = self.progress.get(user_id)
        if stored is None:
            return None
        return replace(stored, workout_days=())

    def create_progress(self, user_id: UUID, progress: UserProgress) -> None:
        self.progress[user_id] = progress

    def update_progress(self, user_id: UUID, progress: UserProgress) -> None:
        if self.fail_progress_update:
            raise RuntimeError("Failed to update progress")
        self.progress[user_id] = progress

    def list_workout_days(self, user_id: UUID) -> list[WorkoutDay]:
        return list(self.days.get(user_id, []))

    def create_workout_day(self, user_id: UUID, workout_day: WorkoutDay) -> None:
        if self.fail_day_insert:
            raise RuntimeError("Failed to record workout day")
        self.days.setdefault(user_id, []).append(workout_day)

    def delete_workout_day(self, user_id: UUID, day: date) -> None:
        self.days[user_id] = [
            existing for existing in self.days.get(user_id, []) if existing.day != day
        ]


@dataclass
class InMemoryFoodEntryRepository(FoodEntryRepository):
    """In-memory food entry repository for tests."""

    entries: dict[UUID, FoodEntry] = field(default_factory=dict)

    def create_entry(self, user_id: UUID, data: MacroData) -> FoodEntry:
        entry = FoodEntry(
            id=uuid4(),
            user_id=user_id,
            description=data.description,
            calories=data.macros.calories,
            protein=data.macros.protein,
            carbs=data.macros.carbs,
            fats=data.macros.fats,
            created_at=datetime.now(tz=UTC),
        )
        self.entries[entry.id] = entry
        return entry

    def list_entries(self, user_id: UUID) -> list[FoodEntry]:
        owned = [entry for entry in self.entries.values() if entry.user_id == user_id]
        return sorted(owned, key=lambda entry: entry.created_at, reverse=True)

    def get_entry(self, entry_id: UUID) -> FoodEntry | None:
        return self.entries.get(entry_id)

    def update_entry(
        self, entry_id: UUID, data: MacroData, updated_at: datetime
    ) -> FoodEntry:
        updated = replace(
            self.entries[entry_id],
            description=data.description,
            calories=data.macros.calories,
            protein=data.macros.protein,
            carbs=data.macros.carbs,
            fats=data.macros.fats,
            updated_at=updated_at,
        )
        self.entries[entry_id] = updated
        return updated

    def delete_entry(self, entry_id: UUID) -> None:
        self.entries.pop(entry_id, None)


@dataclass
class FakeAuthClient(AuthClient):
    """Fake auth client with a single known account."""

    user: AuthUser = field(
        default_factory=lambda: AuthUser(id=uuid4(), email="naruto@konoha.test")
    )
    password: str = "believe-it"
    tokens: dict[str, AuthUser] = field(default_factory=dict)
    reset_requests: list[tuple[str, str | None]] = field(default_factory=list)
    updated_passwords: list[tuple[UUID, str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tokens[USER_TOKEN] = self.user

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        if email == self.user.email:
            raise AuthError("User already registered")
        return None

    def sign_in(self, email: str, password: str) -> AuthSession:
        if email != self.user.email or password != self.password:
            raise AuthError("Invalid login credentials")
        return AuthSession(
            access_token=USER_TOKEN, refresh_token="refresh-token", user=self.user
        )

    def sign_out(self, access_token: str) -> None:
        self.tokens.pop(access_token, None)

    def reset_password_for_email(self, email: str, redirect_to: str | None) -> None:
        self.reset_requests.append((email, redirect_to))

    def get_user(self, access_token: str) -> AuthUser | None:
        return self.tokens.get(access_token)

    def update_password(self, user_id: UUID, password: str) -> None:
        self.updated_passwords.append((user_id, password))


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning fixed content."""

    content: str | None = (
        '```json\n{"description": "Grilled chicken with rice (350g)", '
        '"macros": {"calories": 520, "protein": 42, "carbs": 55, "fats": 12}}\n```'
    )
    error: Exception | None = None

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
        if self.error is not None:
            raise self.error
        return self.content


@dataclass
class FakeFoodDatabaseClient(FoodDatabaseClient):
    """Fake OpenFoodFacts client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "products": [
                {
                    "product_name": "Rolled Oats",
                    "brands": "Quaker",
                    "nutriments": {
                        "energy-kcal_100g": 379,
                        "proteins_100g": 13.2,
                        "carbohydrates_100g": 67.7,
                        "fat_100g": 6.5,
                    },
                },
                {"product_name": "Mystery snack", "nutriments": {}},
            ]
        }
    )
    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "3017620422003": {
                "product_name": "Nutella",
                "brands": "Ferrero",
                "serving_size": "15 g",
                "nutriments": {
                    "energy-kcal_serving": 80,
                    "proteins_serving": 0.9,
                    "carbohydrates_serving": 8.6,
                    "fat_serving": 4.6,
                },
            },
            "0000000000001": {"product_name": "Bottled water", "nutriments": {}},
        }
    )
    search_calls: int = 0
    product_calls: int = 0

    async def search_products(
        self, query: str, page_size: int = 10
    ) -> dict[str, object]:
        self.search_calls += 1
        return self.search_payload

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.product_calls += 1
        product = self.products.get(barcode)
        if product is None:
            return {"status": 0, "status_verbose": "product not found"}
        return {"status": 1, "product": product}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="service-key",
        admin_token="hokage",
        openai_api_key="openai-key",
        environment="test",
    )


@pytest.fixture
def auth_client() -> FakeAuthClient:
    return FakeAuthClient()


@pytest.fixture
def progress_repository() -> InMemoryProgressRepository:
    return InMemoryProgressRepository()


@pytest.fixture
def food_entry_repository() -> InMemoryFoodEntryRepository:
    return InMemoryFoodEntryRepository()


@pytest.fixture
def vision_client() -> FakeVisionClient:
    return FakeVisionClient()


@pytest.fixture
def food_database_client() -> FakeFoodDatabaseClient:
    return FakeFoodDatabaseClient()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {USER_TOKEN}"}


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    auth_client: FakeAuthClient,
    progress_repository: InMemoryProgressRepository,
    food_entry_repository: InMemoryFoodEntryRepository,
    vision_client: FakeVisionClient,
    food_database_client: FakeFoodDatabaseClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(auth_client),
        progress_service=ProgressService(
            repository=progress_repository,
            duplicate_policy=settings.duplicate_check_in_policy,
        ),
        food_entry_service=FoodEntryService(food_entry_repository),
        food_lookup_service=FoodLookupService(
            client=food_database_client, cache=InMemoryCache()
        ),
        vision_service=VisionService(client=vision_client, model=settings.openai_model),
        close_resources=close_resources,
    )
