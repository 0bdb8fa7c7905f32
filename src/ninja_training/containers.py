"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from ninja_training.adapters.openai_vision_client import OpenAIVisionClient
from ninja_training.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from ninja_training.adapters.supabase_auth_client import SupabaseAuthClient
from ninja_training.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from ninja_training.adapters.supabase_progress_repository import (
    SupabaseProgressRepository,
)
from ninja_training.config import Settings
from ninja_training.services.auth import AuthService
from ninja_training.services.cache import InMemoryCache
from ninja_training.services.food_entries import FoodEntryService
from ninja_training.services.food_lookup import FoodLookupService
from ninja_training.services.progress import ProgressService
from ninja_training.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    progress_service: ProgressService
    food_entry_service: FoodEntryService
    food_lookup_service: FoodLookupService
    vision_service: VisionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    auth_service = AuthService(
        client=SupabaseAuthClient(supabase_client),
        password_reset_redirect_url=resolved_settings.password_reset_redirect_url,
    )
    progress_service = ProgressService(
        repository=SupabaseProgressRepository(supabase_client),
        default_experience_award=resolved_settings.default_experience_award,
        duplicate_policy=resolved_settings.duplicate_check_in_policy,
        timezone=resolved_settings.timezone,
    )
    food_entry_service = FoodEntryService(SupabaseFoodEntryRepository(supabase_client))
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        user_agent=resolved_settings.openfoodfacts_user_agent,
    )
    food_lookup_service = FoodLookupService(
        client=openfoodfacts_client,
        cache=InMemoryCache(),
    )
    openai_client = OpenAIVisionClient.create(resolved_settings.openai_api_key)
    vision_service = VisionService(
        client=openai_client,
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.openai_max_tokens,
        temperature=resolved_settings.openai_temperature,
    )

    async def close_resources() -> None:
        await openfoodfacts_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        progress_service=progress_service,
        food_entry_service=food_entry_service,
        food_lookup_service=food_lookup_service,
        vision_service=vision_service,
        close_resources=close_resources,
    )
