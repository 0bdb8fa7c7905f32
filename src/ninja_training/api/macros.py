"""Food Jutsu endpoints: macro sources and food entries."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from ninja_training.api.dependencies import (
    current_user,
    get_container,
    require_food_jutsu,
    upstream_error,
)
from ninja_training.api.models import (
    MAX_PORTION_GRAMS,
    BarcodeRequest,
    EntriesResponse,
    FoodEntryModel,
    MacroDataModel,
    MacrosModel,
    SearchResultModel,
    SearchSelectRequest,
)
from ninja_training.containers import AppContainer
from ninja_training.domain.auth import AuthUser
from ninja_training.domain.errors import (
    EntryNotFoundError,
    InvalidVisionResponseError,
    NoNutritionDataError,
    ProductNotFoundError,
    VisionUpstreamError,
)
from ninja_training.domain.food_entries import FoodEntry, MacroSource
from ninja_training.domain.macros import MacroData
from ninja_training.services.food_entries import latest_entry, todays_totals

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/macros", tags=["macros"], dependencies=[Depends(require_food_jutsu)]
)


@router.post("/image", status_code=status.HTTP_201_CREATED)
async def analyze_image(
    image: UploadFile = File(...),
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> FoodEntryModel:
    """Estimate macros from a food photo and log them."""
    image_bytes = await image.read()
    if not image_bytes:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Empty image upload.")
    try:
        macro_data = await container.vision_service.estimate(image_bytes)
    except (InvalidVisionResponseError, VisionUpstreamError) as exc:
        logger.warning("Image analysis failed: %s", exc.message)
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    return _add_entry(container, user, macro_data, MacroSource.IMAGE)


@router.get("/search")
async def search_foods(
    query: str = Query(min_length=1),
    grams: float = Query(default=100, gt=0, le=MAX_PORTION_GRAMS),
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, list[SearchResultModel]]:
    """Search the food database and preview macros at ``grams``."""
    try:
        candidates = await container.food_lookup_service.search(query, grams)
    except Exception as exc:
        raise upstream_error(
            container, exc, "Failed to search foods. Please try again."
        ) from exc
    return {
        "results": [
            SearchResultModel.from_domain(index, candidate)
            for index, candidate in enumerate(candidates)
        ]
    }


@router.post("/search/select", status_code=status.HTTP_201_CREATED)
async def select_search_result(
    body: SearchSelectRequest,
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> FoodEntryModel:
    """Log a search hit scaled to the requested serving."""
    try:
        macro_data = await container.food_lookup_service.select(
            body.query, body.index, body.grams
        )
    except NoNutritionDataError as exc:
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.message
        ) from exc
    except Exception as exc:
        raise upstream_error(
            container, exc, "Failed to search foods. Please try again."
        ) from exc
    return _add_entry(container, user, macro_data, MacroSource.SEARCH)


@router.post("/barcode", status_code=status.HTTP_201_CREATED)
async def lookup_barcode(
    body: BarcodeRequest,
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> FoodEntryModel:
    """Look up a barcode and log the product."""
    try:
        macro_data = await container.food_lookup_service.lookup_barcode(
            body.barcode, body.grams
        )
    except ProductNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except NoNutritionDataError as exc:
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.message
        ) from exc
    except Exception as exc:
        raise upstream_error(
            container, exc, "Failed to lookup barcode. Please try again."
        ) from exc
    return _add_entry(container, user, macro_data, MacroSource.BARCODE)


@router.post("/entries", status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: MacroDataModel,
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> FoodEntryModel:
    """Log manually entered macros."""
    return _add_entry(container, user, body.to_domain(), MacroSource.MANUAL)


@router.get("/entries")
async def list_entries(
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> EntriesResponse:
    """Return entries with today's intake and the latest entry."""
    try:
        entries = container.food_entry_service.list_entries(user.id)
    except Exception as exc:
        raise upstream_error(
            container, exc, "Failed to load food entries. Please try again."
        ) from exc
    latest = latest_entry(entries)
    return EntriesResponse(
        entries=[FoodEntryModel.from_domain(entry) for entry in entries],
        today=MacrosModel.from_domain(
            todays_totals(entries, container.settings.timezone)
        ),
        latest=FoodEntryModel.from_domain(latest) if latest else None,
    )


@router.put("/entries/{entry_id}")
async def update_entry(
    entry_id: UUID,
    body: MacroDataModel,
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> FoodEntryModel:
    """Save edits to an entry."""
    try:
        entry = container.food_entry_service.update_entry(
            user.id, entry_id, body.to_domain()
        )
    except EntryNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(
            container, exc, "Failed to update entry. Please try again."
        ) from exc
    return FoodEntryModel.from_domain(entry)


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: UUID,
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> None:
    """Delete an entry."""
    try:
        container.food_entry_service.delete_entry(user.id, entry_id)
    except EntryNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(
            container, exc, "Failed to delete entry. Please try again."
        ) from exc


def _add_entry(
    container: AppContainer, user: AuthUser, data: MacroData, source: MacroSource
) -> FoodEntryModel:
    try:
        entry: FoodEntry = container.food_entry_service.add_entry(user.id, data, source)
    except Exception as exc:
        raise upstream_error(
            container, exc, "Failed to add entry. Please try again."
        ) from exc
    return FoodEntryModel.from_domain(entry)
