"""Workout check-in and avatar endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from ninja_training.api.dependencies import current_user, get_container, upstream_error
from ninja_training.api.models import (
    AvatarModel,
    AvatarRequest,
    CheckInRequest,
    CheckInResponse,
    ProgressResponse,
)
from ninja_training.containers import AppContainer
from ninja_training.domain.auth import AuthUser
from ninja_training.domain.errors import DuplicateCheckInError
from ninja_training.domain.progress import AvatarChange

router = APIRouter(tags=["progress"])


@router.get("/progress")
async def get_progress(
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> ProgressResponse:
    """Return level, experience, streak and workout days."""
    try:
        progress = container.progress_service.get_progress(user.id)
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to load your progress.") from exc
    return ProgressResponse.from_domain(progress)


@router.post("/progress/check-ins")
async def check_in(
    body: CheckInRequest,
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> CheckInResponse:
    """Record today's training as completed or skipped."""
    try:
        result = container.progress_service.mark_workout(user.id, body.completed)
    except DuplicateCheckInError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to record your training.") from exc
    return CheckInResponse.from_domain(result)


@router.get("/avatars")
async def list_avatars(
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, list[AvatarModel]]:
    """Return the avatar catalog with unlock state."""
    try:
        progress = container.progress_service.get_progress(user.id)
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to load avatars.") from exc
    return {
        "avatars": [
            AvatarModel.from_domain(avatar, progress)
            for avatar in container.progress_service.avatars
        ]
    }


@router.put("/progress/avatar")
async def update_avatar(
    body: AvatarRequest,
    user: AuthUser = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> ProgressResponse:
    """Switch to an unlocked avatar."""
    try:
        outcome, progress = container.progress_service.update_avatar(
            user.id, body.avatar_id
        )
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to update avatar.") from exc
    if outcome == AvatarChange.UNKNOWN:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Unknown avatar.")
    if outcome == AvatarChange.LOCKED:
        raise HTTPException(
            status.HTTP_403_FORBIDDEN, detail="Reach a higher level to unlock."
        )
    return ProgressResponse.from_domain(progress)
