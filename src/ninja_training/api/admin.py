"""Secret Scroll endpoints: admin tools guarded by a token."""

from fastapi import APIRouter, Depends, HTTPException, status

from ninja_training.api.dependencies import get_container, require_admin, upstream_error
from ninja_training.api.models import AdminCheckInRequest, CheckInResponse
from ninja_training.containers import AppContainer
from ninja_training.domain.errors import DuplicateCheckInError

router = APIRouter(
    prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)]
)


@router.get("/health")
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.post("/check-ins")
async def record_check_in(
    body: AdminCheckInRequest, container: AppContainer = Depends(get_container)
) -> CheckInResponse:
    """Record a mission for any user and date with a custom award."""
    try:
        result = container.progress_service.mark_workout(
            body.user_id,
            body.completed,
            day=body.date,
            experience_award=body.experience_award,
        )
    except DuplicateCheckInError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to record the mission.") from exc
    return CheckInResponse.from_domain(result)
