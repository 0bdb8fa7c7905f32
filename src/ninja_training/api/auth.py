"""Account endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from ninja_training.api.dependencies import bearer_token, get_container, upstream_error
from ninja_training.api.models import (
    CredentialsRequest,
    PasswordResetRequest,
    PasswordUpdateRequest,
    RecoveryRequest,
    RecoveryResponse,
    SessionResponse,
    SignUpResponse,
)
from ninja_training.containers import AppContainer
from ninja_training.domain.auth import AuthSession
from ninja_training.domain.errors import AuthError
from ninja_training.services.auth import parse_recovery_params

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up")
async def sign_up(
    body: CredentialsRequest, container: AppContainer = Depends(get_container)
) -> SignUpResponse:
    """Join the village."""
    try:
        session = container.auth_service.sign_up(body.email, body.password)
    except AuthError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to sign up.") from exc
    return SignUpResponse(
        session=_session_response(session) if session else None,
        confirmation_required=session is None,
    )


@router.post("/sign-in")
async def sign_in(
    body: CredentialsRequest, container: AppContainer = Depends(get_container)
) -> SessionResponse:
    """Enter the village."""
    try:
        session = container.auth_service.sign_in(body.email, body.password)
    except AuthError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to sign in.") from exc
    return _session_response(session)


@router.post("/sign-out")
async def sign_out(
    token: str = Depends(bearer_token),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Leave the village."""
    try:
        container.auth_service.sign_out(token)
    except AuthError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to sign out.") from exc
    return {"status": "ok"}


@router.post("/password-reset")
async def password_reset(
    body: PasswordResetRequest, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    """Send a password recovery email."""
    try:
        container.auth_service.request_password_reset(body.email)
    except AuthError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to send reset email.") from exc
    return {"status": "ok"}


@router.post("/password-update")
async def password_update(
    body: PasswordUpdateRequest,
    token: str = Depends(bearer_token),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Set a new password using a session or recovery token."""
    try:
        container.auth_service.update_password(token, body.password)
    except AuthError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=exc.message) from exc
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to update password.") from exc
    return {"status": "ok"}


@router.post("/recovery")
async def recovery(body: RecoveryRequest) -> RecoveryResponse:
    """Read tokens from a recovery redirect URL."""
    params = parse_recovery_params(body.url)
    return RecoveryResponse(
        access_token=params.access_token,
        refresh_token=params.refresh_token,
        type=params.type,
        is_recovery=params.is_recovery,
    )


def _session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user_id=session.user.id,
        email=session.user.email,
    )
