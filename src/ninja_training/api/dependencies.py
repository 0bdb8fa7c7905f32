"""Shared FastAPI dependencies and error helpers."""

import logging

from fastapi import Depends, Header, HTTPException, Request, status

from ninja_training.config import normalize_password
from ninja_training.containers import AppContainer
from ninja_training.domain.auth import AuthUser
from ninja_training.domain.errors import AuthError

_logger = logging.getLogger(__name__)


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def bearer_token(authorization: str | None = Header(default=None)) -> str:
    """Extract the bearer token from the Authorization header."""
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return token.strip()


def current_user(
    token: str = Depends(bearer_token),
    container: AppContainer = Depends(get_container),
) -> AuthUser:
    """Resolve the signed-in user for a request."""
    try:
        return container.auth_service.current_user(token)
    except AuthError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message
        ) from exc
    except Exception as exc:
        raise upstream_error(container, exc, "Failed to verify your session.") from exc


async def require_food_jutsu(
    x_food_jutsu_password: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> None:
    """Guard macro routes behind the optional Food Jutsu password."""
    expected = normalize_password(container.settings.food_jutsu_password)
    if expected is None:
        return
    if x_food_jutsu_password != expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Incorrect password! This jutsu requires special training.",
        )


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != container.settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password! Only the Hokage may open this scroll.",
        )


def upstream_error(
    container: AppContainer, exc: Exception, fallback: str
) -> HTTPException:
    """Log an upstream failure and build a user-facing 502."""
    _logger.exception(fallback)
    detail = fallback
    if container.settings.environment == "local":
        debug = f"{type(exc).__name__}: {exc}".strip()
        if debug:
            detail = f"{fallback} (debug: {debug})"
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
