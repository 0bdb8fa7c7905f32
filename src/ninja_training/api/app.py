"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ninja_training.api.admin import router as admin_router
from ninja_training.api.auth import router as auth_router
from ninja_training.api.macros import router as macros_router
from ninja_training.api.progress import router as progress_router
from ninja_training.app_logging import configure_logging
from ninja_training.containers import AppContainer
from ninja_training.domain.errors import NinjaTrainingError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting Ninja Training API (%s)", container.settings.environment)
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Ninja Training", lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(progress_router)
    app.include_router(macros_router)
    app.include_router(admin_router)

    @app.exception_handler(NinjaTrainingError)
    async def domain_error_handler(
        request: Request, exc: NinjaTrainingError
    ) -> JSONResponse:
        logger.warning("Unhandled domain error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
