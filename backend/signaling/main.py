"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from signaling.api.routes import router
from signaling.core.config import Settings, get_settings
from signaling.core.logging import get_logger, setup_logging
from signaling.services.livekit import GrantIssuer, GrantSigningError
from signaling.services.room_directory import (
    LiveKitRoomDirectory,
    RoomDirectory,
    RoomDirectoryError,
)
from signaling.services.rooms import RoomOrchestrator

logger = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_validation_error(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request format")


async def handle_directory_error(request: Request, exc: RoomDirectoryError):
    # Backend detail stays in the logs
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to {exc.operation}")


async def handle_signing_error(request: Request, exc: GrantSigningError):
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate token")


def create_app(settings: Settings | None = None, directory: RoomDirectory | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    @param settings - Settings to use instead of the environment
    @param directory - Room Directory to use instead of the LiveKit API client
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, json_logs=settings.json_logs)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown events."""
        room_directory = directory or LiveKitRoomDirectory(settings)

        app.state.settings = settings
        app.state.grant_issuer = GrantIssuer(settings, room_directory)
        app.state.orchestrator = RoomOrchestrator(settings, room_directory)

        logger.info(f"Starting {settings.app_name} on port {settings.port}")
        logger.info(f"LiveKit API: {settings.livekit_url}, clients: {settings.livekit_ws_url}")
        try:
            yield
        finally:
            if directory is None:
                await room_directory.aclose()
            logger.info(f"Shutting down {settings.app_name}")

    app = FastAPI(
        title=settings.app_name,
        description="Access tokens and room management for LiveKit meetings",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(RoomDirectoryError, handle_directory_error)
    app.add_exception_handler(GrantSigningError, handle_signing_error)

    app.include_router(router, prefix="/api")

    return app


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "signaling.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
