"""FastAPI application serving the marketplace API."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import Settings, get_settings
from ..exceptions import MarketplaceError
from ..storage.database import DatabaseManager
from ..tasks.cleanup import cleanup_loop
from .rate_limit import ReservationRateLimiter
from .routers import auth, games, tickets

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def create_app(
    settings: Settings | None = None,
    db_manager: DatabaseManager | None = None,
    run_cleanup: bool = True,
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Configuration; read from the environment when omitted
        db_manager: Storage; opened at ``settings.database_path`` when omitted
        run_cleanup: Start the periodic listing cleanup with the app

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    db_manager = db_manager or DatabaseManager(settings.database_path)

    if not settings.admin_api_key:
        logger.warning("ADMIN_API_KEY is not set; admin endpoints will refuse every request")

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        cleanup_task = None
        if run_cleanup:
            cleanup_task = asyncio.create_task(
                cleanup_loop(
                    db_manager,
                    settings.cleanup_interval_seconds,
                    settings.reservation_window_minutes,
                )
            )
        try:
            yield
        finally:
            if cleanup_task is not None:
                cleanup_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await cleanup_task

    app = FastAPI(
        title="Ticket Marketplace API",
        description="Student ticket marketplace: accounts, games, listings and reservations",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db_manager
    app.state.rate_limiter = ReservationRateLimiter(
        settings.rate_limit_requests, settings.rate_limit_window_seconds
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Every error leaves the API as {"error": message}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        else:
            message = "Invalid request"
        return _error_response(400, message)

    app.include_router(auth.router)
    app.include_router(games.router)
    app.include_router(tickets.router)

    @app.get("/health")
    async def health_check():
        """Liveness check."""
        return {
            "status": "healthy",
            "service": "ticket-marketplace-backend",
            "version": __version__,
        }

    return app
