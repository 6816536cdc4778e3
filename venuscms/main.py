"""FastAPI application entry point for VenusCMS."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from venuscms import __version__
from venuscms.config import Settings, get_settings
from venuscms.models import ImportSessionStore
from venuscms.routers import export, import_router, notifications
from venuscms.schemas.import_schemas import RecordType
from venuscms.services.notifications import NotificationCenter
from venuscms.services.records import RecordStore, get_record_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info(
        "Starting %s %s with '%s' record backend",
        settings.app_name,
        __version__,
        settings.records_backend,
    )
    if settings.debug:
        logger.warning(
            "Debug mode is enabled. Set debug=false in config.toml or VENUSCMS_DEBUG=false."
        )

    yield

    for store in app.state.record_stores.values():
        await store.aclose()
    logger.info("Closed record stores")


def create_app(
    settings: Settings | None = None,
    record_stores: dict[RecordType, RecordStore] | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Application settings; the global settings when omitted.
        record_stores: Store per record type; built from settings when omitted.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Bulk CSV import and export for VenusCMS content",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.record_stores = record_stores or {
        record_type: get_record_store(record_type, settings) for record_type in RecordType
    }
    app.state.notifications = NotificationCenter(
        max_retained=settings.max_notifications,
        default_duration_ms=settings.notification_duration_ms,
    )
    app.state.import_sessions = ImportSessionStore(
        max_sessions=settings.max_import_sessions,
        ttl_minutes=settings.import_session_ttl_minutes,
    )

    # Empty list means same-origin only
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Authorization", "Content-Type"],
            expose_headers=["Content-Disposition"],
            max_age=600,
        )

    @app.get("/health", tags=["Health"])
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(
            content={
                "status": "healthy",
                "version": __version__,
                "app_name": settings.app_name,
            }
        )

    app.include_router(import_router.router, prefix="/api/import", tags=["Import"])
    app.include_router(export.router, prefix="/api/export", tags=["Export"])
    app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])

    return app


app = create_app()
