import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.database import engine, initialize_database
from app.infrastructure.notifications import (
    ConnectionRegistry,
    NotificationDispatcher,
    monitor_liveness,
)
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the connection registry and its liveness monitor for the app's lifetime."""

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    initialize_database()

    registry = ConnectionRegistry()
    app.state.connection_registry = registry
    app.state.notification_dispatcher = NotificationDispatcher(registry)
    monitor = asyncio.create_task(
        monitor_liveness(
            registry,
            interval=settings.notification_heartbeat_seconds,
            stale_after=settings.notification_stale_after_seconds,
        )
    )
    logger.info("Notification delivery started")
    try:
        yield
    finally:
        monitor.cancel()
        with suppress(asyncio.CancelledError):
            await monitor
        registry.close_all()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="Household Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
