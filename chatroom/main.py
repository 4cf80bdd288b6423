from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.config import Settings
from chatroom.database import Database, get_db
from chatroom.errors import ChatError, StoreError
from chatroom.logger import configure_logging, get_logger
from chatroom.routers.messages import router as messages_router
from chatroom.routers.participants import router as participants_router
from chatroom.routers.status import router as status_router
from chatroom.services.reaper import InactivityReaper

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application.

    The database and the reaper are created in the lifespan, so each app
    instance owns its own engine and background task.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Handle application startup and shutdown."""
        # Startup
        database = Database(settings.database_url, echo=settings.sql_debug)
        await database.init()
        app.state.database = database

        reaper = InactivityReaper(
            database.session_factory,
            threshold_seconds=settings.inactivity_threshold_seconds,
            interval_seconds=settings.reaper_interval_seconds,
        )
        app.state.reaper = reaper
        if settings.reaper_enabled:
            reaper.start()

        yield

        # Shutdown
        await reaper.stop()
        await database.close()

    app = FastAPI(
        title="Chatroom",
        description="Presence and messaging API for a single chat room",
        version=settings.commit_hash or "dev",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ChatError)
    async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
        if isinstance(exc, StoreError):
            logger.error(f"{request.method} {request.url.path} failed: {exc.__cause__}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    # Include routers
    app.include_router(
        participants_router, prefix="/participants", tags=["participants"]
    )
    app.include_router(messages_router, prefix="/messages", tags=["messages"])
    app.include_router(status_router, prefix="/status", tags=["status"])

    @app.get("/health")
    async def health_check(db: AsyncSession = Depends(get_db)) -> Dict[str, str]:
        """Health check endpoint with database connectivity."""
        try:
            # Test database connection
            result = await db.execute(text("SELECT 1"))
            db_status = "connected" if result.scalar() == 1 else "error"
        except Exception:
            db_status = "disconnected"

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "database": db_status,
            "environment": settings.env or "",
            "version": settings.commit_hash or "",
        }

    return app


def run() -> None:
    """Console entry point."""
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


# If run directly, start the server
if __name__ == "__main__":
    run()
