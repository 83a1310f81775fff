"""Taskbell - Todo and Reminder API."""
import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskbell.config import get_settings
from taskbell.logging_setup import setup_logging

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


def _fetch_todos() -> list[dict]:
    from taskbell.database import get_db_context
    from taskbell.services.todos import snapshot_all_todos

    with get_db_context() as db:
        return snapshot_all_todos(db, page_size=settings.todo_max_page_size)


def start_reminder_poller(app: FastAPI) -> asyncio.Task:
    """Run reminder passes in-process against the database.

    Besides the interval loop, ``app.state.reminder_check`` lets the todo
    routes run a pass on the same center right after a change.
    """
    from taskbell.services.notification_center import NotificationCenter
    from taskbell.services.notification_store import DatabaseNotificationStore
    from taskbell.services.reminder_poller import make_reminder_check, run_reminder_poller

    center = NotificationCenter(
        DatabaseNotificationStore(limit=settings.notification_list_limit),
        threshold_minutes=settings.reminder_threshold_minutes,
    )
    app.state.reminder_check = make_reminder_check(center, _fetch_todos)
    return asyncio.create_task(
        run_reminder_poller(
            center,
            _fetch_todos,
            interval_seconds=settings.reminder_poll_interval_seconds,
        )
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create tables and optionally start the reminder poller
    from taskbell.database import Base, engine

    # Import all models so they're registered with Base
    from taskbell import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    poller = None
    app.state.reminder_check = None
    if settings.reminder_poller_enabled:
        poller = start_reminder_poller(app)
    else:
        logger.info("Reminder poller disabled; reminders are created by client sessions")

    yield

    # Shutdown: stop the poller
    app.state.reminder_check = None
    if poller is not None:
        poller.cancel()
        with suppress(asyncio.CancelledError):
            await poller


app = FastAPI(
    title=settings.app_name,
    description="Manage your todos and get reminded before they start, end or slip",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


# Import and include routers
from taskbell.api import notifications, todos  # noqa: E402

app.include_router(todos.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("taskbell.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
