"""Task Manager API — FastAPI entry point.

Registers middleware, exception handlers, routers and lifecycle hooks.
Each vertical adds its own router under /api/.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.middleware import AuthMiddleware
from core.config import get_settings
from core.database import close_db, init_db
from core.logging_setup import setup_logging
from core.observability.otel_setup import setup_otel

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

settings = get_settings()
STARTED_AT = time.monotonic()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown hooks."""
    setup_logging(settings.log_level)
    setup_otel(endpoint=settings.otel_endpoint)
    if not settings.is_production:
        await init_db()

    logger.info("Task Manager API started (%s)", settings.environment)
    yield
    await close_db()
    logger.info("Task Manager API shutting down")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Task Manager",
    description="Personal task management API with owner-scoped CRUD",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Caller identity
app.add_middleware(AuthMiddleware)

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from verticals.accounts.router import router as accounts_router  # noqa: E402
from verticals.tasks.router import router as tasks_router  # noqa: E402

app.include_router(accounts_router, prefix="/api", tags=["Accounts"])
app.include_router(tasks_router, prefix="/api/tasks", tags=["Tasks"])


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/api/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "environment": settings.environment,
    }
