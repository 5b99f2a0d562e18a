"""FastAPI application entrypoint and router wiring."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import APIRouter, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi_pagination import add_pagination

from taskdeck.api.auth import router as auth_router
from taskdeck.api.notifications import router as notifications_router
from taskdeck.api.profiles import router as profiles_router
from taskdeck.api.task_invitations import router as task_invitations_router
from taskdeck.api.task_shares import router as task_shares_router
from taskdeck.api.tasks import router as tasks_router
from taskdeck.core.config import settings
from taskdeck.core.error_handling import install_error_handling
from taskdeck.core.logging import configure_logging, get_logger
from taskdeck.db.session import init_db
from taskdeck.schemas.health import HealthStatusResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

configure_logging()
logger = get_logger(__name__)
OPENAPI_TAGS = [
    {"name": "auth", "description": "Resolve the caller and bootstrap their profile."},
    {"name": "health", "description": "Liveness and readiness probes."},
    {"name": "profiles", "description": "Read and update the signed-in user's profile."},
    {
        "name": "tasks",
        "description": (
            "Owned and shared tasks as seen by the caller, annotated with `can_edit` and "
            "`is_shared`. Every mutation re-checks the caller's capability."
        ),
    },
    {"name": "shares", "description": "Owner-managed view/edit grants on tasks."},
    {"name": "invitations", "description": "Invite, accept and reject task invitations."},
    {"name": "notifications", "description": "In-app notification feed and invitation actions."},
]
PROBE_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_200_OK: {
        "description": "Service is alive.",
        "content": {"application/json": {"example": {"ok": True}}},
    },
}


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Initialize application resources before serving requests."""
    logger.info(
        "app.lifecycle.starting environment=%s db_auto_migrate=%s",
        settings.environment,
        settings.db_auto_migrate,
    )
    await init_db()
    logger.info("app.lifecycle.started")
    try:
        yield
    finally:
        logger.info("app.lifecycle.stopped")


app = FastAPI(
    title="Taskdeck API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=OPENAPI_TAGS,
)

origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )
    logger.info("app.cors.enabled origins_count=%s", len(origins))
else:
    logger.info("app.cors.disabled")

install_error_handling(app)


@app.get("/health", tags=["health"], response_model=HealthStatusResponse, responses=PROBE_RESPONSES)
def health() -> HealthStatusResponse:
    """Lightweight liveness probe endpoint."""
    return HealthStatusResponse(ok=True)


@app.get("/healthz", tags=["health"], response_model=HealthStatusResponse, responses=PROBE_RESPONSES)
def healthz() -> HealthStatusResponse:
    """Alias liveness probe endpoint for platform compatibility."""
    return HealthStatusResponse(ok=True)


@app.get("/readyz", tags=["health"], response_model=HealthStatusResponse, responses=PROBE_RESPONSES)
def readyz() -> HealthStatusResponse:
    """Readiness probe endpoint for service orchestration checks."""
    return HealthStatusResponse(ok=True)


api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(auth_router)
api_v1.include_router(profiles_router)
api_v1.include_router(tasks_router)
api_v1.include_router(task_shares_router)
api_v1.include_router(task_invitations_router)
api_v1.include_router(notifications_router)
app.include_router(api_v1)

add_pagination(app)
logger.debug("app.routes.registered count=%s", len(app.routes))
