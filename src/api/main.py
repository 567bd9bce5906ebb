"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
    ping_database,
)
from infrastructure.database.exceptions import DatabaseConnectionError
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from org.presentation import router as org_router
from org.presentation.errors import request_validation_handler

_startup_probe = DefaultStartupProbe()


@asynccontextmanager
async def orgtree_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - structlog configuration
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    _startup_probe.application_started(app_name=settings.app_name, version=__version__)

    yield

    await close_database_connections()
    _startup_probe.application_stopped(app_name=settings.app_name)


app = FastAPI(
    title=get_settings().app_name,
    description="Organizational hierarchy of groups and the persons assigned to them",
    version=__version__,
    lifespan=orgtree_lifespan,
)

app.add_exception_handler(RequestValidationError, request_validation_handler)

# Include organization bounded context routes
app.include_router(org_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> dict:
    """Check database connection health."""
    try:
        await ping_database(session)
        return {"status": "ok", "connected": True}
    except DatabaseConnectionError as e:
        return {"status": "error", "connected": False, "error": str(e)}
