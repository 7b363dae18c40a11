"""FastAPI application instance and startup hooks."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from payroll_contrib import __version__
from payroll_contrib.core import get_logger, get_settings
from payroll_contrib.models import Base
from payroll_contrib.routers import calculate_router, results_router, upload_router
from payroll_contrib.schemas import MessageResponse
from payroll_contrib.web.dependencies import get_session_factory

LOGGER = get_logger(__name__)


async def _store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    LOGGER.error("Store access failed for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content=MessageResponse(success=False, message=f"Store access failed: {exc}").model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="Contribution Calculator", version=__version__)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)
    app.include_router(upload_router)
    app.include_router(calculate_router)
    app.include_router(results_router)

    @app.on_event("startup")
    def ensure_tables() -> None:
        if not get_settings().create_tables:
            return
        LOGGER.info("Creating missing database tables")
        engine = get_session_factory().kw["bind"]
        Base.metadata.create_all(engine)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    LOGGER.info("FastAPI application initialised")
    return app


app = create_app()
