"""
Main entrypoint for the Core Template API.

This module assembles the FastAPI application, sets up logging, wires
one service per resource kind and includes the versioned routers.
The ``create_app`` function builds and configures the app, which is
then instantiated at module import time as ``app``::

    uvicorn core_template_api.app.main:app --reload

``create_app`` accepts an explicit database path so tests (or a second
deployment in the same process) can point the app at their own file.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .services.registry import build_services


def create_app(database_path: Optional[str] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    database_path : Optional[str]
        SQLite file to use.  Defaults to ``settings.database_url``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  Migrations are
        applied when the application starts.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        init_db(database_path)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.services = build_services(database_path)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed payloads and query parameters are reported as 400
        errors = jsonable_encoder(exc.errors())
        first = errors[0] if errors else {}
        location = [str(part) for part in first.get("loc", []) if part not in ("body", "query", "path")]
        detail = {
            "error": "ValidationFailed",
            "message": first.get("msg", "Request validation failed"),
            "errors": errors,
        }
        if location:
            detail["field"] = ".".join(location)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(v1_router, prefix="/api/v1")
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
