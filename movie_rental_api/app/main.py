"""
Main entrypoint for the Movie Rental API.

This module assembles the FastAPI application, sets up logging,
registers the error handlers and includes the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn movie_rental_api.app.main:app --reload

Error handling policy: request validation failures become 400 with the
first field-level message; persistence failures and any other
unexpected exception are logged with their context and answered with a
generic 500 that does not expose internal error text.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.exceptions import ConfigurationError, RepositoryUnavailable
from .core.logging_config import setup_logging
from .core.security import SIGNING_ALGORITHM


logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something failed."


def validation_message(exc: RequestValidationError) -> str:
    """Render the first validation error as ``"field" message``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    if not location:
        return first.get("msg", "Invalid request.")
    return f'"{".".join(location)}" {first.get("msg", "is invalid")}'


def check_configuration() -> None:
    if not settings.jwt_private_key:
        raise ConfigurationError("FATAL ERROR: JWT_PRIVATE_KEY is not defined.")
    if settings.algorithm != SIGNING_ALGORITHM:
        raise ConfigurationError(
            f"FATAL ERROR: unsupported ALGORITHM {settings.algorithm!r}, only {SIGNING_ALGORITHM} is supported."
        )


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that imports below can
    # safely log messages.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": validation_message(exc)},
        )

    @app.exception_handler(RepositoryUnavailable)
    async def repository_exception_handler(request: Request, exc: RepositoryUnavailable) -> JSONResponse:
        logger.error(
            "Persistence failure on %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": GENERIC_ERROR},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": GENERIC_ERROR},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        # Refuse to serve without a signing key, then apply migrations.
        check_configuration()
        init_db()
        logger.info("%s %s ready", settings.project_name, settings.api_version)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
