"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from src.users_api import __version__
from src.users_api.api.http.app_data import ApplicationDependencies
from src.users_api.api.http.routers import health, users
from src.users_api.core.models import ErrorMessage
from src.users_api.core.services import DbManageService, DbSessionService
from src.users_api.runtime.config.config_data import ConfigData

INVALID_BODY = "invalid request body"
INVALID_URI = "invalid uri, expecting id"


def _error_response(
    status_code: int, details: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorMessage(details=details).model_dump(),
        headers=headers,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Path problems are reported before body problems
    errors = exc.errors()
    if any(error.get("loc", ())[:1] == ("path",) for error in errors):
        details = INVALID_URI
    else:
        details = INVALID_BODY
    logger.bind(errors=errors).warning("{}: {}", details, errors)
    return _error_response(status.HTTP_400_BAD_REQUEST, details)


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        logger.info("request.start")
        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "internal server error",
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


def create_app(
    config: ConfigData, database_service: DbSessionService | None = None
) -> FastAPI:
    """Build the application around an explicit configuration.

    Args:
        config: Resolved application configuration
        database_service: Pre-built engine/session factory; one is created
            from ``config`` when omitted

    Returns:
        The configured FastAPI application
    """
    db_service = database_service or DbSessionService(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up application in {} environment", config.app.environment)
        if config.database.auto_create:
            DbManageService(db_service).create_all()
        try:
            yield
        finally:
            logger.info("Shutting down application")
            db_service.dispose()

    app = FastAPI(
        title=config.app.name,
        version=__version__,
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )
    app.state.app_dependencies = ApplicationDependencies(
        config=config, database_service=db_service
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.middleware("http")(log_requests)

    app.include_router(users.router)
    app.include_router(health.router)

    return app


def build_app() -> FastAPI:
    """ASGI factory for uvicorn: resolve configuration, set up logging, build the app."""
    from src.users_api.api.utils.app_startup import configure_logging
    from src.users_api.runtime.config import load_config

    config = load_config()
    configure_logging(config)
    return create_app(config)
