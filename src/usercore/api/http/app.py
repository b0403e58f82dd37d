"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.responses import JSONResponse

from usercore.api.http.routers.health import router as health_router
from usercore.api.http.routers.users import router as users_router
from usercore.api.utils.app_startup import build_dependencies, configure_logging
from usercore.core.errors import (
    FieldValidationError,
    InternalError,
    InvalidInputError,
    StorageError,
    UserAlreadyExistsError,
    UserCoreError,
    UserNotFoundError,
)
from usercore.entities.core.user import UserRepository
from usercore.runtime.settings import Settings, get_settings

__all__ = ["create_app", "error_response"]


def error_response(exc: UserCoreError) -> JSONResponse:
    """Map a domain error onto its HTTP status and JSON body."""
    if isinstance(exc, UserNotFoundError):
        status_code = 404
        content = {"message": f"User with ID {exc.user_id} not found"}
    elif isinstance(exc, UserAlreadyExistsError):
        status_code = 409
        content = {"message": f"User with email '{exc.email}' already exists"}
    elif isinstance(exc, FieldValidationError):
        status_code = 400
        content = {
            "message": f"Validation failed for field '{exc.field}': {exc.reason}",
            "field": exc.field,
        }
    elif isinstance(exc, InvalidInputError):
        status_code = 400
        content = {"message": exc.message}
    elif isinstance(exc, StorageError):
        status_code = 500
        content = {"message": "Database operation failed", "details": exc.message}
    else:
        status_code = 500
        content = {"message": "Internal server error", "details": exc.message}

    return JSONResponse(
        status_code=status_code,
        content={"error": exc.error, **content, "code": status_code},
    )


async def _handle_user_core_error(request: Request, exc: UserCoreError) -> JSONResponse:
    if isinstance(exc, (StorageError, InternalError)):
        logger.error("Request failed: {}", exc)
    return error_response(exc)


async def _handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Malformed bodies and path parameters share the invalid_input shape
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    logger.debug("Rejected malformed request: {}", problems)
    return error_response(InvalidInputError(problems or "Malformed request"))


def create_app(
    settings: Settings | None = None,
    repository: UserRepository | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Process settings; loaded from the environment when omitted
        repository: Storage backend to use instead of the configured one
    """
    settings = settings or get_settings()
    configure_logging(settings)
    app_dependencies = build_dependencies(settings, repository)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting usercore API ({})", settings.environment)
        try:
            yield
        finally:
            if app_dependencies.database_service is not None:
                app_dependencies.database_service.dispose()
            logger.info("usercore API stopped")

    app = FastAPI(
        title="usercore",
        lifespan=lifespan,
        docs_url=None if settings.environment == "production" else "/docs",
        redoc_url=None if settings.environment == "production" else "/redoc",
    )
    app.state.app_dependencies = app_dependencies
    app.add_exception_handler(UserCoreError, _handle_user_core_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation_error)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start = time.perf_counter()

        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            try:
                logger.info("request.start")
                response = await call_next(request)
            except Exception:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500, duration_ms=round(duration_ms, 1)
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content={
                        "error": "internal_error",
                        "message": "Internal server error",
                        "code": 500,
                    },
                    headers={"X-Request-ID": request_id},
                )

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")
            response.headers.setdefault("X-Request-ID", request_id)
            return response

    app.include_router(health_router)
    app.include_router(users_router)
    return app
