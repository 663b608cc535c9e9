#!/usr/bin/env python3

"""
Main application entry point for the task manager API.

Architecture: FastAPI application over an async SQLAlchemy database.
Key Features: Lifecycle management, database health checks, uniform error
responses, request logging, CORS configuration.
"""

import errno
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskhub.api import (
    auth_router,
    health_router,
    notifications_router,
    projects_router,
    tasks_router,
    users_router,
)
from taskhub.config import Settings, settings as default_settings
from taskhub.db import close_database, init_database
from taskhub.errors import AppError
from taskhub.utils.logger import RequestTimer, cleanup_old_logs, setup_logger
from taskhub.validation import describe_error

logger = setup_logger("main")

GENERIC_ERROR_MESSAGE = "Something went wrong, please try again later"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"msg": message})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup...")
        cleanup_old_logs()
        database = init_database(settings)
        try:
            logger.info("Initializing database...")
            await database.init_models()

            logger.info("Checking database connectivity...")
            await database.check_connection()
        except Exception as e:
            logger.critical(f"Startup error: {e}")
            await close_database()
            raise SystemExit(f"Startup failed: {e}") from e

        logger.info("Task manager API startup successful.")
        yield

        logger.info("Task manager API shutdown...")
        await close_database()
        logger.info("Shutdown complete.")

    app = FastAPI(title="Task Manager API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if not errors:
            return _error(status.HTTP_400_BAD_REQUEST, "Invalid request")
        first = dict(errors[0])
        # Drop the "body"/"path" prefix FastAPI adds to locations
        first["loc"] = tuple(first.get("loc", ()))[1:]
        if first["type"] == "json_invalid":
            return _error(status.HTTP_400_BAD_REQUEST, "Request body is not valid JSON")
        return _error(status.HTTP_400_BAD_REQUEST, describe_error(None, first).message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"msg": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(OSError)
    async def oserror_exception_handler(request: Request, exc: OSError):
        logger.error(f"OSError caught: {exc}, errno: {exc.errno}")
        if exc.errno in [errno.ETIMEDOUT, errno.ECONNREFUSED]:
            logger.error(
                f"Returning 503 due to DB connection issue: {settings.db_unavailable_hint}"
            )
            return _error(status.HTTP_503_SERVICE_UNAVAILABLE, settings.db_unavailable_hint)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        with RequestTimer() as timer:
            response = await call_next(request)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({timer.elapsed_ms:.1f} ms)"
        )
        return response

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(tasks_router)
    app.include_router(projects_router)
    app.include_router(notifications_router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    return app


app = create_app()


def main():
    port = int(default_settings.server_port)
    host = default_settings.server_host

    logger.info(f"Starting task manager API server on {host}:{port}")

    try:
        uvicorn.run(
            "main:app", host=host, port=port, workers=default_settings.server_workers
        )
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
