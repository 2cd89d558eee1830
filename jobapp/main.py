# jobapp/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobapp.api.routers import (
    application_router,
    health_router,
    job_role_router,
    user_router,
)
from jobapp.auth import auth_router
from jobapp.auth.cleanup import SessionSweeper
from jobapp.auth.rate_limit import InMemoryCounterStore, LoginRateLimiter
from jobapp.auth.validation import INVALID_TYPE, ValidationFailed
from jobapp.core.settings import settings
from jobapp.db.engine import SessionLocal, init_db
from jobapp.utils.logging_setup import configure_basic_logging

logger = logging.getLogger(__name__)


def build_login_limiter() -> LoginRateLimiter:
    return LoginRateLimiter(
        InMemoryCounterStore(),
        max_attempts=settings.login_max_attempts,
        window_seconds=settings.login_window_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    sweeper = SessionSweeper(
        SessionLocal,
        interval_seconds=settings.session_cleanup_interval_minutes * 60,
    )
    sweeper.start()
    app.state.session_sweeper = sweeper
    try:
        yield
    finally:
        sweeper.stop()


async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "violations": exc.to_dict()},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    violations = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        violations.append({
            "field": ".".join(loc) or "body",
            "code": INVALID_TYPE,
            "message": error.get("msg", "Invalid value"),
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "violations": violations},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    configure_basic_logging(level=settings.log_level)

    app = FastAPI(
        title="Job Application API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware (credentials needed for the session cookie)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.login_limiter = build_login_limiter()

    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(job_role_router)
    app.include_router(application_router)

    return app


# Uvicorn entrypoint: uvicorn jobapp.main:app --reload
app = create_app()
