"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.exceptions import TutorError
from .models.errors import ErrorResponse
from .routes import health, usage, users
from modules.accounts.routes import router as accounts_router
from modules.billing.routes import router as billing_router
from modules.coaching.routes import router as coaching_router
from modules.scenarios.routes import router as scenarios_router
from modules.sessions.routes import drills_router, sessions_router, simulations_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    yield
    # Shutdown
    logger.info("Shutting down %s", settings.app_name)


async def tutor_error_handler(request: Request, exc: TutorError) -> JSONResponse:
    """Render application errors with the status their base class declares."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": "Internal server error", "details": {}},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Voice practice for meeting communication skills",
        version=settings.app_version,
        lifespan=lifespan,
        responses={500: {"model": ErrorResponse}},
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Error handlers
    app.add_exception_handler(TutorError, tutor_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(scenarios_router, prefix="/api/scenarios", tags=["scenarios"])
    app.include_router(simulations_router, prefix="/api/simulations", tags=["simulations"])
    app.include_router(sessions_router, prefix="/api/sessions", tags=["sessions"])
    app.include_router(drills_router, prefix="/api/drills", tags=["drills"])
    app.include_router(accounts_router, prefix="/api/auth", tags=["auth"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(usage.router, prefix="/api/usage", tags=["usage"])
    app.include_router(billing_router, prefix="/api/billing", tags=["billing"])
    app.include_router(coaching_router, prefix="/api/ai", tags=["ai"])

    return app


# Application instance for uvicorn
app = create_app()
