"""
FastAPI Application Entry Point

create_app() builds the application:
- Logging configured once from settings.log_level
- Rate limiting (slowapi) and CORS middleware
- Exception handlers: domain errors -> {"detail", "code"} with the
  error's status, database errors and anything unexpected -> 500
- Versioned routers under /api/{version}
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError

from groupfinder.config import get_settings
from groupfinder.routers import (
    auth_router,
    badges_router,
    categories_router,
    groups_router,
    reports_router,
    reputation_router,
    reviews_router,
    verification_router,
    votes_router,
)
from groupfinder.services.exceptions import GroupFinderError
from groupfinder.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Environment: {settings.environment}, API version: {settings.api_version}")

    yield

    logger.info(f"Shutting down {settings.app_name}...")


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="""
## GroupFinder API

A community directory of Facebook groups.

### Features
- **Groups**: Submit, browse and filter groups by category and tag
- **Votes & Reviews**: Up/down votes and 1-5 star reviews with live aggregates
- **Verification**: Admin moderation with a full audit log
- **Reputation**: Points, levels, badges and a leaderboard
- **Reports**: Users flag problem groups, admins resolve or dismiss them

### Authentication
JWT bearer tokens from `/api/v1/auth/login`.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(GroupFinderError)
    async def domain_exception_handler(
        request: Request,
        exc: GroupFinderError,
    ) -> JSONResponse:
        """Map service-layer exceptions to their HTTP status and reason code."""
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
        else:
            logger.warning(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """Log the database error, hide its details from the client."""
        logger.error(f"Database error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "A database error occurred. Please try again later.",
                "code": "database_error",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all: details only in debug mode."""
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)

        detail = str(exc) if settings.debug else "An internal error occurred."
        return JSONResponse(
            status_code=500,
            content={"detail": detail, "code": "internal_error"},
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    api_prefix = f"/api/{settings.api_version}"

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(categories_router, prefix=api_prefix)
    app.include_router(groups_router, prefix=api_prefix)
    app.include_router(votes_router, prefix=api_prefix)
    app.include_router(reviews_router, prefix=api_prefix)
    app.include_router(verification_router, prefix=api_prefix)
    app.include_router(reputation_router, prefix=api_prefix)
    app.include_router(badges_router, prefix=api_prefix)
    app.include_router(reports_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
    )
    async def health_check() -> dict:
        """Liveness probe for load balancers and monitoring."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.api_version,
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "default_limit": settings.rate_limit_default,
            },
        }

    @app.get("/", tags=["Root"], summary="API root")
    async def root() -> dict:
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# python -m groupfinder.main (production: uvicorn groupfinder.main:app)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "groupfinder.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
