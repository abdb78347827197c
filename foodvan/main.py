"""
FastAPI Application Entry Points

Food Van Ordering - two backends sharing one code base and database:
    - customer_app: /api/customer (accounts, profile update)
    - vendor_app: /api/vendor (accounts, van status, order queue)

Run with:
    uvicorn foodvan.main:customer_app --port 8001
    uvicorn foodvan.main:vendor_app --port 8002
or:
    python -m foodvan customer

Endpoints common to both:
    - GET /: navigation links
    - GET /health: database and session store check
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodvan.api import customer as customer_api
from foodvan.api import vendor as vendor_api
from foodvan.auth.exceptions import FoodVanError
from foodvan.core.config import get_settings, setup_logging
from foodvan.database import engine, get_db, init_db
from foodvan.models import AccountKind
from foodvan.schemas import ErrorResponse, HealthResponse
from foodvan.services.security import get_password_hasher
from foodvan.services.sessions import get_session_store

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)

ROUTERS = {
    AccountKind.CUSTOMER: customer_api.router,
    AccountKind.VENDOR: vendor_api.router,
}


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

def make_lifespan(kind: AccountKind):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application startup and shutdown events.
        """
        # Startup
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {settings.app_name} ({kind.value} backend)")
        logger.info(f"   Version: {settings.app_version}")
        logger.info(f"   Environment: {settings.env_mode.value}")
        logger.info(f"   Debug: {settings.debug}")
        logger.info("=" * 60)

        await init_db()
        logger.info("✅ Database initialized")

        sessions = get_session_store()
        hasher = get_password_hasher()
        logger.info(f"✅ Session Store: {sessions.provider_name}")
        logger.info(f"✅ Password Hasher: bcrypt ({hasher.rounds} rounds)")

        if settings.use_real_services:
            missing = settings.validate_production_config()
            if missing:
                logger.warning(f"⚠️ Missing production config: {missing}")

        logger.info("=" * 60)
        logger.info("✅ Application ready!")
        logger.info("=" * 60)

        yield  # Application runs

        # Shutdown
        logger.info("Shutting down...")
        await get_session_store().close()
        await engine.dispose()
        logger.info("✅ Cleanup complete")

    return lifespan


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def foodvan_error_handler(request: Request, exc: FoodVanError) -> JSONResponse:
    """Render account and vendor errors with their status and safe message."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.__class__.__name__}")
    body = ErrorResponse(error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=exc.headers,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(kind: AccountKind) -> FastAPI:
    """Build the customer or the vendor backend."""
    app = FastAPI(
        title=f"{settings.app_name} - {kind.value.capitalize()} API",
        version=settings.app_version,
        lifespan=make_lifespan(kind),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ROUTERS[kind])
    app.add_exception_handler(FoodVanError, foodvan_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    prefix = ROUTERS[kind].prefix

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, Any]:
        """API root with navigation links."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "backend": kind.value,
            "version": settings.app_version,
            "environment": settings.env_mode.value,
            "documentation": "/docs",
            "login": f"{prefix}/login",
            "health": "/health",
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
        """Verify the database and session store are reachable."""
        db_status = "healthy"
        try:
            await db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            db_status = f"unhealthy: {e.__class__.__name__}"
            logger.error(f"Database health check failed: {e}")

        sessions = get_session_store()
        sessions_status = "healthy" if await sessions.health_check() else "unhealthy"

        overall = "operational" if db_status == sessions_status == "healthy" else "degraded"
        return HealthResponse(
            status=overall,
            database=db_status,
            sessions=f"{sessions.provider_name}: {sessions_status}",
            timestamp=datetime.now(),
        )

    return app


customer_app = create_app(AccountKind.CUSTOMER)
vendor_app = create_app(AccountKind.VENDOR)
