"""
Application factory for FastAPI.

Part of RIT-3: Settings and app factory

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    app = FastAPI(
        title="Rituals API",
        description="Recurring rituals: schedules, typed step completions and forks",
        version="1.0.0",
    )

    _configure_cors(app, settings)

    _include_routers(app)

    _log_startup(settings)

    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
        )
        logger.info("Sentry initialized for rituals-api")


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    trusted_origins = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]
    extra_origins = settings.cors_allowed_origins.split(",")
    trusted_origins.extend([origin.strip() for origin in extra_origins if origin.strip()])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=trusted_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import (
        completions_router,
        health_router,
        rituals_router,
        schedule_router,
        units_router,
    )

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    app.include_router(schedule_router)
    app.include_router(rituals_router)
    app.include_router(completions_router)
    app.include_router(units_router)


def _log_startup(settings: Settings) -> None:
    """Log configuration status at startup."""
    logger.info(f"Rituals API starting (environment={settings.environment})")
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase is not configured; storage endpoints will return 503")
    if not settings.api_keys_list and not settings.clerk_domain:
        logger.info("No API keys or Clerk domain configured; only app JWTs are accepted")
    if settings.is_production and settings.jwt_secret.startswith("rituals-jwt-secret"):
        logger.warning("JWT_SECRET is the development default in production")


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
