"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (Redis, database engine).
Middleware, CORS, error handlers, and routers are all registered here.

The immutable AuthConfig is derived from settings exactly once and stored
on app.state; request dependencies read it from there.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contenthub import __version__
from contenthub.api import api_router
from contenthub.auth.session import AuthConfig
from contenthub.config import Settings, settings as default_settings
from contenthub.errors import register_error_handlers
from contenthub.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    app_settings: Settings = app.state.settings
    logger.info(
        "contenthub.starting",
        version=__version__,
        environment=app_settings.environment,
        port=app_settings.port,
    )

    from contenthub.redis_client import close_redis, init_redis
    try:
        await init_redis(app_settings.redis_url)
        logger.info("contenthub.redis_connected", url=app_settings.redis_url)
    except Exception as e:
        # Redis is optional: only rate limiting depends on it
        logger.warning("contenthub.redis_unavailable", error=str(e))

    yield

    logger.info("contenthub.shutdown")
    await close_redis()

    from contenthub.db.engine import engine
    await engine.dispose()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app_settings = app_settings or default_settings
    configure_logging(app_settings.log_level, json_logs=app_settings.log_json)

    app = FastAPI(
        title="Content Hub API",
        description="Accounts, categories, and curated resources for the Content Hub frontend",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.auth_config = AuthConfig.from_settings(app_settings)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → RateLimit → Cache → handler

    from contenthub.middleware.cache import CacheControlMiddleware
    from contenthub.middleware.rate_limit import RateLimitMiddleware
    from contenthub.middleware.request_id import RequestIdMiddleware
    from contenthub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CacheControlMiddleware,
        path_prefixes=("/api/v1/categories",),
        max_age=app_settings.category_cache_seconds,
    )
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=app_settings.rate_limit_rpm,
        auth_rpm=app_settings.rate_limit_auth_rpm,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: contenthub.main:app)
app = create_app()
