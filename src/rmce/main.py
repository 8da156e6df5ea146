"""FastAPI application factory.

Run with ``uvicorn rmce.main:create_app --factory``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI

from rmce.auth.dependencies import get_current_identity
from rmce.auth.jwt import TokenService
from rmce.auth.router import router as auth_router
from rmce.challenges.router import router as challenges_router
from rmce.config import get_settings
from rmce.database import close_db, create_schema, init_db
from rmce.friends.router import router as friends_router
from rmce.health.router import router as health_router
from rmce.leaderboard.router import router as leaderboard_router
from rmce.middleware import setup_middleware
from rmce.posts.router import router as posts_router
from rmce.redis_client import close_redis, init_redis
from rmce.routes.router import router as routes_router
from rmce.sensor_data.router import router as sensor_data_router
from rmce.users.router import router as users_router

logger = structlog.get_logger()

# Every endpoint on these routers requires a bearer token.
PROTECTED_ROUTERS = (
    routes_router,
    challenges_router,
    leaderboard_router,
    friends_router,
    sensor_data_router,
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    # SQLite has no migrations; build the tables from the ORM metadata.
    if settings.database_url.startswith("sqlite"):
        await create_schema()

    logger.info("startup_complete", environment=settings.environment, version=settings.app_version)
    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Raises ConfigurationError when no JWT secret is configured.
    """
    settings = get_settings()

    app = FastAPI(
        title="RMCE API",
        description="Route tracking, timed runs, head-to-head challenges and leaderboards",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.token_service = TokenService.from_settings(settings)

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(posts_router)
    for router in PROTECTED_ROUTERS:
        app.include_router(router, dependencies=[Depends(get_current_identity)])

    return app
