from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import Engine

from app.acl.catalog import default_catalog, load_catalog
from app.acl.errors import AclConnectionError, AclUnknownError, UnauthorizedError
from app.acl.roles_cache import RolesCache
from app.db.init_db import init_db
from app.db.role_store import SqlRoleStore
from app.db.session import build_engine, build_session_factory
from app.logging_config import configure_app_logging
from app.repos.factory import ReposFactory
from app.routers import admin, delivery_addresses, health, user_roles, users
from app.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """
    Composition root.

    The permission catalog, the roles cache and the repos factory are built
    exactly once here and shared by every request through `app.state`.
    """

    settings = settings or get_settings()
    engine = engine or build_engine(settings.resolved_db_url())
    session_factory = build_session_factory(engine)

    catalog_path = settings.resolved_acl_catalog_path()
    catalog = load_catalog(catalog_path) if catalog_path else default_catalog()
    roles_cache = RolesCache(SqlRoleStore(session_factory))
    repos_factory = ReposFactory(catalog, roles_cache)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")
        logger.info("Permission catalog: %s", catalog_path or "built-in")

        init_db(engine, session_factory, repos_factory, seed=settings.seed_demo_data)
        logger.info("Database initialized (tables ensured + seed if needed)")

        yield
        # Shutdown
        roles_cache.clear()
        engine.dispose()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.repos_factory = repos_factory

    app.add_exception_handler(UnauthorizedError, _unauthorized_handler)
    app.add_exception_handler(AclConnectionError, _acl_connection_handler)
    app.add_exception_handler(AclUnknownError, _acl_unknown_handler)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(user_roles.router)
    app.include_router(delivery_addresses.router)
    app.include_router(admin.router)

    return app


async def _unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


async def _acl_connection_handler(request: Request, exc: AclConnectionError) -> JSONResponse:
    logger.error("Authorization unavailable path=%s error=%s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Authorization service unavailable"},
    )


async def _acl_unknown_handler(request: Request, exc: AclUnknownError) -> JSONResponse:
    logger.error("Authorization failed path=%s error=%s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Authorization failed"},
    )


app = create_app()
