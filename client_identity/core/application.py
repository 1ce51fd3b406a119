from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import NoReturn

from fastapi import FastAPI
from kink import di, inject

from client_identity.api.v1 import v1_router
from client_identity.core.config import Configuration
from client_identity.core.logging import get_logger, setup_logging
from client_identity.domain.client import GeoDatabase
from client_identity.infrastructure.observability import configure_observability

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, NoReturn]:
    """Application lifespan manager."""
    setup_logging()

    config = di[Configuration]
    logger.info(
        f'{config.app_name} {config.app_version} starting '
        f'({config.app_environment}), geo database at '
        f'{config.geo.resolved_database_path}'
    )

    try:
        yield

    finally:
        di[GeoDatabase].close()


@inject
def get_application(config: Configuration) -> FastAPI:
    """Get FastAPI application.

    Add new versions:
        app_v2 = _v2(config)
        ...
        main.mount("/api/v2", app_v2)
    """
    v1_app = _v1(config)

    main = FastAPI(lifespan=lifespan)
    main.mount('/api/v1', v1_app)

    return main


def _v1(config: Configuration) -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        debug=config.app_debug,
        description=config.app_description,
        docs_url='/docs' if config.app_environment != 'prod' else None,
        openapi_url='/docs/openapi.json' if config.app_environment != 'prod' else None,
        redoc_url=None,
        title=config.app_name,
        version=config.app_version,
    )

    configure_observability(app, config)

    app.include_router(v1_router)

    return app
