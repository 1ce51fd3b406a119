from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter
from kink import di

from client_identity.domain.client import GeoDatabase

router = APIRouter(prefix='/health', tags=['health'])


@router.get('/liveness')
async def liveness_check() -> dict[str, Any]:
    """Simple liveness probe for container orchestration
    Returns 200 if the application is running.
    """
    return {
        'status': 'alive',
        'timestamp': datetime.now(UTC).isoformat(),
    }


@router.get('/readiness')
async def readiness_check() -> dict[str, Any]:
    """Reports whether the GeoLite2 database can be opened.

    Location lookups degrade to empty results without it, so the service
    stays ready either way.
    """
    database = di[GeoDatabase]
    reader = await database.get_reader()

    return {
        'status': 'ready',
        'geo_database': 'open' if reader is not None else 'unavailable',
    }
