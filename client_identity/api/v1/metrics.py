from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

router = APIRouter(prefix='/metrics', tags=['observability'])


@router.get('')
async def get_metrics() -> Response:
    """Get all metrics in Prometheus format."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
