from fastapi import APIRouter

from .client import router as client_router
from .health import router as health_router
from .metrics import router as metrics_router

router = APIRouter()

router.include_router(client_router)
router.include_router(health_router)
router.include_router(metrics_router)
