"""
Prometheus metrics endpoint
"""
from fastapi import APIRouter
from fastapi.responses import Response

from app.core.metrics import get_metrics, get_metrics_content_type

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics():
    """Metrics in Prometheus text format"""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())
