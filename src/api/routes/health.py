"""Health check endpoint."""

import asyncio
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from adapter.mongodb.connection import ping

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(request: Request):
    """Health check endpoint with MongoDB status."""
    health_status = {
        "success": True,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "services": {}
    }

    client = getattr(request.app.state, "mongo_client", None)
    settings = getattr(request.app.state, "settings", None)
    if client is not None and settings is not None:
        healthy = await asyncio.to_thread(ping, client[settings.mongodb_database])
    else:
        healthy = False

    health_status["services"]["mongodb"] = {
        "status": "healthy" if healthy else "unhealthy",
        "message": "Connection successful" if healthy else "Connection failed or not configured",
    }

    if not healthy:
        health_status["success"] = False
        health_status["status"] = "degraded"

    status_code = status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        content=health_status,
        status_code=status_code
    )
