"""
Health check endpoints
"""

from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from webhook_tracker.models.tracker import TrackerConfig


def create_health_router(config: TrackerConfig) -> APIRouter:
    router = APIRouter()

    @router.get("")
    async def health_check() -> JSONResponse:
        """
        Health check endpoint for monitoring
        """
        health_data = {
            "status": "healthy",
            "timestamp": datetime.utcnow().isoformat(),
            "version": "1.0.0",
            "service": "github-webhook-tracker",
            **config.describe(),
        }
        return JSONResponse(content=health_data, status_code=200)

    return router
