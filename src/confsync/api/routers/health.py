"""
confsync Health API Router

Liveness and readiness endpoints.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from confsync import __version__
from confsync.config.settings import get_config

router = APIRouter()


@router.get("")
async def health_check(request: Request) -> dict[str, Any]:
    """Liveness check with engine status."""
    engine = request.app.state.engine
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "environment": get_config().environment,
        "engine": engine.stats(),
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Ready once the engine finished its initial discovery."""
    engine = request.app.state.engine
    ready = engine.started and not engine.closed
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
