"""
confsync API Routers

FastAPI routers for configuration reads and health checks.
"""

from confsync.api.routers.configs import router as configs_router
from confsync.api.routers.health import router as health_router

__all__ = [
    "configs_router",
    "health_router",
]
