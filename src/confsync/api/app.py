"""
confsync FastAPI Application

HTTP front-end over a ConfigurationSyncEngine.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from confsync import __version__
from confsync.api.routers.configs import router as configs_router
from confsync.api.routers.health import router as health_router
from confsync.config.settings import get_config
from confsync.sync.engine import ConfigurationSyncEngine
from confsync.utils.exceptions import ConfigurationError, ConfSyncError
from confsync.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(engine: ConfigurationSyncEngine, cors_origins: list[str] | None = None) -> FastAPI:
    """Create the FastAPI application serving the engine's cache."""
    config = get_config()
    debug = bool(config.get("app.debug", False))

    app = FastAPI(
        title="confsync API",
        description="Live configuration served from the in-memory sync cache",
        version=__version__,
        docs_url="/docs" if debug else None,
        redoc_url="/redoc" if debug else None,
    )

    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins if cors_origins is not None else config.get("api.cors_origins", ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(configs_router, tags=["configs"])
    app.include_router(health_router, prefix="/health", tags=["health"])

    @app.exception_handler(ConfSyncError)
    async def confsync_exception_handler(request: Request, exc: ConfSyncError):
        """Handle confsync errors raised while serving a request."""
        logger.error(f"Request to {request.url.path} failed: {exc}")
        status_code = 400 if isinstance(exc, ConfigurationError) else 500
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors."""
        logger.error(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    return app
