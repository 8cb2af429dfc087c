"""
confsync Configuration Router

Read-only access to cached configuration profiles.
"""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()

_MISSING = object()


@router.get("/configs_all")
async def configs_all(request: Request) -> dict[str, Any]:
    """Every cached profile keyed by fully qualified name."""
    return request.app.state.engine.get_all()


@router.get("/config")
async def config_by_name(request: Request, name: str | None = None) -> Any:
    """Parsed configuration of one profile by short or fully qualified name."""
    if name is None or not name.strip():
        return JSONResponse(status_code=400, content={"error": "Name parameter is required"})

    engine = request.app.state.engine
    prefix = engine.cache.prefix
    if prefix and name.startswith(prefix):
        name = name[len(prefix):]

    value = engine.get(name, _MISSING)
    if value is _MISSING:
        return JSONResponse(status_code=404, content={"error": "Config not found"})
    return JSONResponse(content=value)
