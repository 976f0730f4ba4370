"""Gateway probes.

/health reports the gateway build, /ready whether settings are loaded and the
SAP relay routes are mounted, /live that the process answers at all. None of
them contact SAP: the gateway holds no credentials of its own.
"""

from datetime import datetime
from typing import Dict, List

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core import __version__


router = APIRouter()

# Paths the gateway must serve to be useful to the dashboard app
REQUIRED_ROUTES = (
    "/api/sap/test-connection",
    "/api/sap/sales-orders",
    "/api/sap/sales-orders/{sales_order_id}",
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    settings_loaded: bool
    missing_routes: List[str]


def _missing_routes(request: Request) -> List[str]:
    mounted = {getattr(route, "path", None) for route in request.app.routes}
    return [path for path in REQUIRED_ROUTES if path not in mounted]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow().isoformat(),
        version=__version__,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> JSONResponse:
    """Ready once settings are attached to the app and the SAP routes are mounted."""
    settings_loaded = getattr(request.app.state, "settings", None) is not None
    missing = _missing_routes(request)
    ready = settings_loaded and not missing

    body = ReadinessResponse(
        status="ready" if ready else "not_ready",
        settings_loaded=settings_loaded,
        missing_routes=missing,
    )
    return JSONResponse(content=body.model_dump(), status_code=200 if ready else 503)


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    return {"status": "alive"}
