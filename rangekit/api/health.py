"""
Health check endpoints for monitoring system status
"""

from datetime import datetime, timezone
from typing import Dict, Any

from fastapi import APIRouter, Request
import structlog

from rangekit import __version__
from rangekit.api.dependencies import get_app_settings
from rangekit.config.settings import Settings
from rangekit.datemath import get_date_math
from rangekit.models.schemas import HealthCheck

router = APIRouter()
logger = structlog.get_logger(__name__)

PROBE_EXPRESSION = "now-1h/h"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@router.get("", response_model=HealthCheck)
@router.get("/", response_model=HealthCheck)
async def health_check(request: Request) -> HealthCheck:
    """Health check for the date math engine and configuration"""

    services = {
        "date_math": _check_date_math(),
        "configuration": _check_configuration(get_app_settings(request)),
    }

    overall_status = "healthy"
    for result in services.values():
        if result.get("status") != "healthy":
            overall_status = "degraded"

    started_at = getattr(request.app.state, "started_at", None)
    uptime = (_utcnow() - started_at).total_seconds() if started_at else 0.0

    return HealthCheck(
        status=overall_status,
        version=__version__,
        timestamp=_utcnow(),
        services=services,
        uptime=uptime
    )


@router.get("/liveness")
async def liveness_probe():
    """Kubernetes liveness probe endpoint"""
    return {"status": "alive", "timestamp": _utcnow().isoformat()}


@router.get("/readiness")
async def readiness_probe(request: Request):
    """Kubernetes readiness probe endpoint"""
    result = _check_date_math()
    if result["status"] != "healthy":
        return {"status": "not_ready", "reason": result.get("error", "date math unavailable")}

    return {
        "status": "ready",
        "timestamp": _utcnow().isoformat(),
        "started": hasattr(request.app.state, "started_at")
    }


def _check_date_math() -> Dict[str, Any]:
    """Resolve a probe expression through the default collaborator"""
    try:
        date_math = get_date_math()
        resolved = date_math.parse(PROBE_EXPRESSION)
        if resolved is None:
            return {
                "status": "unhealthy",
                "error": f"could not resolve {PROBE_EXPRESSION}",
            }
        return {
            "status": "healthy",
            "details": {
                "time_zone": date_math.time_zone,
                "fiscal_year_start_month": date_math.fiscal_year_start_month,
                "week_start": date_math.week_start,
            }
        }
    except Exception as e:
        logger.error("Date math health check failed", error=str(e), exc_info=True)
        return {
            "status": "unhealthy",
            "error": str(e)
        }


def _check_configuration(settings: Settings) -> Dict[str, Any]:
    return {
        "status": "healthy",
        "details": {
            "environment": settings.environment,
            "default_resolution": settings.default_resolution,
        }
    }
