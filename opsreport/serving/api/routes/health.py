"""
Health Check Endpoints

Liveness and a health summary for orchestration systems. The reporting
engine holds no connections of its own, so health reports the registered
reports and the thresholds in effect.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel

from opsreport.config import get_settings
from opsreport.reports import REPORTS

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    settings = get_settings()
    reporting = settings.reporting
    return HealthResponse(
        status="healthy",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks={
            "reports": {"status": "healthy", "registered": sorted(REPORTS)},
            "thresholds": {
                "aging_boundaries": list(reporting.aging_bounds),
                "stock_warning_multiplier": reporting.stock_warning_multiplier,
                "compliance_warning_days": reporting.compliance_warning_days,
            },
        },
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Kubernetes liveness probe endpoint.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}
