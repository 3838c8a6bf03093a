from datetime import datetime, timezone

from fastapi import APIRouter

from metrics_monitor.models.system import HealthStatus

router = APIRouter()


@router.get("", response_model=HealthStatus, summary="Liveness probe")
async def health() -> HealthStatus:
    return HealthStatus(status="OK", timestamp=datetime.now(timezone.utc))
