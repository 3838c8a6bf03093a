from typing import List

from fastapi import APIRouter, Depends, HTTPException

from metrics_monitor.api.dependencies import get_monitor
from metrics_monitor.models.alerts import Alert
from metrics_monitor.models.metrics import Sample
from metrics_monitor.models.services import ServiceStatus
from metrics_monitor.models.system import SystemInfo
from metrics_monitor.services.host_monitor import SystemInfoUnavailable
from metrics_monitor.services.scheduler import MonitorScheduler

router = APIRouter()


@router.get("/metrics", response_model=List[Sample], summary="Metrics history")
async def metrics_history(monitor: MonitorScheduler = Depends(get_monitor)) -> List[Sample]:
    """
    Return the current sliding window of samples, oldest first.
    """
    return monitor.buffer.snapshot()


@router.get("/alerts", response_model=List[Alert], summary="Active alerts")
async def active_alerts(monitor: MonitorScheduler = Depends(get_monitor)) -> List[Alert]:
    """
    Return the alerts raised by the most recent sample.
    """
    return monitor.alerts()


@router.get("/services", response_model=List[ServiceStatus], summary="Service status")
async def service_status(
    monitor: MonitorScheduler = Depends(get_monitor),
) -> List[ServiceStatus]:
    return monitor.services()


@router.get("/system-info", response_model=SystemInfo, summary="System information")
async def system_info(monitor: MonitorScheduler = Depends(get_monitor)) -> SystemInfo:
    """
    Return CPU model, installed memory and operating system of the host.

    The values are cached for a minute. If they cannot be read and nothing is
    cached yet, a HTTP 503 Service Unavailable is returned.
    """
    try:
        return await monitor.sampler.system_info()
    except SystemInfoUnavailable as exc:
        raise HTTPException(
            status_code=503,
            detail=str(exc),
        ) from exc
