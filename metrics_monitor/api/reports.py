from typing import List

from fastapi import APIRouter, Depends, HTTPException

from metrics_monitor.api.dependencies import get_monitor
from metrics_monitor.models.reports import Report
from metrics_monitor.services.scheduler import MonitorScheduler

router = APIRouter()


@router.get("", response_model=List[Report], summary="Report history")
async def list_reports(monitor: MonitorScheduler = Depends(get_monitor)) -> List[Report]:
    """
    Return the retained reports, oldest first.
    """
    return monitor.aggregator.history()


@router.get("/latest", response_model=Report, summary="Latest report")
async def latest_report(monitor: MonitorScheduler = Depends(get_monitor)) -> Report:
    """
    Return the most recent report, or HTTP 404 if none was generated yet.
    """
    report = monitor.aggregator.latest()
    if report is None:
        raise HTTPException(status_code=404, detail="No reports generated yet")
    return report


@router.post("/generate", response_model=Report, summary="Generate report now")
async def generate_report(monitor: MonitorScheduler = Depends(get_monitor)) -> Report:
    """
    Aggregate the current buffer and alerts into a new report and return it.
    """
    return await monitor.generate_report()
