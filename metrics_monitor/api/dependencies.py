from fastapi import Request

from metrics_monitor.services.scheduler import MonitorScheduler


def get_monitor(request: Request) -> MonitorScheduler:
    """Return the MonitorScheduler created by create_app()."""
    return request.app.state.monitor
