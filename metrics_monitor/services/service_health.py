import logging
from typing import List

import psutil

from metrics_monitor.models.services import ServiceState, ServiceStatus
from metrics_monitor.services.metrics_buffer import MetricsBuffer

logger = logging.getLogger(__name__)


def _count_processes() -> int:
    return len(psutil.pids())


def _count_active_interfaces() -> int:
    return sum(1 for stats in psutil.net_if_stats().values() if stats.isup)


class ServiceHealthTracker:
    """
    Derive coarse status entries for a fixed set of pseudo-services.

    This is a liveness heuristic based on buffer occupancy and a couple of
    cheap psutil reads, not a dependency health check.
    """

    def check(self, buffer: MetricsBuffer) -> List[ServiceStatus]:
        occupancy = len(buffer)
        return [
            self._system_status(occupancy),
            self._network_status(),
            ServiceStatus(
                name="API Server",
                status=ServiceState.HEALTHY,
                details="Responding normally",
            ),
            ServiceStatus(
                name="Metrics",
                status=ServiceState.HEALTHY if occupancy else ServiceState.STARTING,
                details=f"{occupancy}/{buffer.capacity} samples buffered",
            ),
        ]

    def _system_status(self, occupancy: int) -> ServiceStatus:
        if not occupancy:
            return ServiceStatus(
                name="System",
                status=ServiceState.STARTING,
                details="Waiting for the first sample",
            )

        try:
            details = f"{_count_processes()} processes running"
        except Exception as exc:
            logger.warning("Could not count processes: %s", exc)
            details = "Sampling active"

        return ServiceStatus(name="System", status=ServiceState.HEALTHY, details=details)

    def _network_status(self) -> ServiceStatus:
        try:
            active = _count_active_interfaces()
        except Exception as exc:
            logger.warning("Could not read network interfaces: %s", exc)
            return ServiceStatus(
                name="Network",
                status=ServiceState.UNHEALTHY,
                details=f"Interface check failed: {exc}",
            )

        return ServiceStatus(
            name="Network",
            status=ServiceState.HEALTHY if active > 0 else ServiceState.UNHEALTHY,
            details=f"{active} interfaces active",
        )
