import logging
import threading
import time
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional, Sequence

from metrics_monitor.models.alerts import Alert
from metrics_monitor.models.metrics import Sample
from metrics_monitor.models.reports import MetricStats, Report, ReportMetrics
from metrics_monitor.services.report_store import ReportStore

logger = logging.getLogger(__name__)

# (high, moderate) breakpoints for the summary bands, compared with ">".
# These are independent from the alert thresholds.
SUMMARY_BANDS = {
    "cpu": (80.0, 50.0),
    "memory": (85.0, 70.0),
    "disk": (90.0, 80.0),
}


def _stats(values: Sequence[float]) -> MetricStats:
    if not values:
        return MetricStats()
    return MetricStats(
        avg=round(sum(values) / len(values), 1),
        max=round(max(values), 1),
        min=round(min(values), 1),
        current=round(values[-1], 1),
    )


def compute_stats(samples: Sequence[Sample]) -> ReportMetrics:
    """Per-metric avg/max/min/current over all samples; zeros when empty."""
    return ReportMetrics(
        cpu=_stats([s.cpu_pct for s in samples]),
        memory=_stats([s.memory_pct for s in samples]),
        disk=_stats([s.disk_pct for s in samples]),
    )


def classify(value: float, high: float, moderate: float) -> str:
    if value > high:
        return "high"
    if value > moderate:
        return "moderate"
    return "normal"


def summarize(metrics: ReportMetrics, alerts: Sequence[Alert]) -> List[str]:
    lines: List[str] = []

    cpu_band = classify(metrics.cpu.avg, *SUMMARY_BANDS["cpu"])
    if cpu_band == "high":
        lines.append(f"HIGH CPU: Average {metrics.cpu.avg}% (Peak: {metrics.cpu.max}%)")
    else:
        lines.append(f"{cpu_band.upper()} CPU: Average {metrics.cpu.avg}%")

    memory_band = classify(metrics.memory.avg, *SUMMARY_BANDS["memory"])
    if memory_band == "high":
        lines.append(
            f"HIGH MEMORY: Average {metrics.memory.avg}% (Peak: {metrics.memory.max}%)"
        )
    else:
        lines.append(f"{memory_band.upper()} MEMORY: Average {metrics.memory.avg}%")

    disk_band = classify(metrics.disk.avg, *SUMMARY_BANDS["disk"])
    lines.append(f"{disk_band.upper()} DISK: {metrics.disk.avg}% used")

    if alerts:
        lines.append(f"{len(alerts)} ACTIVE ALERTS")
    else:
        lines.append("NO ALERTS")

    return lines


class ReportAggregator:
    """
    Roll the metrics buffer and the active alerts up into Reports.

    Keeps the last `history_limit` reports in memory (oldest evicted first)
    and hands every new report to the ReportStore. Any store error is logged
    and otherwise ignored; aggregate() always returns the new report.
    """

    def __init__(
        self,
        history_limit: int,
        store: Optional[ReportStore] = None,
        window_label: str = "10 minutes",
    ):
        self.history_limit = history_limit
        self.store = store
        self.window_label = window_label
        self._history: Deque[Report] = deque(maxlen=history_limit)
        self._last_id = 0
        self._lock = threading.Lock()

    def aggregate(self, samples: Sequence[Sample], alerts: Sequence[Alert]) -> Report:
        now = datetime.now().astimezone()
        metrics = compute_stats(samples)

        with self._lock:
            report = Report(
                id=self._next_id(),
                generated_at=now,
                display_time=now.strftime("%Y-%m-%d %H:%M:%S"),
                covered_duration=self.window_label,
                metrics=metrics,
                data_point_count=len(samples),
                active_alert_count=len(alerts),
                active_alert_details=list(alerts),
                summary=summarize(metrics, alerts),
            )
            self._history.append(report)
            history = list(self._history)

        self._persist(report, history)
        logger.info(
            "Report %s generated from %d samples (%d active alerts)",
            report.id,
            report.data_point_count,
            report.active_alert_count,
        )
        return report

    def history(self) -> List[Report]:
        with self._lock:
            return list(self._history)

    def latest(self) -> Optional[Report]:
        with self._lock:
            return self._history[-1] if self._history else None

    def _next_id(self) -> int:
        # epoch milliseconds, bumped when two reports share a millisecond
        candidate = int(time.time() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def _persist(self, report: Report, history: List[Report]) -> None:
        if self.store is None:
            return
        try:
            self.store.save(report, history)
        except Exception:
            logger.exception("Error saving report %s", report.id)
