import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from metrics_monitor.config import Settings
from metrics_monitor.models.alerts import Alert
from metrics_monitor.models.reports import Report
from metrics_monitor.models.services import ServiceStatus
from metrics_monitor.services import alert_evaluator
from metrics_monitor.services.blocking import CallInFlight, SingleFlight
from metrics_monitor.services.host_monitor import Sampler
from metrics_monitor.services.metrics_buffer import MetricsBuffer
from metrics_monitor.services.report_aggregator import ReportAggregator
from metrics_monitor.services.report_store import ReportStore
from metrics_monitor.services.service_health import ServiceHealthTracker

logger = logging.getLogger(__name__)


class MonitorScheduler:
    """
    Own the monitor's shared state and drive the three periodic jobs.

    Sampling, service checks and report generation each run in their own
    asyncio task on their own interval. A tick of one job never overlaps the
    next tick of the same job, and a slow tick never delays the other jobs.
    Errors raised by a tick are logged and the loop keeps going.
    """

    def __init__(
        self,
        settings: Settings,
        sampler: Sampler,
        buffer: MetricsBuffer,
        aggregator: ReportAggregator,
        health_tracker: ServiceHealthTracker,
    ):
        self.settings = settings
        self.sampler = sampler
        self.buffer = buffer
        self.aggregator = aggregator
        self.health_tracker = health_tracker
        self._alerts: List[Alert] = []
        self._services: List[ServiceStatus] = []
        self._stop_event: Optional[asyncio.Event] = None
        self._tasks: List[asyncio.Task] = []
        self._calls = SingleFlight()

    @classmethod
    def from_settings(
        cls, settings: Settings, sampler: Optional[Sampler] = None
    ) -> "MonitorScheduler":
        return cls(
            settings=settings,
            sampler=sampler or Sampler(settings),
            buffer=MetricsBuffer(settings.buffer_capacity),
            aggregator=ReportAggregator(
                history_limit=settings.report_history_limit,
                store=ReportStore(settings.reports_dir),
                window_label=settings.report_window_label,
            ),
            health_tracker=ServiceHealthTracker(),
        )

    # -- state, read by the API ------------------------------------------------

    def alerts(self) -> List[Alert]:
        return list(self._alerts)

    def services(self) -> List[ServiceStatus]:
        return list(self._services)

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    # -- jobs ------------------------------------------------------------------

    async def warm_up(self) -> None:
        """Seed the buffer with backdated samples so the dashboard is never empty."""
        count = self.settings.warmup_samples
        if count:
            samples = await self.sampler.backfill(count, self.settings.sample_interval_seconds)
            self.buffer.extend(samples)
            self._alerts = alert_evaluator.evaluate(samples[-1])
            latest = samples[-1]
            logger.info(
                "Initialized with %d samples - CPU: %.1f%% Memory: %.1f%% Disk: %.1f%%",
                len(samples),
                latest.cpu_pct,
                latest.memory_pct,
                latest.disk_pct,
            )
        await self.health_tick()

    async def sample_tick(self) -> None:
        sample = await self.sampler.sample()
        self.buffer.append(sample)
        self._alerts = alert_evaluator.evaluate(sample)
        logger.debug(
            "Metrics collected - CPU: %.1f%% Memory: %.1f%% Disk: %.1f%%",
            sample.cpu_pct,
            sample.memory_pct,
            sample.disk_pct,
        )

    async def health_tick(self) -> None:
        # psutil reads run in a worker thread; a hung check keeps the previous statuses
        try:
            self._services = await self._calls.run(
                "service-health",
                lambda: self.health_tracker.check(self.buffer),
                self.settings.sample_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Service health check timed out, keeping previous status")
        except CallInFlight:
            logger.warning("Service health check still running, skipping this tick")

    async def report_tick(self) -> None:
        await self.generate_report()

    async def generate_report(self) -> Report:
        # aggregation writes report files, keep it off the event loop
        return await asyncio.to_thread(
            self.aggregator.aggregate, self.buffer.snapshot(), self.alerts()
        )

    # -- lifecycle -------------------------------------------------------------

    def start(self) -> None:
        if self.running:
            return
        self._stop_event = asyncio.Event()
        # Every job waits one interval before its first tick; warm_up() covers
        # the startup state.
        jobs = (
            ("sampler", self.settings.sample_interval_seconds, self.sample_tick),
            ("service-health", self.settings.service_check_interval_seconds, self.health_tick),
            ("reports", self.settings.report_interval_seconds, self.report_tick),
        )
        self._tasks = [
            asyncio.create_task(self._run_periodic(name, interval, job), name=name)
            for name, interval, job in jobs
        ]
        logger.info("Scheduler started with %d periodic jobs", len(self._tasks))

    async def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("Scheduler stopped")

    async def _run_periodic(
        self,
        name: str,
        interval: float,
        job: Callable[[], Awaitable[None]],
    ) -> None:
        while not await self._wait_for_stop(interval):
            try:
                await job()
            except Exception:
                logger.exception("Periodic job %s failed", name)

    async def _wait_for_stop(self, timeout: float) -> bool:
        """Sleep up to `timeout` seconds; True once a stop was requested."""
        assert self._stop_event is not None
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True
