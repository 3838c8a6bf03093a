import asyncio
import logging
import os
import platform
import random
import sys
import time
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

import psutil

from metrics_monitor.config import Settings
from metrics_monitor.models.metrics import Sample
from metrics_monitor.models.system import SystemInfo
from metrics_monitor.services.blocking import CallInFlight, SingleFlight
from metrics_monitor.services.cache import CachedReading

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Used when a reading fails before any real value was seen.
_SYNTHETIC_RANGES: Dict[str, Tuple[float, float]] = {
    "cpu": (5.0, 35.0),
    "memory": (10.0, 50.0),
    "disk": (15.0, 35.0),
}


class SystemInfoUnavailable(RuntimeError):
    """Raised when the host identity cannot be read and nothing is cached."""


def clamp_percent(value: float) -> float:
    return round(min(100.0, max(0.0, float(value))), 2)


def make_sample(
    cpu_pct: float,
    memory_pct: float,
    disk_pct: float,
    captured_at: Optional[datetime] = None,
) -> Sample:
    """Build a Sample, clamping every percentage into [0, 100]."""
    captured_at = captured_at or datetime.now().astimezone()
    return Sample(
        captured_at=captured_at,
        display_time=captured_at.strftime("%H:%M:%S"),
        cpu_pct=clamp_percent(cpu_pct),
        memory_pct=clamp_percent(memory_pct),
        disk_pct=clamp_percent(disk_pct),
    )


def primary_disk_path(override: Optional[str] = None) -> str:
    """
    Return the mount point of the primary system volume.

    On Windows this is the system drive (usually C:\\), everywhere else the
    root mount. An explicit override from the settings always wins.
    """
    if override:
        return override
    if sys.platform.startswith("win"):
        return os.environ.get("SystemDrive", "C:") + "\\"
    return "/"


def _read_cpu_percent() -> float:
    # user + system time share over a short interval
    times = psutil.cpu_times_percent(interval=0.1)
    return times.user + times.system


def _read_memory_percent() -> float:
    memory = psutil.virtual_memory()
    return memory.used / memory.total * 100


def _read_disk_percent(path: str) -> float:
    return psutil.disk_usage(path).percent


def _read_cpu_model() -> str:
    try:
        with open("/proc/cpuinfo", encoding="utf-8") as handle:
            for line in handle:
                if line.lower().startswith("model name"):
                    return line.split(":", 1)[1].strip()
    except OSError:
        pass
    return platform.processor() or platform.machine() or "unknown"


def _read_system_info() -> SystemInfo:
    total_gb = round(psutil.virtual_memory().total / 1024 / 1024 / 1024)
    return SystemInfo(
        cpu=_read_cpu_model(),
        memory=f"{total_gb} GB",
        os=f"{platform.system()} {platform.release()}".strip(),
    )


class Sampler:
    """
    Produce one Sample per call from live psutil readings.

    Every psutil call runs in a worker thread with a timeout, and at most one
    call per metric is in flight. A failed, timed-out or still hanging
    reading is replaced by the last known value for that metric, or by a
    low synthetic value if none exists yet, so `sample()` always returns a
    well-formed Sample.
    """

    def __init__(self, settings: Settings, clock: Callable[[], float] = time.monotonic):
        self.settings = settings
        self.disk_path = primary_disk_path(settings.disk_path)
        self._disk_cache: CachedReading[float] = CachedReading(
            settings.disk_cache_ttl_seconds, clock=clock
        )
        self._system_info_cache: CachedReading[SystemInfo] = CachedReading(
            settings.system_info_cache_ttl_seconds, clock=clock
        )
        self._last_known: Dict[str, float] = {}
        self._calls = SingleFlight()

    async def sample(self) -> Sample:
        cpu, memory = await asyncio.gather(
            self._acquire("cpu", _read_cpu_percent, self.settings.sample_timeout_seconds),
            self._acquire("memory", _read_memory_percent, self.settings.sample_timeout_seconds),
        )
        disk = await self._disk_percent()

        return make_sample(
            cpu_pct=self._resolve("cpu", cpu),
            memory_pct=self._resolve("memory", memory),
            disk_pct=self._resolve("disk", disk),
        )

    async def backfill(self, count: int, spacing_seconds: float) -> List[Sample]:
        """
        Build `count` backdated samples around one real reading.

        The samples are spaced `spacing_seconds` apart, the newest one taken
        now, and carry a small random jitter so charts have a visible shape
        right after startup.
        """
        base = await self.sample()
        now = base.captured_at
        samples: List[Sample] = []
        for i in range(count):
            offset = timedelta(seconds=(count - 1 - i) * spacing_seconds)
            samples.append(
                make_sample(
                    cpu_pct=base.cpu_pct + (random.random() - 0.5) * 5,
                    memory_pct=base.memory_pct + (random.random() - 0.5) * 3,
                    disk_pct=base.disk_pct + (random.random() - 0.5) * 2,
                    captured_at=now - offset,
                )
            )
        return samples

    async def system_info(self) -> SystemInfo:
        """
        Return the cached host identity, re-reading it once the cache is stale.

        Raises SystemInfoUnavailable if the read fails and no earlier value
        exists; a stale value is preferred over an error.
        """
        cached = self._system_info_cache.fresh()
        if cached is not None:
            return cached

        info = await self._acquire(
            "system info", _read_system_info, self.settings.disk_timeout_seconds
        )
        if info is None:
            stale = self._system_info_cache.last()
            if stale is None:
                raise SystemInfoUnavailable("Failed to get system info")
            logger.warning("System info refresh failed, serving cached value")
            return stale

        self._system_info_cache.store(info)
        return info

    async def _disk_percent(self) -> Optional[float]:
        cached = self._disk_cache.fresh()
        if cached is not None:
            return cached

        value = await self._acquire(
            "disk",
            lambda: _read_disk_percent(self.disk_path),
            self.settings.disk_timeout_seconds,
        )
        if value is None:
            return self._disk_cache.last()

        self._disk_cache.store(value)
        return value

    async def _acquire(
        self, metric: str, reader: Callable[[], T], timeout: float
    ) -> Optional[T]:
        try:
            return await self._calls.run(metric, reader, timeout)
        except asyncio.TimeoutError:
            logger.warning("Reading %s timed out after %.1fs", metric, timeout)
        except CallInFlight:
            logger.warning("Reading %s skipped, previous read still hanging", metric)
        except Exception as exc:
            logger.warning("Reading %s failed: %s", metric, exc)
        return None

    def _resolve(self, metric: str, value: Optional[float]) -> float:
        if value is None:
            if metric in self._last_known:
                value = self._last_known[metric]
            else:
                low, high = _SYNTHETIC_RANGES[metric]
                value = random.uniform(low, high)
                logger.info("Using synthetic %s value %.1f", metric, value)

        value = clamp_percent(value)
        self._last_known[metric] = value
        return value
