from datetime import timedelta
from typing import List, Tuple

import pytest

from metrics_monitor.config import Settings
from metrics_monitor.models.system import SystemInfo
from metrics_monitor.services.host_monitor import SystemInfoUnavailable, make_sample


class FakeSampler:
    """
    Stand-in for the psutil backed Sampler: replays a list of
    (cpu, memory, disk) readings, repeating the last one forever.
    """

    def __init__(self, readings: List[Tuple[float, float, float]]):
        self.readings = readings
        self.calls = 0
        self.fail_system_info = False

    async def sample(self):
        cpu, memory, disk = self.readings[min(self.calls, len(self.readings) - 1)]
        self.calls += 1
        return make_sample(cpu, memory, disk)

    async def backfill(self, count, spacing_seconds):
        base = await self.sample()
        return [
            make_sample(
                base.cpu_pct,
                base.memory_pct,
                base.disk_pct,
                captured_at=base.captured_at - timedelta(seconds=(count - 1 - i) * spacing_seconds),
            )
            for i in range(count)
        ]

    async def system_info(self):
        if self.fail_system_info:
            raise SystemInfoUnavailable("Failed to get system info: psutil exploded")
        return SystemInfo(cpu="Test CPU @ 3.00GHz", memory="16 GB", os="Linux 6.1.0")


@pytest.fixture
def fake_sampler():
    return FakeSampler([(20.0, 40.0, 50.0)])


@pytest.fixture
def settings(tmp_path):
    """Settings with slow cadences so periodic jobs never fire during a test."""
    return Settings(
        reports_dir=str(tmp_path / "reports"),
        warmup_samples=3,
        sample_interval_seconds=3600,
        service_check_interval_seconds=3600,
        report_interval_seconds=3600,
    )
