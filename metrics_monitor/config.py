from typing import List, Optional
from pydantic import BaseModel, Field
import os
from functools import lru_cache


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


class Settings(BaseModel):
    # Sliding window / report retention
    buffer_capacity: int = Field(
        default=20,
        gt=0,
        description="Number of samples kept in the metrics buffer",
    )
    report_history_limit: int = Field(
        default=24,
        gt=0,
        description="Number of reports kept in memory (24 x 10 minutes = 4 hours)",
    )

    # Cadences
    sample_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Seconds between two metric samples",
    )
    service_check_interval_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Seconds between two service health checks",
    )
    report_interval_seconds: float = Field(
        default=600.0,
        gt=0,
        description="Seconds between two periodic reports",
    )
    report_window_label: str = Field(
        default="10 minutes",
        description="Nominal duration label stored on each report",
    )

    # Sampler caching and timeouts
    disk_cache_ttl_seconds: float = Field(
        default=30.0,
        ge=0,
        description="How long a disk usage reading is reused before re-measuring",
    )
    system_info_cache_ttl_seconds: float = Field(
        default=60.0,
        ge=0,
        description="How long the system identity is reused before re-reading",
    )
    sample_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Timeout for the fast CPU and memory reads",
    )
    disk_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for the disk and system identity reads",
    )
    warmup_samples: int = Field(
        default=5,
        ge=0,
        description="Backdated samples seeded into the buffer at startup",
    )
    disk_path: Optional[str] = Field(
        default=None,
        description="Mount point or drive of the primary volume, e.g. / or C:\\",
    )

    # Reports
    reports_dir: str = Field(
        default="reports",
        description="Directory that receives report_<id>.json and latest_reports.json",
    )

    # HTTP server
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API (the dashboard frontend)",
    )
    host: str = Field(default="0.0.0.0", description="Bind address for uvicorn")
    port: int = Field(default=3001, gt=0, description="Bind port for uvicorn")
    log_level: str = Field(default="INFO", description="Root log level")

    @classmethod
    def from_env(cls) -> "Settings":
        raw_origins = os.getenv("CORS_ORIGINS", "")
        cors_origins = [o.strip() for o in raw_origins.split(",") if o.strip()] or [
            "http://localhost:3000"
        ]

        return cls(
            buffer_capacity=_env_int("METRICS_BUFFER_CAPACITY", 20),
            report_history_limit=_env_int("REPORT_HISTORY_LIMIT", 24),
            sample_interval_seconds=_env_float("SAMPLE_INTERVAL_SECONDS", 5.0),
            service_check_interval_seconds=_env_float("SERVICE_CHECK_INTERVAL_SECONDS", 10.0),
            report_interval_seconds=_env_float("REPORT_INTERVAL_SECONDS", 600.0),
            report_window_label=os.getenv("REPORT_WINDOW_LABEL", "10 minutes"),
            disk_cache_ttl_seconds=_env_float("DISK_CACHE_TTL_SECONDS", 30.0),
            system_info_cache_ttl_seconds=_env_float("SYSTEM_INFO_CACHE_TTL_SECONDS", 60.0),
            sample_timeout_seconds=_env_float("SAMPLE_TIMEOUT_SECONDS", 3.0),
            disk_timeout_seconds=_env_float("DISK_TIMEOUT_SECONDS", 5.0),
            warmup_samples=_env_int("WARMUP_SAMPLES", 5),
            disk_path=os.getenv("DISK_PATH") or None,
            reports_dir=os.getenv("REPORTS_DIR", "reports"),
            cors_origins=cors_origins,
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3001),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
