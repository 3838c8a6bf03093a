from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from metrics_monitor.models.alerts import Alert


class MetricStats(BaseModel):
    avg: float = 0.0
    max: float = 0.0
    min: float = 0.0
    current: float = 0.0


class ReportMetrics(BaseModel):
    cpu: MetricStats = Field(default_factory=MetricStats)
    memory: MetricStats = Field(default_factory=MetricStats)
    disk: MetricStats = Field(default_factory=MetricStats)


class Report(BaseModel):
    """Statistical rollup of the metrics buffer plus the active alerts."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Epoch milliseconds at generation time")
    generated_at: datetime
    display_time: str = Field(..., description="Local date and time of generation")
    covered_duration: str = Field(..., description="Nominal window, e.g. 10 minutes")
    metrics: ReportMetrics
    data_point_count: int = Field(..., ge=0)
    active_alert_count: int = Field(..., ge=0)
    active_alert_details: List[Alert] = Field(default_factory=list)
    summary: List[str] = Field(default_factory=list)
