from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Sample(BaseModel):
    """One timestamped reading of CPU, memory and disk utilisation."""

    model_config = ConfigDict(frozen=True)

    captured_at: datetime = Field(..., description="Moment the sample was taken")
    display_time: str = Field(
        ...,
        description="Local wall-clock time (HH:MM:SS) used as chart label",
    )
    cpu_pct: float = Field(
        ...,
        ge=0,
        le=100,
        description="CPU utilisation in percent (user + system)",
    )
    memory_pct: float = Field(
        ...,
        ge=0,
        le=100,
        description="RAM usage in percent (used / total)",
    )
    disk_pct: float = Field(
        ...,
        ge=0,
        le=100,
        description="Usage of the primary volume in percent",
    )
