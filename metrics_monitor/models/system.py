from datetime import datetime

from pydantic import BaseModel, Field


class SystemInfo(BaseModel):
    """Static identity of the monitored host."""

    cpu: str = Field(..., description="CPU model string")
    memory: str = Field(..., description="Total installed memory, e.g. 16 GB")
    os: str = Field(..., description="Operating system platform and release")


class HealthStatus(BaseModel):
    status: str = Field(default="OK", description="Liveness of the process itself")
    timestamp: datetime
