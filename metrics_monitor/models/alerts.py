from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class Alert(BaseModel):
    """A threshold crossing detected on a single sample."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Alert class: 1 = cpu, 2 = memory, 3 = disk")
    name: str = Field(..., description="Short title, e.g. High CPU Usage")
    description: str = Field(
        ...,
        description="Human readable text including the triggering value",
    )
    severity: Severity
    raised_at: datetime = Field(
        ...,
        description="Capture time of the sample that raised the alert",
    )
