from enum import Enum

from pydantic import BaseModel, Field


class ServiceState(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    STARTING = "starting"


class ServiceStatus(BaseModel):
    """Coarse liveness status of one named pseudo-service."""

    name: str = Field(..., description="Service name, e.g. System or Metrics")
    status: ServiceState
    details: str = Field(..., description="Short explanation of the status")
