from typing import Literal

from pydantic import BaseModel, Field


class ServicesStatus(BaseModel):
    """Status of the services the API depends on."""

    database: Literal["connected", "unavailable"] = Field(description="Content store status")
    image_storage: Literal["available", "unavailable"] = Field(
        description="Local image directory status",
    )


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    version: str = Field(description="API version")
    status: Literal["ok", "degraded"] = Field(description="Overall health status")
    timestamp: str = Field(description="Current timestamp")
    services: ServicesStatus = Field(description="Status of dependent services")
