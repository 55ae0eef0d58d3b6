"""
Health check schemas.

Dependencies: pydantic
System role: Health API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


class ComponentHealth(BaseModel):
    """Health of one external dependency."""

    status: str
    message: str = ""
    timestamp: datetime


class ServicesHealthResponse(BaseModel):
    """Aggregated dependency health."""

    status: str
    services: dict[str, ComponentHealth] = Field(default_factory=dict)
