"""API response data models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response from the health probe."""

    status: str
    timestamp: str
    version: str
