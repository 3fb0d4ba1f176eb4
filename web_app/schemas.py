"""Pydantic schemas for API responses."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Index backend status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Check timestamp",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "database": "healthy",
                    "cache": "healthy",
                    "timestamp": "2024-01-01T12:00:00Z"
                }
            ]
        }
    }
