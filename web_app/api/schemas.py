"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    # Validated by the engine so rule violations come back as validation_error
    long_url: str = Field(..., description="The URL to shorten")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"long_url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    short_url: str = Field(..., description="The complete short URL")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"short_url": "http://localhost:8080/EAaArVR"},
            ]
        }
    }


class URLInfoResponse(BaseModel):
    """Response with mapping information."""

    short_key: str
    long_url: str
    created_at: Optional[datetime] = None
    click_count: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error kind")
    detail: Optional[str] = Field(None, description="Detailed error information")
