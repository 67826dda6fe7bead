"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class GenerateRequest(BaseModel):
    """Request to shorten a URL."""

    grue_link: Optional[str] = Field(
        None,
        alias="grue-link",
        description="The URL to shorten",
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {"grue-link": "https://example.com/very/long/path/to/resource"},
            ]
        },
    }


class GenerateResponse(BaseModel):
    """Response after shortening a URL."""

    link: str = Field(..., description="The complete short URL")
    redirect: str = Field(..., description="The original long URL")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "link": "https://grue.link/aB3_x",
                    "redirect": "https://example.com/very/long/path",
                }
            ]
        }
    }


class LinkInfoResponse(BaseModel):
    """Response with link information."""

    short_code: str
    link: str
    long_url: str
    created_at: datetime
    last_visited_at: datetime
    expires_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Store status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
