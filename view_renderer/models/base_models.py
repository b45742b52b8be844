"""Pydantic models for API responses."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    template_dir: str = Field(..., description="Directory the filesystem resolver reads from")


class ErrorResponse(BaseModel):
    """Error body returned for renderer failures."""

    code: str
    message: str
    details: dict = Field(default_factory=dict)
