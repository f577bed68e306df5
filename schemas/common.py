"""Common Pydantic models."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str


class StorageHealthResponse(BaseModel):
    """Storage connectivity probe."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    files_count: Optional[int] = Field(None, alias="filesCount")
    error: Optional[str] = None
