"""Pipeline proxy models."""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.bridge.pipeline_client import PipelineStatus


class PipelineStartResponse(BaseModel):
    """Response model for a manual pipeline start."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    path: str
    pipeline_status: PipelineStatus = Field(..., alias="pipelineStatus")
    pipeline_data: Optional[Dict[str, Any]] = Field(None, alias="pipelineData")
    pipeline_error: Optional[str] = Field(None, alias="pipelineError")
