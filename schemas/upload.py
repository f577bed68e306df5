"""Upload request/response models."""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.bridge.pipeline_client import PipelineStatus


class ArchiveAction(str, Enum):
    NONE = "none"
    ARCHIVED = "archived"
    ARCHIVE_FAILED = "archive_failed"


class UploadPayload(BaseModel):
    """An uploaded spreadsheet, held in memory for the length of one request."""

    file_name: str
    content: bytes
    content_type: Optional[str] = None


class IngestResult(BaseModel):
    """Outcome of one ingestion.

    The three axes are independent: the write can succeed while the archive
    move failed, the pipeline trigger failed, or both.
    """

    upload_succeeded: bool
    path: str
    original_name: str
    message: str
    archive_action: ArchiveAction = ArchiveAction.NONE
    archive_path: Optional[str] = None
    archive_error: Optional[str] = None
    pipeline_status: PipelineStatus
    pipeline_data: Optional[Dict[str, Any]] = None
    pipeline_error: Optional[str] = None


class UploadResponse(BaseModel):
    """Response model for the upload endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    path: str
    original_name: str = Field(..., alias="originalName")
    archive_action: ArchiveAction = Field(..., alias="archiveAction")
    archive_path: Optional[str] = Field(None, alias="archivePath")
    archive_error: Optional[str] = Field(None, alias="archiveError")
    pipeline_status: PipelineStatus = Field(..., alias="pipelineStatus")
    pipeline_data: Optional[Dict[str, Any]] = Field(None, alias="pipelineData")
    pipeline_error: Optional[str] = Field(None, alias="pipelineError")

    @classmethod
    def from_result(cls, result: IngestResult) -> "UploadResponse":
        return cls(
            success=result.upload_succeeded,
            message=result.message,
            path=result.path,
            original_name=result.original_name,
            archive_action=result.archive_action,
            archive_path=result.archive_path,
            archive_error=result.archive_error,
            pipeline_status=result.pipeline_status,
            pipeline_data=result.pipeline_data,
            pipeline_error=result.pipeline_error,
        )
