"""Upload router for the raw dataset."""
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.dependencies import get_ingestion_controller
from schemas.upload import UploadPayload, UploadResponse
from services.ingestion_service import IngestionController
from src.errors import InvalidInput

router = APIRouter()


@router.post("", response_model=UploadResponse, response_model_exclude_none=True)
async def upload_raw_data(
    file: Optional[UploadFile] = File(None),
    controller: IngestionController = Depends(get_ingestion_controller),
):
    """
    Replace the canonical raw dataset with an uploaded spreadsheet.

    The previous canonical file is archived under the archive folder and the
    processing pipeline is triggered. A response with ``success: true`` means
    the data was stored; ``archiveAction`` and ``pipelineStatus`` report what
    happened around it.
    """
    if file is None or not file.filename:
        raise InvalidInput("No file provided")

    content = await file.read()
    payload = UploadPayload(
        file_name=file.filename,
        content=content,
        content_type=file.content_type,
    )
    result = await run_in_threadpool(controller.ingest, payload)
    return UploadResponse.from_result(result)
