"""Proxy router for the processing service's pipeline endpoints."""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.dependencies import get_pipeline_client, get_storage_layout
from schemas.pipeline import PipelineStartResponse
from src.bridge.pipeline_client import PipelineClient
from src.storage.layout import StorageLayout

router = APIRouter()


@router.post("/start", response_model=PipelineStartResponse, response_model_exclude_none=True)
def start_pipeline(
    client: PipelineClient = Depends(get_pipeline_client),
    layout: StorageLayout = Depends(get_storage_layout),
):
    """Manually re-run the pipeline on the current canonical raw data."""
    outcome = client.trigger(layout.canonical_path, layout.bucket, "manual")
    body = PipelineStartResponse(
        success=outcome.started,
        path=layout.canonical_path,
        pipeline_status=outcome.status,
        pipeline_data=outcome.data,
        pipeline_error=outcome.error,
    )
    if not outcome.started:
        return JSONResponse(
            status_code=502,
            content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
    return body


@router.get("/status")
def pipeline_status(client: PipelineClient = Depends(get_pipeline_client)):
    return client.status()


@router.get("/logs")
def pipeline_logs(
    limit: int = Query(50, ge=1, le=500),
    client: PipelineClient = Depends(get_pipeline_client),
):
    return client.logs(limit=limit)
