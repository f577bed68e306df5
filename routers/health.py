"""Health check router."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_blob_store
from schemas.common import HealthResponse, StorageHealthResponse
from src.storage.blob_store import BlobStore, BlobStoreError

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "raw-data-api"}


@router.get("/api/health", response_model=StorageHealthResponse, response_model_exclude_none=True)
def storage_health(store: BlobStore = Depends(get_blob_store)):
    """Check blob storage connectivity by listing one bucket entry."""
    try:
        entries = store.list("", limit=1)
    except BlobStoreError as exc:
        body = StorageHealthResponse(success=False, message="Storage connection failed", error=exc.detail or str(exc))
        return JSONResponse(status_code=500, content=body.model_dump(by_alias=True, exclude_none=True))
    return StorageHealthResponse(success=True, message="Storage connection successful", files_count=len(entries))
