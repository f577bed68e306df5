"""Folder and file listing router."""
from fastapi import APIRouter, Depends

from app.dependencies import get_blob_store
from schemas.storage import FilesResponse, FoldersResponse
from services.storage_service import list_files, list_folders
from src.storage.blob_store import BlobStore

router = APIRouter()


@router.get("/folders", response_model=FoldersResponse)
def get_folders(store: BlobStore = Depends(get_blob_store)):
    return FoldersResponse(folders=list_folders(store))


@router.get("/files/{folder}", response_model=FilesResponse)
def get_files(folder: str, store: BlobStore = Depends(get_blob_store)):
    return FilesResponse(files=list_files(store, folder))
