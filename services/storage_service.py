"""Read-only folder and file listing over the raw data bucket."""
from __future__ import annotations

from typing import List

from loguru import logger

from schemas.storage import FileInfo, FolderInfo
from src.errors import StorageReadFailed
from src.storage.blob_store import BlobEntry, BlobStore, BlobStoreError

EMPTY_FOLDER_PLACEHOLDER = ".emptyFolderPlaceholder"


def _list(store: BlobStore, folder: str = "") -> List[BlobEntry]:
    try:
        return store.list(folder)
    except BlobStoreError as exc:
        logger.error("Storage listing failed: {}", exc)
        raise StorageReadFailed(exc.detail or str(exc)) from exc


def list_folders(store: BlobStore) -> List[FolderInfo]:
    """Top-level bucket entries without an object identity."""
    folders = [
        FolderInfo(name=entry.name, created_at=entry.created_at)
        for entry in _list(store)
        if not entry.has_identity
    ]
    logger.debug("Folders found: {}", [f.name for f in folders])
    return folders


def is_visible_file(entry: BlobEntry) -> bool:
    return (
        entry.has_identity
        and entry.name != EMPTY_FOLDER_PLACEHOLDER
        and not entry.name.startswith(".")
    )


def list_files(store: BlobStore, folder: str) -> List[FileInfo]:
    logger.info("Fetching files from folder: {}", folder)
    files = [
        FileInfo(
            name=entry.name,
            metadata=entry.metadata,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )
        for entry in _list(store, folder)
        if is_visible_file(entry)
    ]
    logger.info("Found {} files in {}", len(files), folder)
    return files
