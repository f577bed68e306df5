"""Raw data ingestion business logic."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Callable, List, Optional

from loguru import logger

from schemas.upload import ArchiveAction, IngestResult, UploadPayload
from src.bridge.pipeline_client import PipelineNotifier, TriggerOutcome
from src.errors import InvalidInput, StorageArchiveFailed, StorageReadFailed, StorageWriteFailed
from src.storage.blob_store import BlobEntry, BlobStore, BlobStoreError
from src.storage.layout import StorageLayout
from src.storage.locks import PathLockRegistry, path_locks

ALLOWED_EXTENSIONS = (".xlsx", ".xls")

_SPREADSHEET_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
}


def validate_payload(payload: UploadPayload) -> None:
    """Reject anything that is not a non-empty .xlsx/.xls upload.

    Browsers report unreliable MIME types for spreadsheets, so only the file
    name extension is checked.
    """
    if not payload.file_name:
        raise InvalidInput("No file provided")
    if not payload.file_name.lower().endswith(ALLOWED_EXTENSIONS):
        raise InvalidInput("Only Excel files (.xlsx, .xls) are allowed")
    if not payload.content:
        raise InvalidInput(f"Uploaded file '{payload.file_name}' is empty")


class IngestionController:
    """
    Replaces the canonical raw dataset and notifies the processing pipeline.

    Flow:
    1. Probe the raw folder for the canonical object
    2. Move an existing canonical object to a timestamped archive path
    3. Upsert the upload at the canonical path
    4. Trigger the processing pipeline

    Steps 1-3 run under a per-path lock. Only a failed write (3) fails the
    ingestion; probe, archive and trigger failures are reported in the result.
    """

    def __init__(
        self,
        store: BlobStore,
        notifier: PipelineNotifier,
        layout: StorageLayout,
        locks: Optional[PathLockRegistry] = None,
        lock_timeout: float = 60.0,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.layout = layout
        self.locks = locks or path_locks
        self.lock_timeout = lock_timeout
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def ingest(self, payload: UploadPayload) -> IngestResult:
        validate_payload(payload)
        canonical = self.layout.canonical_path
        logger.info("Uploading {} ({} bytes) to {}", payload.file_name, len(payload.content), canonical)

        archive_action = ArchiveAction.NONE
        archive_path = None
        archive_error = None
        with self.locks.hold(canonical, timeout=self.lock_timeout):
            if self._canonical_exists():
                archive_path = self.layout.archive_path(self.clock())
                try:
                    self._archive(canonical, archive_path)
                    archive_action = ArchiveAction.ARCHIVED
                except StorageArchiveFailed as exc:
                    logger.warning("Keeping upload despite archive failure: {}", exc.message)
                    archive_action = ArchiveAction.ARCHIVE_FAILED
                    archive_error = exc.message
                    archive_path = None
            self._write(canonical, payload)

        outcome = self.notifier.trigger(canonical, self.layout.bucket, "upload")
        return IngestResult(
            upload_succeeded=True,
            path=canonical,
            original_name=payload.file_name,
            message=self._message(outcome),
            archive_action=archive_action,
            archive_path=archive_path,
            archive_error=archive_error,
            pipeline_status=outcome.status,
            pipeline_data=outcome.data,
            pipeline_error=outcome.error,
        )

    def _canonical_exists(self) -> bool:
        try:
            entries = self._probe()
        except StorageReadFailed as exc:
            # A read failure must not block new data; fall through to an unconditional write.
            logger.warning("Existence probe failed, assuming no canonical file: {}", exc.message)
            return False
        exists = any(e.has_identity and e.name == self.layout.raw_file_name for e in entries)
        logger.debug("Canonical {} exists={}", self.layout.canonical_path, exists)
        return exists

    def _probe(self) -> List[BlobEntry]:
        try:
            return self.store.list(self.layout.raw_folder)
        except BlobStoreError as exc:
            raise StorageReadFailed(str(exc)) from exc

    def _archive(self, canonical: str, archive_path: str) -> None:
        logger.info("Found existing {}, moving to {}", canonical, archive_path)
        try:
            self.store.move(canonical, archive_path)
        except BlobStoreError as exc:
            logger.error("Archive move failed: {}", exc)
            raise StorageArchiveFailed(str(exc)) from exc
        logger.info("Archived previous raw data to {}", archive_path)

    def _write(self, canonical: str, payload: UploadPayload) -> None:
        suffix = PurePosixPath(payload.file_name.lower()).suffix
        content_type = payload.content_type or _SPREADSHEET_TYPES.get(suffix)
        try:
            self.store.upload(canonical, payload.content, content_type=content_type, overwrite=True)
        except BlobStoreError as exc:
            logger.error("Upload of {} failed: {}", canonical, exc)
            raise StorageWriteFailed(exc.detail or str(exc)) from exc
        logger.info("Stored {} as {}", payload.file_name, canonical)

    def _message(self, outcome: TriggerOutcome) -> str:
        name = self.layout.raw_file_name
        if outcome.started:
            return f"File uploaded successfully as {name} and pipeline started"
        return f"File uploaded successfully as {name}, but pipeline failed to start"
