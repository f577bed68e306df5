"""Error taxonomy for raw data ingestion and the storage/pipeline proxies."""
from __future__ import annotations


class RawDataServiceError(Exception):
    """Base error; ``status_code`` is what the HTTP layer answers with."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(RawDataServiceError):
    """Missing file, empty body or a non-spreadsheet extension."""

    status_code = 400


class IngestionBusy(RawDataServiceError):
    """Another upload held the canonical path for longer than the lock timeout."""

    status_code = 409


class StorageReadFailed(RawDataServiceError):
    status_code = 502


class StorageArchiveFailed(RawDataServiceError):
    """Moving the previous canonical object to the archive failed. Never fatal."""


class StorageWriteFailed(RawDataServiceError):
    status_code = 500


class PipelineTriggerFailed(RawDataServiceError):
    """The processing service did not accept a trigger. Never fatal to an upload."""

    status_code = 502


class PipelineUnavailable(RawDataServiceError):
    status_code = 502
