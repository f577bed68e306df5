"""Shared FastAPI dependencies."""
from functools import lru_cache

from fastapi import Depends

from services.ingestion_service import IngestionController
from src.bridge.pipeline_client import PipelineClient
from src.config.settings import Settings, get_settings
from src.storage.blob_store import AzureBlobStore, BlobStore
from src.storage.layout import StorageLayout


@lru_cache()
def get_app_settings() -> Settings:
    """Return cached settings instance for FastAPI dependency injection."""
    return get_settings()


def get_storage_layout(settings: Settings = Depends(get_app_settings)) -> StorageLayout:
    return settings.storage_layout()


@lru_cache()
def _azure_store(connection_string: str, bucket: str, timeout: int) -> AzureBlobStore:
    return AzureBlobStore.from_connection_string(connection_string, bucket, timeout=timeout)


def get_blob_store(settings: Settings = Depends(get_app_settings)) -> BlobStore:
    return _azure_store(
        settings.azure_storage_connection_string,
        settings.storage_bucket,
        settings.storage_timeout_seconds,
    )


@lru_cache()
def _pipeline_client(base_url: str, trigger_timeout: float, poll_timeout: float) -> PipelineClient:
    return PipelineClient(base_url, trigger_timeout=trigger_timeout, poll_timeout=poll_timeout)


def get_pipeline_client(settings: Settings = Depends(get_app_settings)) -> PipelineClient:
    return _pipeline_client(
        settings.python_service_url,
        settings.pipeline_trigger_timeout_seconds,
        settings.pipeline_poll_timeout_seconds,
    )


def get_ingestion_controller(
    settings: Settings = Depends(get_app_settings),
    store: BlobStore = Depends(get_blob_store),
    notifier: PipelineClient = Depends(get_pipeline_client),
    layout: StorageLayout = Depends(get_storage_layout),
) -> IngestionController:
    return IngestionController(
        store=store,
        notifier=notifier,
        layout=layout,
        lock_timeout=settings.ingest_lock_timeout_seconds,
    )
