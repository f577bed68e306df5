from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.storage.layout import StorageLayout


class Settings(BaseSettings):
    """Centralized configuration loaded from environment variables or .env."""

    azure_storage_connection_string: str = Field(..., alias="AZURE_STORAGE_CONNECTION_STRING")
    storage_bucket: str = Field("geotechnical-data", alias="STORAGE_BUCKET")
    raw_folder: str = Field("raw", alias="RAW_FOLDER")
    archive_folder: str = Field("old_raw_files", alias="ARCHIVE_FOLDER")
    raw_file_name: str = Field("Raw_Data.xlsx", alias="RAW_FILE_NAME")
    storage_timeout_seconds: int = Field(20, alias="STORAGE_TIMEOUT_SECONDS")

    python_service_url: str = Field("http://localhost:8000", alias="PYTHON_SERVICE_URL")
    pipeline_trigger_timeout_seconds: float = Field(30.0, alias="PIPELINE_TRIGGER_TIMEOUT_SECONDS")
    pipeline_poll_timeout_seconds: float = Field(5.0, alias="PIPELINE_POLL_TIMEOUT_SECONDS")

    ingest_lock_timeout_seconds: float = Field(60.0, alias="INGEST_LOCK_TIMEOUT_SECONDS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("python_service_url")
    @classmethod
    def _strip_trailing(cls, value: str) -> str:
        # .env files are often saved with a stray trailing dot or slash
        return value.rstrip("./")

    def storage_layout(self) -> StorageLayout:
        return StorageLayout(
            bucket=self.storage_bucket,
            raw_folder=self.raw_folder,
            archive_folder=self.archive_folder,
            raw_file_name=self.raw_file_name,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()  # type: ignore[arg-type]
