from src.config.settings import get_settings


def test_settings_defaults(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", "UseDevelopmentStorage=true")
    for name in ("STORAGE_BUCKET", "RAW_FOLDER", "ARCHIVE_FOLDER", "RAW_FILE_NAME", "PYTHON_SERVICE_URL"):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    layout = settings.storage_layout()
    assert layout.bucket == "geotechnical-data"
    assert layout.canonical_path == "raw/Raw_Data.xlsx"
    assert layout.archive_folder == "old_raw_files"
    assert settings.pipeline_trigger_timeout_seconds == 30.0
    get_settings.cache_clear()


def test_settings_strip_trailing_dot_from_service_url(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", "UseDevelopmentStorage=true")
    monkeypatch.setenv("PYTHON_SERVICE_URL", "http://pipeline:8000/.")
    monkeypatch.setenv("STORAGE_BUCKET", "isolated-bucket")
    settings = get_settings()
    assert settings.python_service_url == "http://pipeline:8000"
    assert settings.storage_layout().bucket == "isolated-bucket"
    get_settings.cache_clear()
