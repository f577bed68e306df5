import typing
from typing import List

import pytest

from schemas.upload import ArchiveAction, UploadPayload
from services.ingestion_service import IngestionController
from src.bridge.pipeline_client import PipelineStatus, TriggerOutcome
from src.errors import IngestionBusy, InvalidInput, StorageWriteFailed
from src.storage.blob_store import BlobEntry
from src.storage.locks import PathLockRegistry

from tests.fakes import FakeBlobStore, FakeNotifier, StepClock

CANONICAL = "raw/Raw_Data.xlsx"


def _controller(store, notifier, layout, **kwargs):
    kwargs.setdefault("locks", PathLockRegistry())
    kwargs.setdefault("clock", StepClock())
    return IngestionController(store=store, notifier=notifier, layout=layout, **kwargs)


def _xlsx(name: str, content: bytes) -> UploadPayload:
    return UploadPayload(
        file_name=name,
        content=content,
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


@pytest.mark.parametrize("name", ["data.csv", "report.pdf", "Raw_Data.xlsx.txt", "noext", ""])
def test_rejects_non_spreadsheet_without_touching_store(store, notifier, layout, name):
    controller = _controller(store, notifier, layout)
    with pytest.raises(InvalidInput):
        controller.ingest(UploadPayload(file_name=name, content=b"x", content_type="text/csv"))
    assert store.calls == []
    assert notifier.calls == []


def test_rejects_empty_body(store, notifier, layout):
    with pytest.raises(InvalidInput):
        _controller(store, notifier, layout).ingest(_xlsx("A.xlsx", b""))
    assert store.calls == []


def test_extension_check_ignores_declared_mime_and_case(store, notifier, layout):
    payload = UploadPayload(file_name="LEGACY.XLS", content=b"old-format", content_type="application/octet-stream")
    result = _controller(store, notifier, layout).ingest(payload)
    assert result.upload_succeeded
    assert store.objects[CANONICAL] == (b"old-format", "application/octet-stream")


def test_missing_content_type_falls_back_to_spreadsheet_type(store, notifier, layout):
    _controller(store, notifier, layout).ingest(UploadPayload(file_name="A.xlsx", content=b"A"))
    assert store.objects[CANONICAL][1] == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def test_first_upload_creates_canonical_without_archive(store, notifier, layout):
    result = _controller(store, notifier, layout).ingest(_xlsx("A.xlsx", b"A-bytes"))

    assert result.upload_succeeded
    assert result.path == CANONICAL
    assert result.original_name == "A.xlsx"
    assert result.archive_action is ArchiveAction.NONE
    assert result.archive_path is None
    assert result.pipeline_status is PipelineStatus.STARTED
    assert result.pipeline_data == {"status": "started"}
    assert store.data(CANONICAL) == b"A-bytes"
    assert store.paths_under("old_raw_files") == []
    assert notifier.calls == [(CANONICAL, "test-bucket", "upload")]


def test_replacing_archives_previous_bytes(notifier, layout):
    store = FakeBlobStore({CANONICAL: b"A-bytes"})
    result = _controller(store, notifier, layout).ingest(_xlsx("B.xlsx", b"B-bytes"))

    assert result.archive_action is ArchiveAction.ARCHIVED
    assert result.archive_path == "old_raw_files/Raw_Data_2025-03-01T08-30-00-123456.xlsx"
    assert store.data(CANONICAL) == b"B-bytes"
    assert store.paths_under("old_raw_files") == [result.archive_path]
    assert store.data(result.archive_path) == b"A-bytes"


def test_operations_run_in_order(notifier, layout):
    store = FakeBlobStore({CANONICAL: b"A"})
    result = _controller(store, notifier, layout).ingest(_xlsx("B.xlsx", b"B"))
    assert store.calls == [
        "list:raw",
        f"move:{CANONICAL}->{result.archive_path}",
        f"upload:{CANONICAL}",
    ]


def test_archive_failure_still_replaces_canonical(notifier, layout):
    store = FakeBlobStore({CANONICAL: b"A"})
    store.fail_move = True
    result = _controller(store, notifier, layout).ingest(_xlsx("B.xlsx", b"B"))

    assert result.upload_succeeded
    assert result.archive_action is ArchiveAction.ARCHIVE_FAILED
    assert "permission denied" in result.archive_error
    assert result.archive_path is None
    assert store.data(CANONICAL) == b"B"
    assert store.paths_under("old_raw_files") == []
    assert result.pipeline_status is PipelineStatus.STARTED


def test_probe_failure_proceeds_with_write(store, notifier, layout):
    store.fail_list = True
    result = _controller(store, notifier, layout).ingest(_xlsx("A.xlsx", b"A"))

    assert result.upload_succeeded
    assert result.archive_action is ArchiveAction.NONE
    assert store.data(CANONICAL) == b"A"
    assert not any(c.startswith("move:") for c in store.calls)


def test_write_failure_is_fatal_and_skips_trigger(store, notifier, layout):
    store.fail_upload = True
    with pytest.raises(StorageWriteFailed) as excinfo:
        _controller(store, notifier, layout).ingest(_xlsx("A.xlsx", b"A"))
    assert "quota exceeded" in excinfo.value.message
    assert excinfo.value.status_code == 500
    assert notifier.calls == []


def test_pipeline_failure_keeps_upload_successful(store, layout):
    notifier = FakeNotifier(TriggerOutcome(status=PipelineStatus.FAILED, error="connection refused"))
    result = _controller(store, notifier, layout).ingest(_xlsx("A.xlsx", b"A"))

    assert result.upload_succeeded
    assert result.pipeline_status is PipelineStatus.FAILED
    assert result.pipeline_error == "connection refused"
    assert "pipeline failed to start" in result.message
    assert store.data(CANONICAL) == b"A"


def test_repeated_uploads_archive_each_previous_version(store, notifier, layout):
    controller = _controller(store, notifier, layout)
    for i in range(4):
        controller.ingest(_xlsx("same.xlsx", f"v{i}".encode()))

    archives = store.paths_under("old_raw_files")
    assert len(archives) == 3
    assert [store.data(p) for p in archives] == [b"v0", b"v1", b"v2"]
    assert store.data(CANONICAL) == b"v3"


def test_busy_canonical_path_raises_without_side_effects(store, notifier, layout):
    locks = PathLockRegistry()
    controller = _controller(store, notifier, layout, locks=locks, lock_timeout=0.01)
    with locks.hold(CANONICAL):
        with pytest.raises(IngestionBusy):
            controller.ingest(_xlsx("A.xlsx", b"A"))
    assert store.calls == []


def test_probe_returns_store_entries(store, notifier, layout):
    store.objects[CANONICAL] = (b"A", None)
    entries = _controller(store, notifier, layout)._probe()
    assert [(e.name, e.has_identity) for e in entries] == [("Raw_Data.xlsx", True)]
    assert typing.get_type_hints(IngestionController._probe)["return"] == List[BlobEntry]
