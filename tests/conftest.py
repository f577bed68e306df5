import pytest

from src.storage.layout import StorageLayout
from tests.fakes import FakeBlobStore, FakeNotifier


@pytest.fixture
def layout() -> StorageLayout:
    return StorageLayout(bucket="test-bucket")


@pytest.fixture
def store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()
