from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from itertools import islice
from typing import Any, Dict, List, Optional, Protocol

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobPrefix, BlobServiceClient, ContainerClient, ContentSettings
from loguru import logger


@dataclass
class BlobEntry:
    """One listing row. Folders have no identity; objects do."""

    name: str
    has_identity: bool
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BlobStoreError(Exception):
    def __init__(self, operation: str, path: str, detail: str = "") -> None:
        super().__init__(f"{operation} '{path}' failed: {detail}")
        self.operation = operation
        self.path = path
        self.detail = detail


class BlobStore(Protocol):
    def list(self, folder: str = "", limit: Optional[int] = None) -> List[BlobEntry]:
        ...

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
        overwrite: bool = True,
    ) -> str:
        ...

    def move(self, from_path: str, to_path: str) -> None:
        ...


class AzureBlobStore:
    """
    Blob store backed by a single Azure Blob container (the "bucket").

    Folder semantics come from ``/`` delimited listing: a virtual directory
    shows up as a prefix entry with no identity, a blob as an entry with one.
    Azure has no rename, so ``move`` copies the bytes to a destination that
    must not exist yet and then deletes the source.
    """

    def __init__(self, container: ContainerClient, timeout: int = 20) -> None:
        self.container = container
        self.timeout = timeout

    @classmethod
    def from_connection_string(cls, connection_string: str, bucket: str, timeout: int = 20) -> "AzureBlobStore":
        service = BlobServiceClient.from_connection_string(
            connection_string,
            connection_timeout=timeout,
            read_timeout=timeout,
        )
        logger.debug("Initialized AzureBlobStore account={} bucket={}", service.account_name, bucket)
        return cls(service.get_container_client(bucket), timeout=timeout)

    def list(self, folder: str = "", limit: Optional[int] = None) -> List[BlobEntry]:
        prefix = f"{folder.strip('/')}/" if folder.strip("/") else ""
        try:
            items = self.container.walk_blobs(name_starts_with=prefix or None, delimiter="/", timeout=self.timeout)
            return [self._to_entry(item, prefix) for item in islice(items, limit)]
        except AzureError as exc:
            raise BlobStoreError("list", folder or "/", str(exc)) from exc

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
        overwrite: bool = True,
    ) -> str:
        blob_client = self.container.get_blob_client(path)
        try:
            blob_client.upload_blob(
                data,
                overwrite=overwrite,
                content_settings=ContentSettings(content_type=content_type),
                timeout=self.timeout,
            )
        except AzureError as exc:
            raise BlobStoreError("upload", path, str(exc)) from exc
        return path

    def move(self, from_path: str, to_path: str) -> None:
        source = self.container.get_blob_client(from_path)
        target = self.container.get_blob_client(to_path)
        try:
            downloader = source.download_blob(timeout=self.timeout)
            data = downloader.readall()
            target.upload_blob(
                data,
                overwrite=False,
                content_settings=downloader.properties.content_settings,
                timeout=self.timeout,
            )
        except AzureError as exc:
            raise BlobStoreError("move", f"{from_path} -> {to_path}", str(exc)) from exc

        try:
            source.delete_blob(timeout=self.timeout)
        except AzureError as exc:
            # the copy must not outlive a move that did not happen
            self._discard_copy(target, to_path)
            raise BlobStoreError("move", f"{from_path} -> {to_path}", str(exc)) from exc

    def _discard_copy(self, target: Any, to_path: str) -> None:
        try:
            target.delete_blob(timeout=self.timeout)
        except AzureError as exc:
            logger.error("Could not remove partial copy {}: {}", to_path, exc)

    @staticmethod
    def _to_entry(item: Any, prefix: str) -> BlobEntry:
        name = item.name[len(prefix):] if item.name.startswith(prefix) else item.name
        if isinstance(item, BlobPrefix):
            return BlobEntry(name=name.rstrip("/"), has_identity=False)
        content_type = item.content_settings.content_type if item.content_settings else None
        return BlobEntry(
            name=name,
            has_identity=True,
            metadata={
                "size": item.size,
                "mimetype": content_type,
                "eTag": item.etag,
                **(item.metadata or {}),
            },
            created_at=item.creation_time,
            updated_at=item.last_modified,
        )
