from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Optional


@dataclass(frozen=True)
class StorageLayout:
    """
    Where the raw dataset lives inside the bucket.

    The canonical object is the single "current" spreadsheet; every replaced
    version is moved under ``archive_folder`` with a timestamped name.
    """

    bucket: str = "geotechnical-data"
    raw_folder: str = "raw"
    archive_folder: str = "old_raw_files"
    raw_file_name: str = "Raw_Data.xlsx"

    @property
    def canonical_path(self) -> str:
        return f"{self.raw_folder}/{self.raw_file_name}"

    def archive_path(self, now: Optional[datetime] = None) -> str:
        """Archive name for a canonical object replaced at ``now`` (UTC)."""
        now = now or datetime.now(timezone.utc)
        name = PurePosixPath(self.raw_file_name)
        # colons and periods are not portable in file names
        stamp = now.strftime("%Y-%m-%dT%H-%M-%S-%f")
        return f"{self.archive_folder}/{name.stem}_{stamp}{name.suffix}"
