from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from src.errors import IngestionBusy


class PathLockRegistry:
    """Named mutexes keyed by object path, shared by every request in the process."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, path: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(path, threading.Lock())

    @contextmanager
    def hold(self, path: str, timeout: float = 60.0) -> Iterator[None]:
        lock = self._lock_for(path)
        if not lock.acquire(timeout=timeout):
            raise IngestionBusy(f"Another upload is still writing '{path}'; try again shortly")
        try:
            yield
        finally:
            lock.release()


path_locks = PathLockRegistry()
