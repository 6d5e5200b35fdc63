"""
File-Backed Key-Value Storage

Each key maps to one file inside a data directory. Writes go to a
temporary file first and are then moved into place, so a reader
never sees a half-written blob.

TRADEOFFS:
- The whole blob is rewritten on every set (fine for personal data)
- No locking; one process owns the directory
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from petspend.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)


class FileKeyValueStorage(KeyValueStorageInterface):
    """Stores every key as a file under `directory`."""

    SUFFIX = ".blob"

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not key:
            raise StorageError("Storage key must not be empty")
        # Keys may contain path separators; keep them inside the directory
        return self._directory / (quote(key, safe="") + self.SUFFIX)

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}") from e
