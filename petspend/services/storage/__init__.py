"""
Storage Services Package

Provides the abstract key-value interface and its backends.
"""

from petspend.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)
from petspend.services.storage.file_storage import FileKeyValueStorage
from petspend.services.storage.memory import InMemoryKeyValueStorage

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    # Backends
    "FileKeyValueStorage",
    "InMemoryKeyValueStorage",
]
