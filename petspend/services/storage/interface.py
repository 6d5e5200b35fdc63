"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The store only needs get/set of byte blobs by key,
the same shape as a platform preferences store. Keeping the
interface this small allows us to:
1. Use in-memory storage for testing
2. Keep the state on disk for real use
3. Keep the store decoupled from where bytes end up

The interface is synchronous. The store persists on the caller's
thread right after each mutation, never in the background.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for byte-blob storage keyed by string.

    Any backend (in-memory, file system, ...) must implement
    these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Read the blob stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored bytes, or None if nothing is stored

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """
        Store a blob under a key, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is not an error.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
