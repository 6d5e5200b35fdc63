"""Tests for the key-value storage backends."""

import pytest

from petspend.services.storage import (
    FileKeyValueStorage,
    InMemoryKeyValueStorage,
    StorageError,
)


@pytest.fixture(params=["memory", "file"])
def backend(request, tmp_path):
    if request.param == "memory":
        return InMemoryKeyValueStorage()
    return FileKeyValueStorage(tmp_path / "data")


class TestBackends:
    """Behaviour shared by every backend."""

    def test_missing_key(self, backend):
        """Test reading a key that was never set."""
        assert backend.get("PetStore.state") is None

    def test_set_get_overwrite(self, backend):
        """Test the last write wins."""
        backend.set("PetStore.state", b"one")
        backend.set("PetStore.state", b"two")
        assert backend.get("PetStore.state") == b"two"

    def test_binary_values(self, backend):
        """Test arbitrary bytes survive unchanged."""
        payload = bytes(range(256))
        backend.set("blob", payload)
        assert backend.get("blob") == payload

    def test_remove(self, backend):
        """Test removing a key, twice."""
        backend.set("k", b"v")
        backend.remove("k")
        backend.remove("k")
        assert backend.get("k") is None


class TestFileBackend:
    """File-specific behaviour."""

    def test_creates_directory_lazily(self, tmp_path):
        """Test the data directory appears on first write."""
        directory = tmp_path / "nested" / "dir"
        storage = FileKeyValueStorage(directory)
        assert not directory.exists()
        storage.set("PetStore.state", b"{}")
        assert directory.is_dir()

    def test_keys_stay_inside_directory(self, tmp_path):
        """Test path separators in keys do not escape the directory."""
        storage = FileKeyValueStorage(tmp_path / "data")
        storage.set("../escape", b"x")
        assert not (tmp_path / "escape.blob").exists()
        assert storage.get("../escape") == b"x"
        assert len(list((tmp_path / "data").iterdir())) == 1

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic writes clean up after themselves."""
        storage = FileKeyValueStorage(tmp_path)
        storage.set("a", b"1")
        storage.set("a", b"2")
        assert [p.name for p in tmp_path.iterdir()] == ["a.blob"]

    def test_empty_key_rejected(self, tmp_path):
        """Test an empty key is a storage error."""
        with pytest.raises(StorageError):
            FileKeyValueStorage(tmp_path).set("", b"x")

    def test_unreadable_path_raises_storage_error(self, tmp_path):
        """Test OS errors are wrapped in StorageError."""
        storage = FileKeyValueStorage(tmp_path)
        (tmp_path / "k.blob").mkdir()
        with pytest.raises(StorageError):
            storage.get("k")


class TestMemoryBackend:
    """In-memory specific behaviour."""

    def test_write_count(self):
        """Test set() calls are counted."""
        storage = InMemoryKeyValueStorage({"k": b"v"})
        assert storage.write_count == 0
        storage.set("k", b"w")
        assert storage.write_count == 1
        assert storage.keys() == ["k"]
