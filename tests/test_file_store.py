"""Tests for the JSON file backend and in-memory backend."""

import errno
import os

import pytest

from expense_tracker.config import StorageSettings
from expense_tracker.services.storage import (
    InMemoryBackend,
    JSONFileBackend,
    QuotaExceededError,
    StorageReadError,
    StorageWriteError,
    create_backend,
)
from expense_tracker.services.storage import file_store


@pytest.fixture
def file_backend(tmp_path):
    return JSONFileBackend(tmp_path / "data", retry_wait_seconds=0)


class TestJSONFileBackend:
    """Tests for file-per-key storage."""

    def test_missing_key_reads_none(self, file_backend):
        """Test that a fresh directory reads as empty."""
        assert file_backend.get_item("expense-tracker-data") is None

    def test_round_trip(self, file_backend):
        """Test that a stored value is read back verbatim."""
        file_backend.set_item("expense-tracker-data", '[{"id": "a"}]')
        assert file_backend.get_item("expense-tracker-data") == '[{"id": "a"}]'

    def test_value_lives_in_key_file(self, file_backend):
        """Test the on-disk location of a key."""
        file_backend.set_item("expense-tracker-data", "[]")
        path = file_backend.data_dir / "expense-tracker-data.json"
        assert path.read_text(encoding="utf-8") == "[]"

    def test_overwrite_leaves_no_temp_files(self, file_backend):
        """Test that atomic writes clean up after themselves."""
        file_backend.set_item("k", "first")
        file_backend.set_item("k", "second")

        assert file_backend.get_item("k") == "second"
        assert sorted(p.name for p in file_backend.data_dir.iterdir()) == ["k.json"]

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", ".."])
    def test_invalid_key_rejected(self, file_backend, key):
        """Test that keys cannot address files outside the data directory."""
        with pytest.raises(ValueError):
            file_backend.path_for(key)

    def test_invalid_key_is_a_storage_error(self, file_backend):
        """Test that backend operations report a bad key as a storage failure."""
        with pytest.raises(StorageReadError):
            file_backend.get_item("expense tracker")
        with pytest.raises(StorageWriteError):
            file_backend.set_item("expense tracker", "[]")
        with pytest.raises(StorageWriteError):
            file_backend.remove_item("../escape")

    def test_remove_missing_key_is_ok(self, file_backend):
        """Test that removing an absent key does not fail."""
        file_backend.remove_item("never-written")

    def test_remove_item(self, file_backend):
        """Test that removed keys read as absent."""
        file_backend.set_item("k", "value")
        file_backend.remove_item("k")
        assert file_backend.get_item("k") is None

    def test_unreadable_file_raises_read_error(self, file_backend):
        """Test that undecodable content is reported as a read error."""
        path = file_backend.path_for("k")
        path.parent.mkdir(parents=True)
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(StorageReadError):
            file_backend.get_item("k")

    def test_transient_write_error_is_retried(self, file_backend, monkeypatch):
        """Test that a write succeeds if a retry gets through."""
        real_replace = os.replace
        calls = {"count": 0}

        def flaky_replace(src, dst):
            calls["count"] += 1
            if calls["count"] == 1:
                raise OSError(errno.EIO, "I/O error")
            return real_replace(src, dst)

        monkeypatch.setattr(file_store.os, "replace", flaky_replace)

        file_backend.set_item("k", "value")

        assert calls["count"] == 2
        assert file_backend.get_item("k") == "value"

    def test_persistent_write_error_raises(self, file_backend, monkeypatch):
        """Test that exhausting retries raises StorageWriteError."""
        def broken_replace(src, dst):
            raise OSError(errno.EIO, "I/O error")

        monkeypatch.setattr(file_store.os, "replace", broken_replace)

        with pytest.raises(StorageWriteError):
            file_backend.set_item("k", "value")

    def test_disk_full_raises_quota_error(self, file_backend, monkeypatch):
        """Test that running out of space is a quota failure, not retried."""
        calls = {"count": 0}

        def full_replace(src, dst):
            calls["count"] += 1
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(file_store.os, "replace", full_replace)

        with pytest.raises(QuotaExceededError):
            file_backend.set_item("k", "value")
        assert calls["count"] == 1


class TestInMemoryBackend:
    """Tests for the dict-backed store."""

    def test_round_trip(self):
        """Test basic get/set/remove."""
        backend = InMemoryBackend()
        backend.set_item("k", "v")
        assert backend.get_item("k") == "v"
        backend.remove_item("k")
        assert backend.get_item("k") is None

    def test_quota(self):
        """Test that values over the quota are refused."""
        backend = InMemoryBackend(quota_bytes=5)
        backend.set_item("k", "12345")

        with pytest.raises(QuotaExceededError):
            backend.set_item("other", "6")
        assert backend.keys() == ["k"]

    def test_quota_counts_replaced_value_once(self):
        """Test that overwriting a key does not count the old value."""
        backend = InMemoryBackend(quota_bytes=5)
        backend.set_item("k", "12345")
        backend.set_item("k", "abcde")
        assert backend.get_item("k") == "abcde"

    def test_quota_error_is_write_error(self):
        """Test the exception hierarchy."""
        assert issubclass(QuotaExceededError, StorageWriteError)


class TestCreateBackend:
    """Tests for backend selection."""

    def test_memory_backend(self):
        """Test selecting the in-memory backend."""
        backend = create_backend(StorageSettings(backend="memory"))
        assert isinstance(backend, InMemoryBackend)

    def test_file_backend(self, tmp_path):
        """Test selecting the file backend."""
        backend = create_backend(StorageSettings(backend="file", data_dir=tmp_path))
        assert isinstance(backend, JSONFileBackend)
        assert backend.data_dir == tmp_path
