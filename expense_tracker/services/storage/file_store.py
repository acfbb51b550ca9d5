"""
Local JSON File Storage Implementation

DESIGN DECISION: Each storage key maps to one file in a data directory.
This is the durable stand-in for browser local storage:
1. Nothing to install or configure
2. The blob stays human-readable (it is just the JSON array)
3. Easy to back up, inspect or delete by hand

TRADEOFFS:
- Whole-file rewrites on every mutation (fine for a few thousand records)
- No locking; two processes writing the same key race, last write wins

Writes go to a temporary file that is fsynced and then renamed over the
target, so a crash mid-write leaves the previous blob intact. Transient
OS errors are retried with tenacity.
"""

import errno
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.services.storage.interface import (
    KeyValueBackend,
    QuotaExceededError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")
_NO_SPACE_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class JSONFileBackend(KeyValueBackend):
    """
    File-per-key storage under a data directory.

    The directory is created on first write, so a fresh install reads
    as empty rather than failing.
    """

    def __init__(
        self,
        data_dir: Path,
        write_attempts: int = 3,
        retry_wait_seconds: float = 0.2,
    ):
        self._data_dir = Path(data_dir)
        self._write_attempts = write_attempts
        self._retry_wait_seconds = retry_wait_seconds
        self._logger = structlog.get_logger(__name__)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Get the file path a key is stored at."""
        if not _KEY_PATTERN.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def _resolve(self, key: str, error_class: type[StorageError]) -> Path:
        """path_for, reporting a bad key as a storage failure."""
        try:
            return self.path_for(key)
        except ValueError as e:
            raise error_class(str(e)) from e

    def get_item(self, key: str) -> Optional[str]:
        path = self._resolve(key, StorageReadError)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._resolve(key, StorageWriteError)
        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(
                multiplier=self._retry_wait_seconds,
                max=self._retry_wait_seconds * 10,
            ),
            retry=retry_if_exception_type(OSError),
            reraise=False,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self._write_atomic(path, value)
        except RetryError as e:
            cause = e.last_attempt.exception()
            raise StorageWriteError(
                f"Failed to write {path} after {self._write_attempts} attempts: {cause}"
            ) from cause

    def remove_item(self, key: str) -> None:
        path = self._resolve(key, StorageWriteError)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {path}: {e}") from e

    def _write_atomic(self, path: Path, value: str) -> None:
        """Write via temp file + rename so readers never see a partial blob."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{path.stem}-",
            suffix=".tmp",
            dir=path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            self._cleanup(tmp_path)
            if e.errno in _NO_SPACE_ERRNOS:
                raise QuotaExceededError(f"No space left writing {path}") from e
            self._logger.warning(
                "storage_write_attempt_failed",
                path=str(path),
                error=str(e),
            )
            raise
        except BaseException:
            self._cleanup(tmp_path)
            raise

    @staticmethod
    def _cleanup(tmp_path: str) -> None:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
