"""
Append-only dump file with a single-writer lock.
"""

import fcntl
import logging
import os
from pathlib import Path
from typing import Optional, TextIO

from .exceptions import PersistenceError


class DumpArtifact:
    """
    The dump file being written.

    Opened exclusively (the file must not exist yet) and held under an
    advisory ``flock`` until closed. Every append is flushed and fsynced so
    a chunk is on disk before the next one is produced.
    """

    ENCODING = 'utf-8'
    # Lets binary column values decoded with surrogateescape round-trip byte-exact.
    ERRORS = 'surrogateescape'

    def __init__(self, path: Path):
        self.path = Path(path)
        self._handle: Optional[TextIO] = None

    def __enter__(self) -> "DumpArtifact":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._handle is None

    def open(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = open(self.path, 'x', encoding=self.ENCODING, errors=self.ERRORS)
        except OSError as e:
            raise PersistenceError(f"Cannot create dump file {self.path}: {e}") from e

        try:
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            self._handle.close()
            self._handle = None
            raise PersistenceError(f"Dump file {self.path} is locked by another writer") from e
        logging.debug(f"Opened dump file {self.path}")

    def append(self, chunk: str) -> None:
        if not chunk:
            return
        if self._handle is None:
            raise PersistenceError(f"Dump file {self.path} is not open")
        try:
            self._handle.write(chunk)
            self._handle.flush()
            os.fsync(self._handle.fileno())
        except OSError as e:
            raise PersistenceError(f"Failed writing to {self.path}: {e}") from e

    def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        finally:
            handle.close()
        logging.debug(f"Closed dump file {self.path}")
