"""JSON-file implementation of the chunk store.

The whole collection lives in one pretty-printed JSON array and is read
and rewritten wholesale on every mutation.  Writes go through a temp
file and ``os.replace`` so readers never see a half-written store, and
each load-modify-store cycle holds a per-file lock so concurrent
requests in this process cannot lose each other's updates.  Writers in
*other* processes are not coordinated.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from mini_rag.config import settings
from mini_rag.errors import DimensionMismatchError, NotFoundError, StoreError
from mini_rag.retrieval.base import VectorStoreBase
from mini_rag.retrieval.models import ChunkRecord, DeleteResult

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[ChunkRecord])

_path_locks: dict[Path, threading.RLock] = {}
_registry_lock = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _registry_lock:
        return _path_locks.setdefault(path, threading.RLock())


class JsonVectorStore(VectorStoreBase):
    """Chunk store persisted as a single JSON file.

    Parameters
    ----------
    path:
        Location of the JSON file.  Created on the first append.
    dimension:
        Expected embedding length.  When *None* it is taken from the
        first record already in the store.
    """

    def __init__(
        self,
        path: str | os.PathLike[str] = settings.store_path,
        *,
        dimension: int | None = None,
    ) -> None:
        self.path = Path(path).resolve()
        self.dimension = dimension
        self._lock = _lock_for(self.path)

    # -- VectorStoreBase overrides --------------------------------------------

    def load(self) -> list[ChunkRecord]:
        with self._lock:
            return self._read()

    def append(self, records: list[ChunkRecord]) -> int:
        with self.transaction() as current:
            self._check_batch(current, records)
            current.extend(records)
            total = len(current)
        logger.info("Appended %d records to %s (total %d)", len(records), self.path, total)
        return total

    def delete_by_source(self, source: str) -> DeleteResult:
        with self._lock:
            current = self._read()
            kept = [r for r in current if r.source != source]
            removed = len(current) - len(kept)
            if removed == 0:
                raise NotFoundError(source)
            self._write(kept)
        logger.info("Deleted %d records with source=%r (%d remaining)", removed, source, len(kept))
        return DeleteResult(removed=removed, remaining=len(kept), source=source)

    # -- transactions ---------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[list[ChunkRecord]]:
        """Yield the loaded records for in-place editing, then persist them.

        Nothing is written when the block raises.
        """
        with self._lock:
            records = self._read()
            yield records
            self._write(records)

    # -- internals ------------------------------------------------------------

    def _read(self) -> list[ChunkRecord]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            return _RECORDS.validate_json(raw)
        except (OSError, PydanticValidationError) as exc:
            raise StoreError(f"Cannot read vector store {self.path}: {exc}") from exc

    def _write(self, records: list[ChunkRecord]) -> None:
        payload = _RECORDS.dump_json(records, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _check_batch(self, current: list[ChunkRecord], records: list[ChunkRecord]) -> None:
        expected = self.dimension
        if expected is None and current:
            expected = len(current[0].embedding)
        seen = {r.id for r in current}
        for record in records:
            if expected is None:
                expected = len(record.embedding)
            if len(record.embedding) != expected:
                raise DimensionMismatchError(expected, len(record.embedding))
            if record.id in seen:
                raise StoreError(f"Duplicate chunk id {record.id!r}")
            seen.add(record.id)
