"""Abstract base class for chunk stores.

A backend only has to implement :meth:`VectorStoreBase.load`,
:meth:`VectorStoreBase.append` and :meth:`VectorStoreBase.delete_by_source`;
the retrieval stack scores whatever :meth:`load` returns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import Counter

from mini_rag.retrieval.models import ChunkRecord, DeleteResult


class VectorStoreBase(ABC):
    """Ordered, append-only collection of :class:`ChunkRecord`.

    Records are only ever removed a whole source at a time.
    """

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def load(self) -> list[ChunkRecord]:
        """Return every stored record in insertion order.

        An absent store is empty, not an error.
        """
        ...

    @abstractmethod
    def append(self, records: list[ChunkRecord]) -> int:
        """Append *records* in order and persist; return the new store size."""
        ...

    @abstractmethod
    def delete_by_source(self, source: str) -> DeleteResult:
        """Remove every record whose ``source`` equals *source* exactly.

        Raises
        ------
        NotFoundError
            When no record matched; the store is left untouched.
        """
        ...

    # -- optional overrides ---------------------------------------------------

    def count(self) -> int:
        """Number of stored records."""
        return len(self.load())

    def sources(self) -> dict[str, int]:
        """Record count per source label, in first-seen order."""
        return dict(Counter(r.source for r in self.load()))
