"""Similarity search over stored chunks.

Scoring is a linear scan: every record is compared against the query
with cosine similarity, so a query costs O(N * D) for N records of
dimension D.

Usage::

    from mini_rag.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever(store, embedder)
    for hit in retriever.search("What is the capital of France?", k=3):
        print(f"{hit.score:.3f}", hit.record.source, hit.record.text[:80])
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from mini_rag.errors import DimensionMismatchError, EmptyStoreError
from mini_rag.retrieval.models import ChunkRecord, ScoredChunk

if TYPE_CHECKING:
    from mini_rag.ingestion.embedder import Embedder
    from mini_rag.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)

EPSILON = 1e-8


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return ``a·b / (|a|·|b| + 1e-8)``; zero vectors score 0."""
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))
    dot = na = nb = 0.0
    for x, y in zip(a, b):
        dot += x * y
        na += x * x
        nb += y * y
    return dot / (math.sqrt(na) * math.sqrt(nb) + EPSILON)


def search(
    query_vector: Sequence[float],
    records: Sequence[ChunkRecord],
    top_k: int = 5,
) -> list[ScoredChunk]:
    """Rank *records* by similarity to *query_vector* and keep the best *top_k*.

    Ties keep store order.
    """
    if top_k < 1:
        raise ValueError(f"top_k must be positive, got {top_k}")
    scored = [ScoredChunk(record=r, score=cosine_similarity(query_vector, r.embedding)) for r in records]
    scored.sort(key=lambda hit: hit.score, reverse=True)
    return scored[:top_k]


class SemanticRetriever:
    """Embeds a query and searches a :class:`VectorStoreBase` with it.

    Parameters
    ----------
    store:
        Backend holding the chunk records.
    embedder:
        Embeds query strings; must be the model the records were built with.
    default_k:
        Number of results when :meth:`search` gets no ``k``.
    """

    def __init__(self, store: VectorStoreBase, embedder: Embedder, *, default_k: int = 5) -> None:
        self._store = store
        self._embedder = embedder
        self.default_k = default_k

    def search(self, query: str, *, k: int | None = None) -> list[ScoredChunk]:
        """Return the top-*k* chunks for *query*.

        Raises
        ------
        EmptyStoreError
            When the store holds no records; checked before embedding.
        """
        records = self._store.load()
        if not records:
            raise EmptyStoreError()
        return self.search_by_embedding(self._embedder.embed(query), records, k=k)

    def search_by_embedding(
        self,
        embedding: Sequence[float],
        records: Sequence[ChunkRecord],
        *,
        k: int | None = None,
    ) -> list[ScoredChunk]:
        """Rank already-loaded *records* against a pre-computed embedding."""
        hits = search(embedding, records, k or self.default_k)
        logger.info("Retrieved %d of %d chunks", len(hits), len(records))
        return hits
