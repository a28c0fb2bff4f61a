"""Unit tests for similarity scoring, top-K search, and SemanticRetriever."""

from __future__ import annotations

import random

import pytest

from mini_rag.errors import DimensionMismatchError, EmptyStoreError
from mini_rag.retrieval.json_store import JsonVectorStore
from mini_rag.retrieval.models import ChunkRecord, ScoredChunk
from mini_rag.retrieval.retriever import SemanticRetriever, cosine_similarity, search


def _records(vectors: list[list[float]]) -> list[ChunkRecord]:
    return [ChunkRecord(text=f"chunk {i}", source="s", embedding=v) for i, v in enumerate(vectors)]


# ── cosine_similarity ──────────────────────────────────────────────────


class TestCosineSimilarity:
    def test_self_similarity_is_one(self) -> None:
        v = [0.3, -1.2, 4.0, 0.01]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_opposite_is_minus_one(self) -> None:
        v = [0.3, -1.2, 4.0]
        assert cosine_similarity(v, [-x for x in v]) == pytest.approx(-1.0)

    def test_orthogonal_is_zero(self) -> None:
        assert cosine_similarity([1.0, 0.0], [0.0, 2.0]) == pytest.approx(0.0)

    def test_symmetric(self) -> None:
        rng = random.Random(7)
        for _ in range(20):
            a = [rng.uniform(-1, 1) for _ in range(16)]
            b = [rng.uniform(-1, 1) for _ in range(16)]
            assert cosine_similarity(a, b) == cosine_similarity(b, a)

    def test_magnitude_independent(self) -> None:
        a, b = [1.0, 2.0, 3.0], [3.0, 1.0, 0.5]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity([10 * x for x in a], b))

    def test_zero_vector_scores_zero(self) -> None:
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(DimensionMismatchError):
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


# ── search ─────────────────────────────────────────────────────────────


class TestSearch:
    def test_sorted_descending_and_truncated(self) -> None:
        records = _records([[0.0, 1.0], [1.0, 0.0], [1.0, 1.0], [-1.0, 0.0]])
        hits = search([1.0, 0.0], records, top_k=3)

        assert [h.record.text for h in hits] == ["chunk 1", "chunk 2", "chunk 0"]
        scores = [h.score for h in hits]
        assert scores == sorted(scores, reverse=True)

    def test_never_more_than_min_topk_n(self) -> None:
        rng = random.Random(3)
        records = _records([[rng.uniform(-1, 1) for _ in range(4)] for _ in range(6)])
        for k in (1, 3, 6, 10):
            assert len(search([1.0, 0.0, 0.0, 0.0], records, top_k=k)) == min(k, 6)

    def test_ties_keep_store_order(self) -> None:
        records = _records([[1.0, 0.0], [1.0, 0.0], [1.0, 0.0]])
        hits = search([1.0, 0.0], records, top_k=3)
        assert [h.record.text for h in hits] == ["chunk 0", "chunk 1", "chunk 2"]

    def test_empty_records(self) -> None:
        assert search([1.0], [], top_k=5) == []

    def test_non_positive_topk_rejected(self) -> None:
        with pytest.raises(ValueError):
            search([1.0], _records([[1.0]]), top_k=0)

    def test_citation_carries_score(self) -> None:
        hit = search([1.0, 0.0], _records([[1.0, 0.0]]), top_k=1)[0]
        citation = hit.to_citation()
        assert isinstance(hit, ScoredChunk)
        assert citation.id == hit.record.id
        assert citation.source == "s"
        assert citation.score == pytest.approx(1.0)


# ── SemanticRetriever ──────────────────────────────────────────────────


class TestSemanticRetriever:
    def test_empty_store_raises_before_embedding(self, store: JsonVectorStore, embedder) -> None:
        retriever = SemanticRetriever(store, embedder)
        with pytest.raises(EmptyStoreError):
            retriever.search("anything")
        assert embedder.calls == []

    def test_most_similar_chunk_first(self, store: JsonVectorStore, embedder) -> None:
        texts = ["Paris is the capital of France.", "Bananas are yellow.", "Rust has a borrow checker."]
        store.append([ChunkRecord(text=t, source="s", embedding=embedder.embed(t)) for t in texts])

        hits = SemanticRetriever(store, embedder, default_k=2).search("What is the capital of France?")

        assert len(hits) == 2
        assert hits[0].record.text == texts[0]
        assert hits[0].score > 0.5

    def test_search_by_embedding_ranks_given_records(self, store: JsonVectorStore, embedder) -> None:
        records = _records([[0.0, 1.0], [1.0, 0.0]])
        retriever = SemanticRetriever(store, embedder, default_k=1)

        [hit] = retriever.search_by_embedding([1.0, 0.0], records)

        assert hit.record.text == "chunk 1"
        assert store.count() == 0
