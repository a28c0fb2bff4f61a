"""Pipeline orchestrator — ingestion, question answering, and deletion.

Ingestion:  chunk → embed (bounded parallel) → one ``append``.
Query:      load store → embed question → top-K → prompt → chat model.
Deletion:   straight to :meth:`VectorStoreBase.delete_by_source`.

Collaborators are injected so tests can swap in fakes; the defaults are
built from :mod:`mini_rag.config`.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from mini_rag.config import settings
from mini_rag.errors import ValidationError
from mini_rag.generation.prompts import SYSTEM_PROMPT, build_context, build_user_prompt
from mini_rag.ingestion.chunker import chunk_text
from mini_rag.retrieval.base import VectorStoreBase
from mini_rag.retrieval.models import ChatAnswer, ChunkRecord, DeleteResult, new_chunk_id
from mini_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "manual"


class TextEmbedder(Protocol):
    def embed(self, text: str) -> list[float]: ...

    def embed_many(self, texts: list[str]) -> list[list[float]]: ...


class Generator(Protocol):
    def complete(self, system_prompt: str, user_prompt: str) -> str: ...


class RAGPipeline:
    """Sequences chunker, embedder, store, retriever and generator.

    Parameters
    ----------
    store:
        Chunk store backend.
    embedder:
        Produces embeddings for chunks and questions.
    generator:
        Chat-completion collaborator.
    max_chars:
        Chunk size bound handed to :func:`chunk_text`.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        embedder: TextEmbedder,
        generator: Generator,
        *,
        max_chars: int = settings.chunk_max_chars,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.generator = generator
        self.max_chars = max_chars
        self.retriever = SemanticRetriever(store, embedder)  # type: ignore[arg-type]

    def ingest(self, text: str | None, source: str | None = DEFAULT_SOURCE) -> int:
        """Chunk, embed and store *text*; return the number of chunks inserted.

        Embedding happens before anything is written, so a failure part
        way through leaves the store unchanged.
        """
        if not text or not text.strip():
            raise ValidationError("text is required")
        source = (source or "").strip() or DEFAULT_SOURCE

        chunks = chunk_text(text, self.max_chars)
        logger.info("Indexing %d chunks from source=%r", len(chunks), source)
        embeddings = self.embedder.embed_many(chunks)

        records = [
            ChunkRecord(id=new_chunk_id(i), text=chunk, source=source, embedding=embedding)
            for i, (chunk, embedding) in enumerate(zip(chunks, embeddings))
        ]
        self.store.append(records)
        return len(records)

    def query(self, question: str | None, top_k: int = settings.default_top_k) -> ChatAnswer:
        """Answer *question* from the *top_k* most similar chunks.

        Raises
        ------
        ValidationError
            Blank question or non-positive *top_k*.
        EmptyStoreError
            Nothing has been ingested yet.
        GenerationError
            The chat model failed; stored data is unaffected.
        """
        if not question or not question.strip():
            raise ValidationError("question is required")
        if top_k < 1:
            raise ValidationError("topK must be a positive integer")

        hits = self.retriever.search(question, k=top_k)
        context = build_context([hit.record.text for hit in hits])
        answer = self.generator.complete(SYSTEM_PROMPT, build_user_prompt(context, question))
        return ChatAnswer(answer=answer, chunks=[hit.to_citation() for hit in hits])

    def delete_source(self, source: str | None) -> DeleteResult:
        """Remove every chunk labelled *source*."""
        source = (source or "").strip()
        if not source:
            raise ValidationError("source is required")
        return self.store.delete_by_source(source)

    def stats(self) -> dict[str, Any]:
        """Record and per-source counts for health reporting."""
        sources = self.store.sources()
        return {"records": sum(sources.values()), "sources": sources}
