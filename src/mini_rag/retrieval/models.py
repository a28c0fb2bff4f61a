"""Domain models for stored chunks, search hits, and citations."""

from __future__ import annotations

import time
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def new_chunk_id(index: int = 0) -> str:
    """Return a store-unique id such as ``1718000000000-3-9f2c1ab4``.

    The millisecond timestamp and batch *index* keep ids readable and
    roughly ordered; the random suffix keeps them unique when batches
    share a millisecond.
    """
    return f"{int(time.time() * 1000)}-{index}-{uuid4().hex[:8]}"


class ChunkRecord(BaseModel):
    """One stored chunk: its text, source label, and embedding.

    Attributes
    ----------
    id:
        Identifier unique across the whole store.
    text:
        Trimmed chunk text; never blank.
    source:
        Caller-supplied label of the originating document.  Deletion
        removes all records sharing a source.
    embedding:
        Normalised vector produced by the embedder.
    """

    id: str = Field(default_factory=new_chunk_id)
    text: str
    source: str
    embedding: list[float]

    @field_validator("text")
    @classmethod
    def _strip_non_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("source")
    @classmethod
    def _strip(cls, value: str) -> str:
        # Blank labels are refused at ingest; records stored by older
        # versions may still carry one.
        return value.strip()

    @field_validator("embedding")
    @classmethod
    def _non_empty(cls, value: list[float]) -> list[float]:
        if not value:
            raise ValueError("must not be empty")
        return value


class ScoredChunk(BaseModel):
    """A stored record together with its similarity to a query."""

    record: ChunkRecord
    score: float

    def to_citation(self) -> Citation:
        return Citation(
            id=self.record.id,
            text=self.record.text,
            source=self.record.source,
            score=self.score,
        )


class Citation(BaseModel):
    """Provenance of a retrieved chunk as returned to API clients."""

    id: str
    text: str
    source: str
    score: float


class ChatAnswer(BaseModel):
    """Generated answer plus the chunks it was grounded on."""

    answer: str
    chunks: list[Citation] = Field(default_factory=list)


class DeleteResult(BaseModel):
    """Outcome of a source-scoped deletion."""

    removed: int
    remaining: int
    source: str
