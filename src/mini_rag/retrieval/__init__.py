"""
Retrieval — chunk persistence and similarity search.

Public surface
--------------
- :class:`VectorStoreBase` — abstract store (subclass for other backends).
- :class:`JsonVectorStore` — default single-file JSON backend.
- :class:`SemanticRetriever` — query embedding plus top-K search.
- :func:`cosine_similarity`, :func:`search` — the scoring primitives.
- :class:`ChunkRecord`, :class:`ScoredChunk`, :class:`Citation`,
  :class:`ChatAnswer`, :class:`DeleteResult` — data models.
"""

from mini_rag.retrieval.base import VectorStoreBase
from mini_rag.retrieval.json_store import JsonVectorStore
from mini_rag.retrieval.models import ChatAnswer, ChunkRecord, Citation, DeleteResult, ScoredChunk
from mini_rag.retrieval.retriever import SemanticRetriever, cosine_similarity, search

__all__ = [
    "ChatAnswer",
    "ChunkRecord",
    "Citation",
    "DeleteResult",
    "JsonVectorStore",
    "ScoredChunk",
    "SemanticRetriever",
    "VectorStoreBase",
    "cosine_similarity",
    "search",
]
