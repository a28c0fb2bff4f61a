"""
Ingestion — chunking raw text and embedding the chunks.

The resulting vectors are persisted by :mod:`mini_rag.retrieval`.
"""

from mini_rag.ingestion.chunker import chunk_text
from mini_rag.ingestion.embedder import Embedder, get_embedder

__all__ = ["Embedder", "chunk_text", "get_embedder"]
