"""
mini_rag — a small retrieval-augmented-generation backend.

Text goes in through :class:`~mini_rag.pipeline.RAGPipeline.ingest`, is
chunked and embedded, and lands in a JSON vector store; questions are
answered from the most similar chunks by a chat model.
"""

from mini_rag.pipeline import RAGPipeline

__all__ = ["RAGPipeline"]
