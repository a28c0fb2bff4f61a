"""
Serving — FastAPI application for the RAG backend.

Run with ``python -m mini_rag.serving``.
"""
