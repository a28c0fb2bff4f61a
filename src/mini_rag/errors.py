"""Exception hierarchy for the RAG backend.

All errors raised by the core derive from :class:`RAGError`.  The HTTP
layer maps each subclass onto a status code:

    RAGError
    +-- ValidationError         (400 — missing / blank input)
    +-- EmptyStoreError         (400 — query before anything was ingested)
    +-- NotFoundError           (404 — delete of an unknown source)
    +-- ModelError              (500 — embedding model load / inference)
    +-- GenerationError         (500 — chat-completion call)
    +-- StoreError              (500 — unreadable or inconsistent store)
        +-- DimensionMismatchError
"""

from __future__ import annotations


class RAGError(Exception):
    """Base exception carrying a human-readable ``message``."""

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        self._message = message
        super().__init__(message)

    @property
    def message(self) -> str:
        return self._message


class ValidationError(RAGError):
    """A required field is missing, blank, or out of range."""


class EmptyStoreError(RAGError):
    """A query was issued against a store holding zero chunks."""

    def __init__(self, message: str = "No documents indexed yet") -> None:
        super().__init__(message)


class NotFoundError(RAGError):
    """No stored chunk carries the requested source label."""

    def __init__(self, source: str, message: str = "No vectors found for source") -> None:
        self.source = source
        super().__init__(message)


class ModelError(RAGError):
    """The embedding model failed to load or to embed a text."""


class GenerationError(RAGError):
    """The chat-completion call failed or returned nothing.

    ``details`` holds the underlying error text for the client response.
    """

    def __init__(self, message: str = "Failed to generate answer", details: str = "") -> None:
        self.details = details
        super().__init__(message)


class StoreError(RAGError):
    """The persisted store could not be read or would become inconsistent."""


class DimensionMismatchError(StoreError):
    """An embedding does not have the dimensionality the store expects."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Embedding dimension mismatch: expected {expected}, got {actual}")
