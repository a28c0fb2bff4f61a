"""Sentence-transformer embeddings with a lazily loaded, shared model."""

from __future__ import annotations

import logging
import threading

from langchain_huggingface import HuggingFaceEmbeddings

from mini_rag.config import settings
from mini_rag.errors import ModelError, ValidationError

logger = logging.getLogger(__name__)


class Embedder:
    """Turn text into unit-length vectors.

    The underlying model is loaded once, on the first call, and reused
    for every later call.  ``all-MiniLM-L6-v2`` mean-pools its token
    states; ``normalize_embeddings`` L2-normalises the pooled vector.

    Parameters
    ----------
    model_name:
        HuggingFace sentence-transformer model identifier.
    batch_size:
        Number of texts per forward pass in :meth:`embed_many`.
    """

    def __init__(
        self,
        model_name: str = settings.embedding_model,
        *,
        batch_size: int = settings.embed_batch_size,
    ) -> None:
        self.model_name = model_name
        self.batch_size = max(1, batch_size)
        self._model: HuggingFaceEmbeddings | None = None
        self._dimension: int | None = None
        self._lock = threading.Lock()

    @property
    def dimension(self) -> int | None:
        """Vector length, or ``None`` until the first text was embedded."""
        return self._dimension

    def _get_model(self) -> HuggingFaceEmbeddings:
        if self._model is not None:
            return self._model
        with self._lock:
            if self._model is None:
                logger.info("Loading embedding model %s", self.model_name)
                try:
                    self._model = HuggingFaceEmbeddings(
                        model_name=self.model_name,
                        encode_kwargs={"normalize_embeddings": True},
                    )
                except Exception as exc:
                    raise ModelError(
                        f"Failed to load embedding model {self.model_name!r}: {exc}"
                    ) from exc
                logger.info("Embedding model %s loaded", self.model_name)
        return self._model

    def _check(self, vector: list[float]) -> list[float]:
        if not vector:
            raise ModelError("Embedding model returned an empty vector")
        if self._dimension is None:
            self._dimension = len(vector)
        return vector

    def embed(self, text: str) -> list[float]:
        """Return the normalised embedding of *text*."""
        if not text or not text.strip():
            raise ValidationError("Cannot embed blank text")

        model = self._get_model()
        try:
            vector = [float(x) for x in model.embed_query(text)]
        except Exception as exc:
            raise ModelError(f"Embedding failed: {exc}") from exc
        return self._check(vector)

    def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts* in batches of ``batch_size``, preserving input order."""
        if not texts:
            return []
        if any(not t or not t.strip() for t in texts):
            raise ValidationError("Cannot embed blank text")

        model = self._get_model()
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            try:
                embedded = model.embed_documents(batch)
            except Exception as exc:
                raise ModelError(f"Embedding failed: {exc}") from exc
            if len(embedded) != len(batch):
                raise ModelError(f"Embedding model returned {len(embedded)} vectors for {len(batch)} texts")
            vectors.extend(self._check([float(x) for x in v]) for v in embedded)
            logger.info("  embedded %d / %d", len(vectors), len(texts))
        return vectors


_default: Embedder | None = None
_default_lock = threading.Lock()


def get_embedder() -> Embedder:
    """Return the process-wide :class:`Embedder` built from settings."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Embedder()
    return _default
