"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import math
import re
import zlib
from pathlib import Path

import pytest

from mini_rag.pipeline import RAGPipeline
from mini_rag.retrieval.json_store import JsonVectorStore

DIM = 64


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring a real embedding model")


class FakeEmbedder:
    """Deterministic bag-of-words embedder: one hashed bucket per word."""

    def __init__(self, dim: int = DIM) -> None:
        self.dim = dim
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        vec = [0.0] * self.dim
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            vec[zlib.crc32(word.encode()) % self.dim] += 1.0
        norm = math.sqrt(sum(x * x for x in vec)) or 1.0
        return [x / norm for x in vec]

    def embed_many(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(t) for t in texts]


class FakeGenerator:
    """Records prompts and returns a canned answer (or raises)."""

    def __init__(self, answer: str = "Paris.", error: Exception | None = None) -> None:
        self.answer = answer
        self.error = error
        self.prompts: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture()
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "vector-store.json"


@pytest.fixture()
def store(store_path: Path) -> JsonVectorStore:
    return JsonVectorStore(store_path)


@pytest.fixture()
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def pipeline(store: JsonVectorStore, embedder: FakeEmbedder, generator: FakeGenerator) -> RAGPipeline:
    return RAGPipeline(store, embedder, generator)
