"""FastAPI application exposing ingestion, chat, and deletion."""

from __future__ import annotations

import logging
import threading

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from mini_rag.config import settings
from mini_rag.errors import (
    EmptyStoreError,
    GenerationError,
    NotFoundError,
    RAGError,
    ValidationError,
)
from mini_rag.generation.llm import ChatGenerator
from mini_rag.ingestion.embedder import get_embedder
from mini_rag.pipeline import DEFAULT_SOURCE, RAGPipeline
from mini_rag.retrieval.json_store import JsonVectorStore
from mini_rag.retrieval.models import ChatAnswer, DeleteResult

logger = logging.getLogger(__name__)


# ── Middleware ────────────────────────────────────────────────────────
class BodySizeLimitMiddleware:
    """Answer 413 when a request body exceeds ``settings.max_body_bytes``.

    The body is counted as it arrives, so chunked uploads without a
    ``Content-Length`` header are bounded too.  Accepted bodies are
    replayed to the wrapped app unchanged.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.max_body_bytes
        too_large = JSONResponse(status_code=413, content={"error": "Request body too large"})
        length = Headers(scope=scope).get("content-length")
        if length is not None and length.isdigit() and int(length) > limit:
            await too_large(scope, receive, send)
            return

        chunks: list[bytes] = []
        size = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body = message.get("body", b"")
            size += len(body)
            if size > limit:
                logger.warning("Rejected %s body over %d bytes", scope.get("path", ""), limit)
                await too_large(scope, receive, send)
                return
            chunks.append(body)
            more_body = message.get("more_body", False)

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": b"".join(chunks), "more_body": False}
            return await receive()

        await self.app(scope, replay, send)


app = FastAPI(
    title="Mini RAG API",
    version="0.1.0",
    description="Ingest text, ask questions over it, and delete it by source.",
)
app.add_middleware(BodySizeLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Dependencies ──────────────────────────────────────────────────────
_pipeline: RAGPipeline | None = None
_pipeline_lock = threading.Lock()


def get_pipeline() -> RAGPipeline:
    """Return the process-wide pipeline built from settings."""
    global _pipeline
    if _pipeline is None:
        with _pipeline_lock:
            if _pipeline is None:
                _pipeline = RAGPipeline(
                    store=JsonVectorStore(settings.store_path),
                    embedder=get_embedder(),
                    generator=ChatGenerator(),
                )
    return _pipeline


# ── Request / Response schemas ────────────────────────────────────────
class IngestRequest(BaseModel):
    """Raw document text and an optional source label."""

    text: str | None = None
    source: str | None = DEFAULT_SOURCE


class IngestResponse(BaseModel):
    inserted: int


class ChatRequest(BaseModel):
    """Question plus how many chunks to ground the answer on."""

    model_config = ConfigDict(populate_by_name=True)

    question: str | None = None
    top_k: int = Field(default_factory=lambda: settings.default_top_k, alias="topK")


# ── Error mapping ─────────────────────────────────────────────────────
def _error(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, exc.message)


@app.exception_handler(EmptyStoreError)
async def _empty_store(request: Request, exc: EmptyStoreError) -> JSONResponse:
    return _error(400, exc.message)


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, exc.message, source=exc.source)


@app.exception_handler(GenerationError)
async def _generation_error(request: Request, exc: GenerationError) -> JSONResponse:
    logger.error("Generation failed for %s: %s", request.url.path, exc.details)
    return _error(500, exc.message, details=exc.details)


@app.exception_handler(RAGError)
async def _rag_error(request: Request, exc: RAGError) -> JSONResponse:
    logger.error("Request %s failed: %s", request.url.path, exc, exc_info=exc)
    return _error(500, "Internal error", details=exc.message)


@app.exception_handler(RequestValidationError)
async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "invalid request")
    return _error(400, f"{field}: {message}" if field else message)


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
def health(pipeline: RAGPipeline = Depends(get_pipeline)) -> dict:
    """Liveness probe with store counts."""
    return {"status": "ok", **pipeline.stats()}


@app.post("/api/docs", response_model=IngestResponse)
def ingest(request: IngestRequest, pipeline: RAGPipeline = Depends(get_pipeline)) -> IngestResponse:
    """Chunk, embed and store a document."""
    return IngestResponse(inserted=pipeline.ingest(request.text, request.source))


@app.post("/api/chat", response_model=ChatAnswer)
def chat(request: ChatRequest, pipeline: RAGPipeline = Depends(get_pipeline)) -> ChatAnswer:
    """Answer a question from the most similar stored chunks."""
    return pipeline.query(request.question, request.top_k)


@app.delete("/api/docs/{source:path}", response_model=DeleteResult)
def delete_source(source: str, pipeline: RAGPipeline = Depends(get_pipeline)) -> DeleteResult:
    """Delete every chunk ingested under *source*."""
    return pipeline.delete_source(source)
