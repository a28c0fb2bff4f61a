"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM (any OpenAI-compatible chat endpoint; Groq by default)
    llm_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("llm_api_key", "groq_api_key"),
        description="API key for the chat-completion endpoint",
    )
    llm_model_name: str = Field(default="llama-3.1-8b-instant", description="Chat model identifier")
    llm_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="Base URL of the OpenAI-compatible chat API. Empty means OpenAI cloud.",
    )
    llm_temperature: float = 0.0

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embed_batch_size: int = Field(default=64, ge=1)

    # Vector store
    store_path: str = "vector-store.json"

    # Pipeline defaults
    chunk_max_chars: int = Field(default=500, ge=1)
    default_top_k: int = Field(default=5, ge=1)

    # Serving
    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: list[str] = ["*"]
    max_body_bytes: int = 10 * 1024 * 1024
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton — import `settings` wherever needed.
settings = Settings()
