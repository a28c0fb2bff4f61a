"""LLM initialisation — single place to swap providers.

The default endpoint is Groq's OpenAI-compatible API, so ``ChatOpenAI``
works unchanged.  Clear ``LLM_BASE_URL`` to talk to OpenAI cloud, or
point it at any other OpenAI-compatible server (vLLM, Ollama, …).
"""

from __future__ import annotations

import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from mini_rag.config import settings
from mini_rag.errors import GenerationError

logger = logging.getLogger(__name__)


def get_llm(temperature: float | None = None) -> ChatOpenAI:
    """Return the configured chat model."""
    kwargs: dict = {
        "model": settings.llm_model_name,
        "temperature": settings.llm_temperature if temperature is None else temperature,
        # Local OpenAI-compatible servers don't need a real key; the client requires one.
        "api_key": settings.llm_api_key or "EMPTY",
    }
    if settings.llm_base_url:
        logger.info("Using chat endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
    return ChatOpenAI(**kwargs)


class ChatGenerator:
    """Answers a (system, user) prompt pair with a chat model.

    Parameters
    ----------
    llm:
        Any LangChain chat model.  Built lazily from settings when *None*.
    """

    def __init__(self, llm: BaseChatModel | None = None) -> None:
        self._llm = llm

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = get_llm()
        return self._llm

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the model's answer text.

        Raises
        ------
        GenerationError
            When the call fails or the model returns no text.
        """
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        try:
            response = self.llm.invoke(messages)
        except Exception as exc:
            raise GenerationError(details=str(exc)) from exc

        answer = response.content if isinstance(response.content, str) else ""
        if not answer.strip():
            raise GenerationError(details="Model returned an empty completion")
        return answer
