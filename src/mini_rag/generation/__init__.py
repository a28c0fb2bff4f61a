"""
Generation — prompt construction and the chat-completion call.
"""

from mini_rag.generation.llm import ChatGenerator, get_llm
from mini_rag.generation.prompts import SYSTEM_PROMPT, build_context, build_user_prompt

__all__ = [
    "SYSTEM_PROMPT",
    "ChatGenerator",
    "build_context",
    "build_user_prompt",
    "get_llm",
]
