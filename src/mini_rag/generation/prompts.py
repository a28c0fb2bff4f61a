"""Prompt templates for answering questions from retrieved chunks."""

from __future__ import annotations

from collections.abc import Sequence

SYSTEM_PROMPT = """\
You are an advanced AI assistant. Your task is to provide accurate and \
concise answers based on the provided context. If the answer is not \
present in the context, clearly state that you do not have enough \
information to answer. You may include HTML tags to format your answer \
(use <br/> for line breaks instead of \\n).
"""

ANSWER_INSTRUCTION = (
    "Please provide a detailed answer, referencing specific parts of the context "
    "when applicable, and ensure clarity and precision in your response."
)


def build_context(texts: Sequence[str]) -> str:
    """Label each chunk with its 1-based rank and join them with blank lines."""
    return "\n\n".join(f"Chunk {rank}:\n{text}" for rank, text in enumerate(texts, start=1))


def build_user_prompt(context: str, question: str) -> str:
    """Build the user turn: context block, question, answering instruction."""
    return f"Context:\n{context}\n\nQuestion: {question}\n\n{ANSWER_INSTRUCTION}"
