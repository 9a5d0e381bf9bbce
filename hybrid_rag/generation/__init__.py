"""
Hybrid RAG Generation Module

Turns the top retrieved document into an answer with a local LLM.
"""

from hybrid_rag.generation.answerer import (
    ANSWER_PROMPT,
    AnswerGenerator,
    OllamaAnswerGenerator,
    build_answer_prompt,
)

__all__ = [
    "ANSWER_PROMPT",
    "AnswerGenerator",
    "OllamaAnswerGenerator",
    "build_answer_prompt",
]
