"""
Answer Generator - Answer a query from retrieved context with a local LLM

Uses Ollama (llama3.1:8b by default) to turn the top retrieved document into
an answer. The generator is a plain pass-through: it does not retry and
does not hide failures, so errors from Ollama reach the caller unchanged.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

import ollama

logger = logging.getLogger(__name__)

ANSWER_PROMPT = (
    "Answer this question based on the context below:\n\n"
    "Context: {context}\n\n"
    "Question: {question}\n\n"
    "Answer:"
)


def build_answer_prompt(question: str, context: str) -> str:
    """Fill the answer prompt with the question and its context"""
    return ANSWER_PROMPT.format(context=context, question=question)


@runtime_checkable
class AnswerGenerator(Protocol):
    """Text generation collaborator"""

    def generate(self, prompt: str) -> str:
        """Return the model's completion for prompt."""
        ...


class OllamaAnswerGenerator:
    """Generate answers using a local Ollama model"""

    def __init__(
        self,
        model: str = "llama3.1:8b",
        temperature: float = 0.3,
        max_tokens: int = 256,
        host: Optional[str] = None,
        client=None
    ):
        """
        Initialize answer generator

        Args:
            model: Ollama model to use
            temperature: Lower = more focused
            max_tokens: Max tokens to generate (Ollama num_predict)
            host: Ollama host URL (default: library default / OLLAMA_HOST)
            client: Pre-built Ollama client (mainly for tests)
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.generation_count = 0
        if client is not None:
            self.client = client
        elif host:
            self.client = ollama.Client(host=host)
        else:
            self.client = ollama

    def generate(self, prompt: str) -> str:
        response = self.client.generate(
            model=self.model,
            prompt=prompt,
            options={
                'temperature': self.temperature,
                'num_predict': self.max_tokens,
            }
        )
        self.generation_count += 1
        text = response['response'].strip()
        logger.debug(f"Generated {len(text)} characters with {self.model}")
        return text

    def get_stats(self):
        return {
            'model': self.model,
            'temperature': self.temperature,
            'max_tokens': self.max_tokens,
            'total_generations': self.generation_count
        }
