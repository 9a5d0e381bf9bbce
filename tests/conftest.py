"""
Shared fixtures: the reference corpus, a fake Ollama client and a
scriptable semantic-search stub.
"""

import copy
from unittest.mock import Mock

import pytest

from hybrid_rag.indexing.document_store import DocumentStore
from hybrid_rag.indexing.embedder import Embedder

REFERENCE_RECORDS = [
    {
        "id": "doc1",
        "content": "Python is a high-level, interpreted programming language known for its simplicity and readability. It supports multiple programming paradigms including procedural, object-oriented, and functional programming.",
        "metadata": {"title": "Python Overview"},
    },
    {
        "id": "doc2",
        "content": "JavaScript is a versatile programming language primarily used for web development. It runs in browsers and on servers via Node.js. JavaScript is dynamically typed and supports event-driven programming.",
        "metadata": {"title": "JavaScript Basics"},
    },
    {
        "id": "doc3",
        "content": "Rust is a systems programming language focused on safety, speed, and concurrency. It prevents memory errors without using a garbage collector, making it ideal for performance-critical applications.",
        "metadata": {"title": "Rust Language"},
    },
    {
        "id": "doc4",
        "content": "Go (Golang) is a statically typed language designed for simplicity and efficiency. It features built-in concurrency support through goroutines and channels, making it excellent for network services.",
        "metadata": {"title": "Go Programming"},
    },
    {
        "id": "doc5",
        "content": "TypeScript extends JavaScript by adding static type definitions. Types provide a way to describe the shape of objects, enabling better tooling and catching errors at compile time instead of runtime.",
        "metadata": {"title": "TypeScript Features"},
    },
]


def fake_embedding(model, prompt):
    """Three-axis keyword embedding: (type, memory, web)"""
    text = prompt.lower()
    return {'embedding': [
        text.count('type') + 0.1,
        text.count('memory') + 0.1,
        text.count('web') + 0.1,
    ]}


class StubSemanticSearch:
    """Semantic collaborator returning scripted hits (or raising)"""

    def __init__(self, hits=None, error=None):
        self.hits = list(hits or [])
        self.error = error
        self.calls = []

    def similarity_search(self, query, k):
        self.calls.append((query, k))
        if self.error is not None:
            raise self.error
        return self.hits[:k]


@pytest.fixture
def records():
    return copy.deepcopy(REFERENCE_RECORDS)


@pytest.fixture
def store(records):
    return DocumentStore.from_records(records)


@pytest.fixture
def fake_ollama_client():
    client = Mock()
    client.embeddings.side_effect = fake_embedding
    client.list.return_value = {'models': [{'name': 'nomic-embed-text:latest'}]}
    client.generate.return_value = {'response': '  A generated answer.  '}
    return client


@pytest.fixture
def embedder(fake_ollama_client):
    return Embedder(model="nomic-embed-text", expected_dimensions=3, client=fake_ollama_client)


@pytest.fixture
def semantic_stub():
    """Factory for StubSemanticSearch instances"""
    return StubSemanticSearch
