"""
Hybrid RAG - Lexical + Semantic Retrieval Engine

A small retrieval engine for in-memory document sets:
- Term-frequency keyword scoring
- Vector search (nomic-embed-text via Ollama)
- Reciprocal Rank Fusion (RRF)
- Answer generation from the top result (local LLM via Ollama)

License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"
__license__ = "MIT"

from hybrid_rag.indexing.document_store import Document, DocumentStore
from hybrid_rag.retrieval.pipeline import HybridRetriever

__all__ = [
    "Document",
    "DocumentStore",
    "HybridRetriever",
]
