"""
Hybrid RAG Indexing Module

Handles corpus loading, the in-memory document store, and embeddings.
"""

from hybrid_rag.indexing.document_store import Document, DocumentStore
from hybrid_rag.indexing.document_loader import DocumentLoader, load_corpus
from hybrid_rag.indexing.embedder import Embedder

__all__ = [
    "Document",
    "DocumentStore",
    "DocumentLoader",
    "load_corpus",
    "Embedder",
]
