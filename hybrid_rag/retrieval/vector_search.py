"""
Vector Search - Semantic similarity search over the document store

SemanticSearcher is the capability the retrieval pipeline depends on:
anything with similarity_search(query, k) returning (document id, distance)
pairs, closest first, can be plugged in.

VectorSearch is the bundled implementation: documents are embedded once
with the Embedder, kept as an L2-normalised numpy matrix, and queried by
cosine distance (1 - cosine similarity).
"""

import logging
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

import numpy as np

from hybrid_rag.errors import EmbeddingError
from hybrid_rag.indexing.document_store import Document, DocumentStore
from hybrid_rag.indexing.embedder import Embedder
from hybrid_rag.notifications import NotifierInterface

logger = logging.getLogger(__name__)

SemanticHit = Tuple[Union[str, Document], float]


@runtime_checkable
class SemanticSearcher(Protocol):
    """Similarity search collaborator"""

    def similarity_search(self, query: str, k: int) -> Sequence[SemanticHit]:
        """Return up to k (document or id, distance) pairs, closest first."""
        ...


class VectorSearch:
    """Semantic vector search using in-memory embeddings"""

    def __init__(
        self,
        store: DocumentStore,
        embedder: Optional[Embedder] = None,
        notifier: Optional[NotifierInterface] = None,
        show_progress: bool = False
    ):
        """
        Initialize vector search and embed the store

        The index is built here, before any search runs, so searches only
        read it.

        Args:
            store: Document store to index
            embedder: Optional Embedder instance (default: creates new one)
            notifier: Progress notifier for the embedding stage
            show_progress: Log embedding progress
        """
        self.store = store
        self.embedder = embedder or Embedder(model="nomic-embed-text")
        self._ids: List[str] = []
        self._matrix: Optional[np.ndarray] = None
        self.index(notifier=notifier, show_progress=show_progress)

    def index(self, notifier: Optional[NotifierInterface] = None, show_progress: bool = True) -> int:
        """
        Embed every document in the store, replacing the current index

        Documents whose embedding fails are logged and left out. Rebuilding
        while searches are running is not supported.

        Returns:
            Number of documents indexed
        """
        documents = self.store.all()
        embeddings = self.embedder.embed_batch(
            [doc.content for doc in documents],
            show_progress=show_progress,
            notifier=notifier
        )

        ids = []
        rows = []
        for doc, embedding in zip(documents, embeddings):
            if embedding is None:
                logger.warning(f"Skipping document without embedding: {doc.id}")
                continue
            ids.append(doc.id)
            rows.append(embedding)

        if rows:
            try:
                matrix = np.asarray(rows, dtype=float)
            except ValueError as e:
                raise EmbeddingError(f"Embeddings have inconsistent dimensions: {e}") from e
            norms = np.linalg.norm(matrix, axis=1, keepdims=True)
            norms[norms == 0] = 1.0
            self._matrix = matrix / norms
        else:
            self._matrix = None

        self._ids = ids
        logger.info(f"Indexed {len(ids)}/{len(documents)} documents for vector search")
        return len(ids)

    def similarity_search(self, query: str, k: int = 10) -> List[Tuple[str, float]]:
        """
        Search using vector similarity

        Args:
            query: Search query text
            k: Maximum number of results

        Returns:
            (document id, cosine distance) pairs, closest first; empty when
            nothing is indexed

        Raises:
            EmbeddingError: Query embedding failed
        """
        if self._matrix is None or k < 1:
            return []

        query_vector = np.asarray(self.embedder.embed(query), dtype=float)
        if query_vector.shape[0] != self._matrix.shape[1]:
            raise EmbeddingError(
                f"Query embedding has {query_vector.shape[0]} dimensions, "
                f"index has {self._matrix.shape[1]}"
            )

        norm = np.linalg.norm(query_vector)
        if norm == 0:
            similarities = np.zeros(len(self._ids))
        else:
            similarities = self._matrix @ (query_vector / norm)

        distances = 1.0 - similarities
        order = np.argsort(distances, kind="stable")[:k]
        return [(self._ids[i], float(distances[i])) for i in order]

    def get_stats(self) -> Dict:
        """Get vector search statistics"""
        return {
            'indexed_documents': len(self._ids),
            'embedder_model': self.embedder.model,
            'embedding_dimensions': int(self._matrix.shape[1]) if self._matrix is not None else None,
            'total_embeddings_generated': self.embedder.embedding_count
        }
