"""
Embedder - Generate embeddings using nomic-embed-text (local)

Uses Ollama's nomic-embed-text model:
- 100% local (no cloud APIs)
- 768-dimension embeddings
- Any Ollama embedding model works; set embedding.model in config
"""

import logging
from typing import List, Optional, TYPE_CHECKING

import numpy as np
import ollama

from hybrid_rag.errors import EmbeddingError

if TYPE_CHECKING:
    from hybrid_rag.notifications import NotifierInterface

logger = logging.getLogger(__name__)


class Embedder:
    """Generate embeddings via Ollama"""

    def __init__(
        self,
        model: str = "nomic-embed-text",
        host: Optional[str] = None,
        expected_dimensions: Optional[int] = 768,
        client=None
    ):
        """
        Initialize embedder

        Args:
            model: Ollama embedding model
            host: Ollama host URL (default: library default / OLLAMA_HOST)
            expected_dimensions: Expected vector size; a mismatch only warns
            client: Pre-built Ollama client (mainly for tests)
        """
        self.model = model
        self.expected_dimensions = expected_dimensions
        self.embedding_count = 0
        if client is not None:
            self.client = client
        elif host:
            self.client = ollama.Client(host=host)
        else:
            self.client = ollama

    def verify_model(self) -> bool:
        """
        Check that the embedding model has been pulled

        Returns:
            True if the model is available or availability could not be checked

        Raises:
            EmbeddingError: Ollama answered and the model is missing
        """
        try:
            models = self.client.list()
            model_list = models.get('models', []) or []
            available = []
            for m in model_list:
                # Handle both 'name' and 'model' keys (Ollama API variations)
                model_name = m.get('name') or m.get('model', '')
                if model_name:
                    available.append(model_name)
        except Exception as e:
            logger.warning(f"Could not verify Ollama model availability: {e}")
            return True

        if available and not any(self.model in name for name in available):
            raise EmbeddingError(f"Model {self.model} not found. Run: ollama pull {self.model}")
        return True

    def embed(self, text: str) -> List[float]:
        """
        Embed one text

        Raises:
            EmbeddingError: The Ollama call failed or returned nothing
        """
        try:
            response = self.client.embeddings(model=self.model, prompt=text)
            embedding = list(response['embedding'])
        except Exception as e:
            raise EmbeddingError(f"Embedding generation failed: {e}") from e

        if not embedding:
            raise EmbeddingError("Embedding generation returned an empty vector")
        if self.expected_dimensions and len(embedding) != self.expected_dimensions:
            logger.warning(f"Unexpected embedding dimensions: {len(embedding)}")

        self.embedding_count += 1
        return embedding

    def embed_batch(
        self,
        texts: List[str],
        show_progress: bool = True,
        notifier: Optional["NotifierInterface"] = None
    ) -> List[Optional[List[float]]]:
        """
        Embed many texts; failures become None entries

        Args:
            texts: Texts to embed
            show_progress: Log progress every 10 texts
            notifier: Optional progress notifier

        Returns:
            One embedding (or None on failure) per input text
        """
        from hybrid_rag.notifications import LoadingStage, NullNotifier, ProgressEvent

        if notifier is None:
            notifier = NullNotifier()

        embeddings = []
        total = len(texts)

        notifier.notify(ProgressEvent(
            stage=LoadingStage.EMBEDDING,
            message=f"Generating {total} embeddings",
            current=0,
            total=total
        ))

        for i, text in enumerate(texts):
            if show_progress and i % 10 == 0:
                logger.info(f"Embedding {i+1}/{total}...")

            try:
                embeddings.append(self.embed(text))
            except EmbeddingError as e:
                logger.error(str(e))
                embeddings.append(None)

            if (i + 1) % 10 == 0 or (i + 1) == total:
                notifier.notify(ProgressEvent(
                    stage=LoadingStage.EMBEDDING,
                    message="Generating embeddings",
                    current=i + 1,
                    total=total
                ))

        if show_progress:
            successful = sum(1 for e in embeddings if e is not None)
            logger.info(f"Generated {successful}/{total} embeddings")

        return embeddings

    @staticmethod
    def cosine_similarity(embedding1: List[float], embedding2: List[float]) -> float:
        vec1 = np.asarray(embedding1, dtype=float)
        vec2 = np.asarray(embedding2, dtype=float)
        norm1 = np.linalg.norm(vec1)
        norm2 = np.linalg.norm(vec2)
        if norm1 == 0 or norm2 == 0:
            return 0.0
        return float(np.dot(vec1, vec2) / (norm1 * norm2))

    def get_stats(self):
        return {
            'total_embeddings': self.embedding_count,
            'model': self.model,
            'dimensions': self.expected_dimensions
        }
