"""
Unit tests for Embedder and VectorSearch.

The Ollama client is replaced by a Mock producing three-axis keyword
embeddings (type, memory, web), so no model server is needed.
"""

from unittest.mock import Mock

import pytest

from hybrid_rag.errors import EmbeddingError
from hybrid_rag.indexing.document_store import DocumentStore
from hybrid_rag.indexing.embedder import Embedder
from hybrid_rag.notifications import LoadingStage
from hybrid_rag.retrieval.vector_search import SemanticSearcher, VectorSearch


class TestEmbedder:
    """Tests for the Ollama embedder wrapper"""

    def test_embed(self, embedder, fake_ollama_client):
        vector = embedder.embed("memory memory")
        assert vector == pytest.approx([0.1, 2.1, 0.1])
        fake_ollama_client.embeddings.assert_called_once_with(model="nomic-embed-text", prompt="memory memory")
        assert embedder.embedding_count == 1

    def test_embed_failure_raises(self, fake_ollama_client):
        fake_ollama_client.embeddings.side_effect = ConnectionError("ollama down")
        embedder = Embedder(client=fake_ollama_client, expected_dimensions=3)

        with pytest.raises(EmbeddingError, match="ollama down"):
            embedder.embed("text")

    def test_empty_embedding_raises(self, fake_ollama_client):
        fake_ollama_client.embeddings.side_effect = None
        fake_ollama_client.embeddings.return_value = {'embedding': []}
        embedder = Embedder(client=fake_ollama_client)

        with pytest.raises(EmbeddingError):
            embedder.embed("text")

    def test_embed_batch_records_failures_as_none(self, fake_ollama_client):
        def flaky(model, prompt):
            if prompt == "bad":
                raise RuntimeError("boom")
            return {'embedding': [1.0, 0.0, 0.0]}

        fake_ollama_client.embeddings.side_effect = flaky
        embedder = Embedder(client=fake_ollama_client, expected_dimensions=3)

        result = embedder.embed_batch(["good", "bad", "good"], show_progress=False)
        assert result[0] == [1.0, 0.0, 0.0]
        assert result[1] is None
        assert result[2] == [1.0, 0.0, 0.0]

    def test_embed_batch_notifies(self, embedder):
        notifier = Mock()
        embedder.embed_batch(["a", "b"], show_progress=False, notifier=notifier)

        events = [call.args[0] for call in notifier.notify.call_args_list]
        assert all(e.stage == LoadingStage.EMBEDDING for e in events)
        assert events[-1].current == 2
        assert events[-1].total == 2

    def test_verify_model_present(self, embedder):
        assert embedder.verify_model() is True

    def test_verify_model_missing(self, fake_ollama_client):
        fake_ollama_client.list.return_value = {'models': [{'name': 'llama3.1:8b'}]}
        embedder = Embedder(model="nomic-embed-text", client=fake_ollama_client)

        with pytest.raises(EmbeddingError, match="ollama pull"):
            embedder.verify_model()

    def test_verify_model_unreachable(self, fake_ollama_client):
        fake_ollama_client.list.side_effect = ConnectionError("refused")
        embedder = Embedder(client=fake_ollama_client)
        assert embedder.verify_model() is True

    def test_cosine_similarity(self):
        assert Embedder.cosine_similarity([1, 0], [1, 0]) == pytest.approx(1.0)
        assert Embedder.cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
        assert Embedder.cosine_similarity([0, 0], [1, 0]) == 0.0


class TestVectorSearch:
    """Tests for in-memory vector search"""

    def test_satisfies_protocol(self, store, embedder):
        assert isinstance(VectorSearch(store, embedder), SemanticSearcher)

    def test_index(self, store, embedder):
        search = VectorSearch(store, embedder)
        assert search.index(show_progress=False) == 5
        assert search.get_stats()["indexed_documents"] == 5
        assert search.get_stats()["embedding_dimensions"] == 3

    def test_closest_first(self, store, embedder):
        search = VectorSearch(store, embedder)

        hits = search.similarity_search("memory", k=5)
        hit_ids = [doc_id for doc_id, _ in hits]
        distances = [distance for _, distance in hits]

        assert hit_ids[0] == "doc3"
        assert distances[0] == pytest.approx(0.0, abs=1e-9)
        assert hit_ids[1] == "doc1"
        assert distances == sorted(distances)

    def test_k_limits_results(self, store, embedder):
        search = VectorSearch(store, embedder)
        assert len(search.similarity_search("memory", k=2)) == 2
        assert search.similarity_search("memory", k=0) == []

    def test_indexes_on_construction(self, store, embedder, fake_ollama_client):
        """The index is built up front; searching only embeds the query"""
        search = VectorSearch(store, embedder)
        assert fake_ollama_client.embeddings.call_count == 5
        assert search.get_stats()["indexed_documents"] == 5

        search.similarity_search("types", k=1)
        search.similarity_search("memory", k=1)
        assert fake_ollama_client.embeddings.call_count == 7

    def test_construction_reports_embedding_progress(self, store, embedder):
        notifier = Mock()
        VectorSearch(store, embedder, notifier=notifier)

        last = notifier.notify.call_args.args[0]
        assert last.stage == LoadingStage.EMBEDDING
        assert last.current == 5

    def test_empty_store_returns_empty(self, embedder, fake_ollama_client):
        search = VectorSearch(DocumentStore(), embedder)
        assert search.similarity_search("anything", k=3) == []
        fake_ollama_client.embeddings.assert_not_called()

    def test_failed_document_is_skipped(self, store, fake_ollama_client):
        def failing_for_rust(model, prompt):
            if prompt.startswith("Rust"):
                raise RuntimeError("model crashed")
            return {'embedding': [1.0, 0.5, 0.1]}

        fake_ollama_client.embeddings.side_effect = failing_for_rust
        search = VectorSearch(store, Embedder(client=fake_ollama_client, expected_dimensions=3))

        assert search.index(show_progress=False) == 4
        hit_ids = [doc_id for doc_id, _ in search.similarity_search("query", k=5)]
        assert "doc3" not in hit_ids

    def test_query_embedding_failure_raises(self, store, embedder, fake_ollama_client):
        search = VectorSearch(store, embedder)
        fake_ollama_client.embeddings.side_effect = ConnectionError("ollama down")

        with pytest.raises(EmbeddingError):
            search.similarity_search("memory", k=3)

    def test_dimension_mismatch_raises(self, store, embedder, fake_ollama_client):
        search = VectorSearch(store, embedder)
        fake_ollama_client.embeddings.side_effect = lambda model, prompt: {'embedding': [1.0, 2.0]}

        with pytest.raises(EmbeddingError, match="dimensions"):
            search.similarity_search("memory", k=3)
