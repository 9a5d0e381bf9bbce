"""
Unit tests for LexicalScorer.

Covers term handling (duplicates, punctuation, stop words), substring
counting, the phrase bonus, ordering and truncation.
"""

import pytest

from hybrid_rag.indexing.document_store import Document, DocumentStore
from hybrid_rag.retrieval.lexical_search import DEFAULT_STOP_WORDS, LexicalScorer


def ids(results):
    return [r.document_id for r in results]


class TestTokenize:
    """Tests for query term extraction"""

    def test_lowercases_and_strips_punctuation(self, store):
        scorer = LexicalScorer(store, stop_words=[])
        assert scorer.tokenize("What is TypeScript?") == ["what", "is", "typescript"]

    def test_keeps_duplicates(self, store):
        scorer = LexicalScorer(store, stop_words=[])
        assert scorer.tokenize("rust Rust RUST") == ["rust", "rust", "rust"]

    def test_default_stop_words(self, store):
        scorer = LexicalScorer(store)
        assert scorer.tokenize("What is TypeScript?") == ["typescript"]
        assert "what" in DEFAULT_STOP_WORDS

    def test_custom_stop_words(self, store):
        scorer = LexicalScorer(store, stop_words=["Rust"])
        assert scorer.tokenize("rust is fast") == ["is", "fast"]

    def test_inner_punctuation_kept(self, store):
        scorer = LexicalScorer(store, stop_words=[])
        assert scorer.tokenize("(node.js)") == ["node.js"]


class TestScore:
    """Tests for single-document scoring"""

    def test_counts_substring_occurrences(self, store):
        """Terms match inside longer words"""
        scorer = LexicalScorer(store, phrase_bonus=0, stop_words=[])
        assert scorer.score("type", "typed types TYPE") == 3
        assert scorer.score("static type", "adds static type checks") == 2

    def test_phrase_bonus(self, store):
        # "static" x1, "type" x1, phrase bonus +5
        assert LexicalScorer(store).score("static type", "adds static type checks") == 7

    def test_custom_phrase_bonus(self, store):
        scorer = LexicalScorer(store, phrase_bonus=10, stop_words=[])
        assert scorer.score("static type", "adds static type checks") == 12

    def test_unmatched_terms_score_zero(self, store):
        scorer = LexicalScorer(store)
        assert scorer.score("haskell", "Python is great") == 0

    def test_stop_word_phrase_still_earns_bonus(self, store):
        """The phrase bonus does not depend on any term surviving stop words"""
        scorer = LexicalScorer(store)
        assert scorer.tokenize("what is") == []
        assert scorer.score("what is", "What is Rust? A language.") == 5
        assert scorer.score("what is", "Rust is a language.") == 0

    def test_stop_word_phrase_ranks_matching_document(self):
        store = DocumentStore([
            Document(id="a", content="Rust is fast."),
            Document(id="b", content="What is Rust? A language."),
        ])
        results = LexicalScorer(store).search("What is", limit=2)
        assert ids(results) == ["b", "a"]
        assert results[0].score == 5

    def test_search_matches_score(self, store):
        """Ranking scores agree with scoring each document on its own"""
        scorer = LexicalScorer(store)
        for result in scorer.search("static type checks", limit=5):
            assert result.score == scorer.score("static type checks", result.document.content)


class TestSearch:
    """Tests for ranking over the store"""

    def test_typescript_query_ranks_typescript_first(self, store):
        results = LexicalScorer(store).search("What is TypeScript?", limit=3)

        assert ids(results) == ["doc5", "doc1", "doc2"]
        assert results[0].score == 1
        assert [r.rank for r in results] == [1, 2, 3]
        assert all(r.source == "lexical" for r in results)

    def test_phrase_match_ranking(self, store):
        """doc5 gets the phrase bonus for 'static type'"""
        results = LexicalScorer(store).search("static type", limit=5)

        assert results[0].document_id == "doc5"
        # static x1 + type x3 (type, types, typescript) + bonus 5
        assert results[0].score == 9
        assert results[1].document_id == "doc4"

    def test_substring_semantics_without_stop_words(self, store):
        """'is' appears twice in the JavaScript document, once elsewhere"""
        results = LexicalScorer(store, stop_words=[]).search("is", limit=5)
        assert ids(results) == ["doc2", "doc1", "doc3", "doc4", "doc5"]
        # 2 occurrences + phrase bonus
        assert results[0].score == 7
        assert results[-1].score == 0

    def test_ties_keep_insertion_order(self, store):
        results = LexicalScorer(store).search("concurrency", limit=5)
        assert ids(results[:2]) == ["doc3", "doc4"]
        assert ids(results[2:]) == ["doc1", "doc2", "doc5"]

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query(self, store, query):
        """Blank queries score everything 0 in insertion order"""
        results = LexicalScorer(store).search(query, limit=3)
        assert ids(results) == ["doc1", "doc2", "doc3"]
        assert all(r.score == 0 for r in results)

    def test_limit_larger_than_store(self, store):
        results = LexicalScorer(store).search("rust", limit=50)
        assert len(results) == 5

    def test_empty_store(self):
        assert LexicalScorer(DocumentStore()).search("rust", limit=3) == []

    def test_results_reference_stored_documents(self, store):
        results = LexicalScorer(store).search("rust", limit=1)
        assert results[0].document is store.get("doc3")

    def test_case_insensitive(self):
        store = DocumentStore([Document(id="x", content="RUST rust Rust")])
        results = LexicalScorer(store).search("rUsT", limit=1)
        # 3 occurrences + phrase bonus
        assert results[0].score == 8
