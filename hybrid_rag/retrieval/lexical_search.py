"""
Lexical Search - Term-frequency keyword scoring over the document store

A deliberately simple stand-in for BM25 that needs no index:
- Query split on whitespace, lower-cased, duplicates kept
  (a repeated term counts twice)
- Surrounding punctuation stripped from each term, stop words dropped
- Score = sum of literal substring occurrences of each term in the
  lower-cased content (no word boundaries: "type" matches "typed")
- Fixed bonus when the content contains the whole query as a phrase
- Stable sort: ties keep insertion order
"""

import logging
import string
from typing import Dict, Iterable, List, Optional

from hybrid_rag.indexing.document_store import DocumentStore
from hybrid_rag.retrieval.models import LEXICAL, ScoredResult

logger = logging.getLogger(__name__)

DEFAULT_PHRASE_BONUS = 5

DEFAULT_STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "can", "do", "does",
    "for", "from", "how", "in", "is", "it", "its", "of", "on", "or",
    "that", "the", "this", "to", "was", "what", "when", "where", "which",
    "who", "why", "with",
})


class LexicalScorer:
    """Keyword search using naive term counting"""

    def __init__(
        self,
        store: DocumentStore,
        phrase_bonus: float = DEFAULT_PHRASE_BONUS,
        stop_words: Optional[Iterable[str]] = None
    ):
        """
        Initialize lexical scorer

        Args:
            store: Document store to score
            phrase_bonus: Bonus for a whole-query phrase match (default: 5)
            stop_words: Terms to ignore (default: DEFAULT_STOP_WORDS,
                pass an empty list to count every term)
        """
        self.store = store
        self.phrase_bonus = phrase_bonus
        self.stop_words = frozenset(
            w.lower() for w in (DEFAULT_STOP_WORDS if stop_words is None else stop_words)
        )

    def tokenize(self, query: str) -> List[str]:
        """Split a query into scoring terms (duplicates retained)"""
        terms = []
        for raw in query.lower().split():
            term = raw.strip(string.punctuation)
            if term and term not in self.stop_words:
                terms.append(term)
        return terms

    def _score_terms(self, terms: List[str], phrase: str, content: str) -> float:
        text = content.lower()
        total = sum(text.count(term) for term in terms)
        if phrase and phrase in text:
            total += self.phrase_bonus
        return total

    def score(self, query: str, content: str) -> float:
        """
        Score one document's content against a query

        Args:
            query: Raw query text
            content: Document content

        Returns:
            Sum of term occurrence counts, plus the phrase bonus when the
            content contains the whole trimmed query
        """
        return self._score_terms(self.tokenize(query), query.strip().lower(), content)

    def search(self, query: str, limit: int = 10) -> List[ScoredResult]:
        """
        Rank every document by lexical score

        Args:
            query: Search query text (blank yields all documents scored 0)
            limit: Maximum number of results

        Returns:
            Top results, highest score first, ties in insertion order
        """
        terms = self.tokenize(query)
        phrase = query.strip().lower()
        scored = [(self._score_terms(terms, phrase, doc.content), doc) for doc in self.store.all()]

        # sorted() is stable, so equal scores keep store order
        ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)[:max(limit, 0)]

        results = [
            ScoredResult(document=doc, score=score, rank=idx, source=LEXICAL)
            for idx, (score, doc) in enumerate(ranked, start=1)
        ]

        logger.debug(
            f"Lexical search '{query}': {len(results)} results, "
            f"{sum(1 for r in results if r.score > 0)} with matches"
        )
        return results

    def get_stats(self) -> Dict:
        """Get lexical search statistics"""
        return {
            'phrase_bonus': self.phrase_bonus,
            'stop_words': len(self.stop_words),
            'search_algorithm': 'term frequency (substring)'
        }
