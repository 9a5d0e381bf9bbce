"""
Retrieval Pipeline - Hybrid lexical + semantic search workflow

1. Lexical search (term counting over the document store)
2. Semantic search (vector similarity collaborator)
3. Reciprocal Rank Fusion (combine rankings)
4. Optional answer generation from the top fused document

Searches are synchronous and share nothing but the read-only document
store and vector index (both built before the first search), so several
may run at once. The semantic call is
the only slow step and has no timeout of its own; a failure there aborts
the whole search rather than falling back to lexical-only results.
"""

import logging
import time
from typing import Dict, List, Optional, Tuple

from hybrid_rag.errors import HybridRAGError, InvalidQueryError, NotFoundError, SemanticBackendError
from hybrid_rag.generation.answerer import AnswerGenerator, build_answer_prompt
from hybrid_rag.indexing.document_store import Document, DocumentStore
from hybrid_rag.retrieval.fusion import DEFAULT_RRF_K, get_fusion_stats, reciprocal_rank_fusion
from hybrid_rag.retrieval.lexical_search import LexicalScorer
from hybrid_rag.retrieval.models import SEMANTIC, Answer, ScoredResult, SearchResponse
from hybrid_rag.retrieval.vector_search import SemanticSearcher

logger = logging.getLogger(__name__)


class HybridRetriever:
    """Complete retrieval pipeline with hybrid search and optional answering"""

    def __init__(
        self,
        store: DocumentStore,
        semantic: SemanticSearcher,
        lexical: Optional[LexicalScorer] = None,
        rrf_k: int = DEFAULT_RRF_K,
        answer_generator: Optional[AnswerGenerator] = None
    ):
        """
        Initialize retrieval pipeline

        Args:
            store: Populated document store
            semantic: Similarity search collaborator
            lexical: Lexical scorer (default: LexicalScorer over store)
            rrf_k: RRF smoothing constant (default: 60)
            answer_generator: Collaborator for search_and_answer()
        """
        self.store = store
        self.semantic = semantic
        self.lexical = lexical or LexicalScorer(store)
        self.rrf_k = rrf_k
        self.answer_generator = answer_generator

    @staticmethod
    def _validate(query, k) -> None:
        if not isinstance(query, str) or not query.strip():
            raise InvalidQueryError("Query must be a non-empty string")
        if isinstance(k, bool) or not isinstance(k, int) or k < 1:
            raise InvalidQueryError(f"k must be an integer >= 1, got {k!r}")

    def _semantic_search(self, query: str, k: int) -> List[ScoredResult]:
        try:
            hits = list(self.semantic.similarity_search(query, k))
        except Exception as e:
            logger.error(f"Semantic search failed: {e}")
            raise SemanticBackendError(f"Semantic search failed: {e}") from e

        results = []
        seen = set()
        for hit in hits:
            document, distance = self._resolve_hit(hit)
            if document.id in seen:
                continue
            seen.add(document.id)
            results.append(ScoredResult(
                document=document,
                score=distance,
                rank=len(results) + 1,
                source=SEMANTIC
            ))
            if len(results) >= k:
                break
        return results

    def _resolve_hit(self, hit) -> Tuple[Document, float]:
        try:
            ref, distance = hit
            doc_id = ref.id if isinstance(ref, Document) else ref
            return self.store.get(doc_id), float(distance)
        except NotFoundError as e:
            raise SemanticBackendError(f"Semantic search returned an unknown document: {e}") from e
        except (TypeError, ValueError) as e:
            raise SemanticBackendError(f"Malformed semantic search result {hit!r}: {e}") from e

    def search(self, query: str, k: int = 3) -> SearchResponse:
        """
        Retrieve the top-k documents using hybrid search

        Args:
            query: Search query
            k: Number of results per source list and in the fused output

        Returns:
            SearchResponse with fused results and both source rankings

        Raises:
            InvalidQueryError: Blank query or k < 1
            SemanticBackendError: The semantic collaborator failed
        """
        self._validate(query, k)
        start_time = time.time()

        lexical_results = self.lexical.search(query, limit=k)
        semantic_results = self._semantic_search(query, k)

        fused_results = reciprocal_rank_fusion(
            lexical_results,
            semantic_results,
            k=self.rrf_k,
            top_k=k,
            insertion_order=self.store.position
        )

        latency_ms = int((time.time() - start_time) * 1000)
        stats = get_fusion_stats(fused_results)
        logger.info(
            f"Search '{query}' (k={k}): {len(lexical_results)} lexical, "
            f"{len(semantic_results)} semantic, {len(fused_results)} fused "
            f"in {latency_ms}ms"
        )
        logger.debug(
            f"Lexical only: {stats['lexical_only']}, "
            f"Semantic only: {stats['semantic_only']}, "
            f"Both: {stats['both_methods']}"
        )

        return SearchResponse(
            query=query,
            k=k,
            results=fused_results,
            lexical=lexical_results,
            semantic=semantic_results,
            latency_ms=latency_ms
        )

    def search_and_answer(self, query: str, k: int = 3) -> Answer:
        """
        Search, then answer the query from the top fused document

        Errors from the answer generator propagate unchanged; no retries.

        Raises:
            HybridRAGError: No answer generator configured
            NotFoundError: Search found no documents to answer from
        """
        if self.answer_generator is None:
            raise HybridRAGError("No answer generator configured")

        response = self.search(query, k)
        top = response.top
        if top is None:
            raise NotFoundError("No documents available to answer from")

        prompt = build_answer_prompt(query, top.document.content)
        text = self.answer_generator.generate(prompt)

        return Answer(query=query, text=text, source=top, response=response)

    def format_results(self, response: SearchResponse, include_sources: bool = True) -> str:
        """
        Format a search response for display

        Args:
            response: Result of search()
            include_sources: Include the lexical and semantic rankings

        Returns:
            Formatted string representation of results
        """
        lines = [f"🔍 Query: \"{response.query}\"", ""]

        if include_sources:
            lines.append("📝 Keyword Search Results:")
            for result in response.lexical:
                lines.append(f"   {result.rank}. {result.document.title} (score: {result.score:.2f})")
            lines.append("")

            lines.append("🧠 Semantic Search Results:")
            for result in response.semantic:
                lines.append(
                    f"   {result.rank}. {result.document.title} "
                    f"(similarity: {1 - result.score:.2f})"
                )
            lines.append("")

        lines.append("🔀 Hybrid (Fused) Results:")
        if not response.results:
            lines.append("   No results found.")
        for result in response.results:
            lines.append(f"   {result.fusion_rank}. {result.document.title}")
            lines.append(f"      Fused Score: {result.fused_score:.4f}")
            lines.append(
                f"      Keyword: {result.lexical_score:.4f} | "
                f"Semantic: {result.semantic_score:.4f}"
            )

        return "\n".join(lines)

    def get_stats(self) -> Dict:
        """Get pipeline statistics"""
        stats = {
            'store': self.store.get_stats(),
            'lexical_search': self.lexical.get_stats(),
            'rrf_k': self.rrf_k,
            'answering_enabled': self.answer_generator is not None
        }

        semantic_stats = getattr(self.semantic, "get_stats", None)
        if callable(semantic_stats):
            stats['semantic_search'] = semantic_stats()

        return stats
