"""
Hybrid RAG Retrieval Module

Implements hybrid search with lexical term scoring, vector search and
RRF fusion.
"""

from hybrid_rag.retrieval.models import Answer, FusedResult, ScoredResult, SearchResponse
from hybrid_rag.retrieval.lexical_search import LexicalScorer, DEFAULT_STOP_WORDS
from hybrid_rag.retrieval.vector_search import SemanticSearcher, VectorSearch
from hybrid_rag.retrieval.fusion import reciprocal_rank_fusion, get_fusion_stats
from hybrid_rag.retrieval.pipeline import HybridRetriever

__all__ = [
    "Answer",
    "FusedResult",
    "ScoredResult",
    "SearchResponse",
    "LexicalScorer",
    "DEFAULT_STOP_WORDS",
    "SemanticSearcher",
    "VectorSearch",
    "reciprocal_rank_fusion",
    "get_fusion_stats",
    "HybridRetriever",
]
