"""
Retrieval Models - Per-query result structures

All of these are transient: created inside a single search call and handed
back to the caller. They hold references to stored Documents, never copies.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hybrid_rag.indexing.document_store import Document

LEXICAL = "lexical"
SEMANTIC = "semantic"


@dataclass
class ScoredResult:
    """
    One entry of a single-source ranking

    Attributes:
        document: The stored document
        score: Term score (lexical) or distance (semantic, lower is closer)
        rank: 1-indexed position within its source list
        source: "lexical" or "semantic"
    """
    document: Document
    score: float
    rank: int
    source: str

    @property
    def document_id(self) -> str:
        return self.document.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_id": self.document_id,
            "title": self.document.title,
            "score": self.score,
            "rank": self.rank,
            "source": self.source,
        }


@dataclass
class FusedResult:
    """
    One entry of the fused ranking

    lexical_score and semantic_score are the reciprocal-rank contributions
    from each list (0.0 when the document is absent from that list), so
    fused_score == lexical_score + semantic_score.
    """
    document: Document
    fused_score: float
    lexical_score: float = 0.0
    semantic_score: float = 0.0
    lexical_rank: Optional[int] = None
    semantic_rank: Optional[int] = None
    term_score: Optional[float] = None
    distance: Optional[float] = None
    fusion_rank: int = 0

    @property
    def document_id(self) -> str:
        return self.document.id

    @property
    def in_both(self) -> bool:
        return self.lexical_rank is not None and self.semantic_rank is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.fusion_rank,
            "document_id": self.document_id,
            "title": self.document.title,
            "fused_score": self.fused_score,
            "lexical_score": self.lexical_score,
            "semantic_score": self.semantic_score,
            "lexical_rank": self.lexical_rank,
            "semantic_rank": self.semantic_rank,
            "term_score": self.term_score,
            "distance": self.distance,
            "content": self.document.content,
            "metadata": dict(self.document.metadata),
        }


@dataclass
class SearchResponse:
    """Outcome of one hybrid search"""
    query: str
    k: int
    results: List[FusedResult] = field(default_factory=list)
    lexical: List[ScoredResult] = field(default_factory=list)
    semantic: List[ScoredResult] = field(default_factory=list)
    latency_ms: int = 0

    @property
    def top(self) -> Optional[FusedResult]:
        return self.results[0] if self.results else None

    def __len__(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "k": self.k,
            "latency_ms": self.latency_ms,
            "lexical": [r.to_dict() for r in self.lexical],
            "semantic": [r.to_dict() for r in self.semantic],
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class Answer:
    """Generated answer grounded on the top fused document"""
    query: str
    text: str
    source: FusedResult
    response: SearchResponse

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "answer": self.text,
            "source": self.source.to_dict(),
            "search": self.response.to_dict(),
        }
