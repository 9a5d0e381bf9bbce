"""
Reciprocal Rank Fusion (RRF) - Combine lexical and semantic rankings

RRF combines rankings from different retrieval systems using rank
positions only, so the two score scales never need to be comparable.

Formula: RRF_score(d) = Σ 1 / (k + rank_i(d))
Where k is a constant (typically 60) and rank_i is the 1-indexed rank of d
in system i. A document missing from a list gets nothing from that list.

Reference:
- Cormack et al. (2009): "Reciprocal Rank Fusion outperforms Condorcet"
"""

import math
from typing import Callable, Dict, List, Optional

from hybrid_rag.retrieval.models import FusedResult, ScoredResult

DEFAULT_RRF_K = 60


def reciprocal_rank_fusion(
    lexical_results: List[ScoredResult],
    semantic_results: List[ScoredResult],
    k: int = DEFAULT_RRF_K,
    top_k: Optional[int] = None,
    insertion_order: Optional[Callable[[str], int]] = None
) -> List[FusedResult]:
    """
    Combine lexical and semantic results using Reciprocal Rank Fusion

    Documents are matched by id. Ordering is by fused score descending,
    then documents found by both searches, then lexical rank, then
    insertion order.

    Args:
        lexical_results: Results from lexical search (ranked by term score)
        semantic_results: Results from vector search (ranked by distance)
        k: RRF constant (default: 60, standard value from literature)
        top_k: Number of top results to return (default: all)
        insertion_order: Maps a document id to its store position
            (default: order of first appearance in the inputs)

    Returns:
        Fused results with per-source contributions and fusion_rank set
    """
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ValueError(f"RRF constant must be a positive integer, got {k!r}")

    fused: Dict[str, FusedResult] = {}
    first_seen: Dict[str, int] = {}

    def entry(result: ScoredResult) -> FusedResult:
        doc_id = result.document_id
        if doc_id not in fused:
            fused[doc_id] = FusedResult(document=result.document, fused_score=0.0)
            first_seen[doc_id] = len(first_seen)
        return fused[doc_id]

    # Process lexical results
    for rank, result in enumerate(lexical_results, start=1):
        item = entry(result)
        if item.lexical_rank is not None:
            continue
        item.lexical_rank = rank
        item.lexical_score = 1.0 / (k + rank)
        item.term_score = result.score

    # Process semantic results
    for rank, result in enumerate(semantic_results, start=1):
        item = entry(result)
        if item.semantic_rank is not None:
            continue
        item.semantic_rank = rank
        item.semantic_score = 1.0 / (k + rank)
        item.distance = result.score

    for item in fused.values():
        item.fused_score = item.lexical_score + item.semantic_score

    position = insertion_order or first_seen.__getitem__

    def sort_key(item: FusedResult):
        return (
            -item.fused_score,
            0 if item.in_both else 1,
            item.lexical_rank if item.lexical_rank is not None else math.inf,
            position(item.document_id),
        )

    ranked = sorted(fused.values(), key=sort_key)
    if top_k is not None:
        ranked = ranked[:max(top_k, 0)]

    for idx, item in enumerate(ranked, start=1):
        item.fusion_rank = idx

    return ranked


def get_fusion_stats(fused_results: List[FusedResult]) -> Dict:
    """
    Get statistics about the fusion results

    Args:
        fused_results: Results from RRF fusion

    Returns:
        Dictionary with fusion statistics
    """
    if not fused_results:
        return {
            'total_results': 0,
            'lexical_only': 0,
            'semantic_only': 0,
            'both_methods': 0
        }

    lexical_only = sum(1 for r in fused_results if r.lexical_rank and not r.semantic_rank)
    semantic_only = sum(1 for r in fused_results if r.semantic_rank and not r.lexical_rank)
    both = sum(1 for r in fused_results if r.in_both)

    return {
        'total_results': len(fused_results),
        'lexical_only': lexical_only,
        'semantic_only': semantic_only,
        'both_methods': both,
        'fusion_algorithm': 'RRF (Reciprocal Rank Fusion)'
    }
