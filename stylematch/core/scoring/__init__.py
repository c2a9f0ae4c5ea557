# Scoring Package
"""
Similarity scoring and ranked selection.

Provides:
- cosine_similarity: Compute similarity between embeddings
- batch_cosine_similarity: Query-vs-matrix similarity
- rank / rank_with_scores: Threshold, sort and top-K selection
- SimilarityRanker: Ranker bound to configured threshold and top-K

Example:
    >>> from stylematch.core.scoring import SimilarityRanker
    >>>
    >>> ranker = SimilarityRanker(threshold=0.5, top_k=2)
    >>> ranker.rank([1, 0], [(a, [1, 0]), (b, [0, 1]), (c, [0.9, 0.1])])
    [a, c]
"""

from .ranker import SimilarityRanker, rank, rank_with_scores
from .similarity import batch_cosine_similarity, cosine_similarity

__all__ = [
    # Similarity functions
    "cosine_similarity",
    "batch_cosine_similarity",
    # Ranking
    "rank",
    "rank_with_scores",
    "SimilarityRanker",
]
