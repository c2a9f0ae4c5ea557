"""
Threshold + top-K ranking of catalog items against a query embedding.

Example:
    >>> ranker = SimilarityRanker(threshold=0.5, top_k=3)
    >>> matches = ranker.rank(item_vector, [(item, item_vector) for item in catalog])
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from stylematch.domain.entities.catalog_item import CatalogItem
from stylematch.utils.config import MatchingConfig
from stylematch.utils.logger import get_logger

from .similarity import VectorLike, batch_cosine_similarity

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 0.5
DEFAULT_TOP_K = 3

Candidate = Tuple[CatalogItem, VectorLike]


def rank_with_scores(
    query: VectorLike,
    candidates: Sequence[Candidate],
    threshold: float = DEFAULT_THRESHOLD,
    top_k: int = DEFAULT_TOP_K,
) -> List[Tuple[CatalogItem, float]]:
    """
    Rank candidates by cosine similarity to the query.

    Candidates scoring below ``threshold`` are dropped, the rest are sorted
    by descending similarity with ties kept in candidate order, and the
    list is cut to ``top_k``.

    Args:
        query: Query embedding.
        candidates: (item, embedding) pairs in catalog order.
        threshold: Minimum similarity to keep a candidate.
        top_k: Maximum number of results.

    Returns:
        List of (CatalogItem, similarity) pairs, best first. May be empty.

    Raises:
        ValueError: If top_k < 1 or embedding dimensions differ.
    """
    if top_k < 1:
        raise ValueError(f"top_k must be >= 1, got {top_k}")

    if not candidates:
        return []

    matrix = np.asarray([vector for _, vector in candidates], dtype=np.float64)
    scores = batch_cosine_similarity(query, matrix)

    # NaN never passes this comparison
    keep = np.flatnonzero(scores >= threshold)
    if keep.size == 0:
        return []

    # Stable sort on negated scores keeps catalog order for ties
    order = keep[np.argsort(-scores[keep], kind="stable")][:top_k]

    return [(candidates[i][0], float(scores[i])) for i in order]


def rank(
    query: VectorLike,
    candidates: Sequence[Candidate],
    threshold: float = DEFAULT_THRESHOLD,
    top_k: int = DEFAULT_TOP_K,
) -> List[CatalogItem]:
    """Rank candidates and return only the items. See rank_with_scores."""
    return [item for item, _ in rank_with_scores(query, candidates, threshold, top_k)]


class SimilarityRanker:
    """Ranker bound to a similarity threshold and result limit."""

    def __init__(self, threshold: float = DEFAULT_THRESHOLD, top_k: int = DEFAULT_TOP_K):
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")
        self.threshold = threshold
        self.top_k = top_k

    @classmethod
    def from_config(cls, config: MatchingConfig) -> "SimilarityRanker":
        """
        Build a ranker from the matching section of the config.

        Args:
            config: Matching settings (similarity_threshold, top_k)

        Returns:
            SimilarityRanker using those settings
        """
        return cls(threshold=config.similarity_threshold, top_k=config.top_k)

    def rank(
        self,
        query: VectorLike,
        candidates: Sequence[Candidate],
        top_k: Optional[int] = None,
    ) -> List[CatalogItem]:
        """
        Rank candidates against a query and return the items only.

        Args:
            query: Query embedding
            candidates: (item, vector) pairs
            top_k: Result limit for this call (defaults to self.top_k)

        Returns:
            Items scoring at or above the threshold, best first
        """
        return [item for item, _ in self.rank_with_scores(query, candidates, top_k)]

    def rank_with_scores(
        self,
        query: VectorLike,
        candidates: Sequence[Candidate],
        top_k: Optional[int] = None,
    ) -> List[Tuple[CatalogItem, float]]:
        """
        Rank candidates against a query.

        Args:
            query: Query embedding
            candidates: (item, vector) pairs
            top_k: Result limit for this call (defaults to self.top_k)

        Returns:
            (item, score) pairs at or above the threshold, highest score
            first; ties keep catalog order
        """
        ranked = rank_with_scores(
            query,
            candidates,
            threshold=self.threshold,
            top_k=top_k if top_k is not None else self.top_k,
        )
        logger.debug(
            f"Ranked {len(candidates)} candidates: {len(ranked)} above threshold {self.threshold}"
        )
        return ranked
