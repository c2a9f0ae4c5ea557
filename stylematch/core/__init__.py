"""Core analysis-and-matching components for StyleMatch."""

from .catalog_index import CatalogEmbeddingIndex
from .embedding_client import EmbeddingClient
from .fallback import FallbackRecommendation, get_fallback_recommendations
from .pipeline import StyleMatchPipeline, analyze
from .scoring import SimilarityRanker, cosine_similarity, rank
from .vision_describer import VisionDescriber, parse_analysis

__all__ = [
    "CatalogEmbeddingIndex",
    "EmbeddingClient",
    "FallbackRecommendation",
    "get_fallback_recommendations",
    "StyleMatchPipeline",
    "analyze",
    "SimilarityRanker",
    "cosine_similarity",
    "rank",
    "VisionDescriber",
    "parse_analysis",
]
