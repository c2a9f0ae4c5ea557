"""Static recommendations a caller can show when analysis fails.

The pipeline never applies these itself; it only reports failure through
``AnalysisResponse.success``.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class FallbackRecommendation:
    """A pre-authored group of suggestions."""

    category: str
    items: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "items": list(self.items)}


_DEFAULT_RECOMMENDATIONS = (
    FallbackRecommendation(
        category="Tops",
        items=("Classic White Button-Down Shirt", "Soft Cashmere Sweater", "Elegant Silk Blouse"),
    ),
    FallbackRecommendation(
        category="Bottoms",
        items=("High-Waisted Dark Jeans", "Tailored Black Trousers", "Flowing Midi Skirt"),
    ),
    FallbackRecommendation(
        category="Outerwear",
        items=("Timeless Trench Coat", "Structured Blazer", "Cozy Wool Cardigan"),
    ),
    FallbackRecommendation(
        category="Accessories",
        items=("Leather Crossbody Bag", "Classic Pearl Earrings", "Silk Square Scarf"),
    ),
)


def get_fallback_recommendations() -> List[FallbackRecommendation]:
    """Return the default four-category suggestion set."""
    return list(_DEFAULT_RECOMMENDATIONS)
