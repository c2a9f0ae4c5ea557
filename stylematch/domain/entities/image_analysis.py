"""
ImageAnalysis entity describing what the vision model saw in an upload.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ImageAnalysis:
    """Complementary-item suggestions for a single photographed garment."""

    items: Tuple[str, ...]
    category: str
    gender: str

    def __post_init__(self) -> None:
        """Validate required fields after initialization."""
        # Accept lists from callers, store an immutable tuple
        object.__setattr__(self, "items", tuple(self.items))
        if not self.items:
            raise ValueError("ImageAnalysis items cannot be empty")
        if any(not isinstance(item, str) or not item.strip() for item in self.items):
            raise ValueError("ImageAnalysis items must be non-blank strings")
        if not self.category:
            raise ValueError("ImageAnalysis category cannot be empty")
        if not self.gender:
            raise ValueError("ImageAnalysis gender cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": list(self.items),
            "category": self.category,
            "gender": self.gender,
        }
