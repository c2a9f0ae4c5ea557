"""
CatalogItem entity representing a product that can be recommended.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class CatalogItem:
    """A catalog product with the description its embedding is derived from."""

    id: str
    name: str
    category: str
    color: str
    style: str
    gender: str
    description: str

    # Derived from description; populated by the catalog embedding index
    embedding: Optional[Tuple[float, ...]] = None

    def __post_init__(self) -> None:
        """Validate required fields after initialization."""
        if not self.id:
            raise ValueError("CatalogItem id cannot be empty")
        if not self.description or not self.description.strip():
            raise ValueError("CatalogItem description cannot be empty")
        if self.embedding is not None:
            object.__setattr__(self, "embedding", tuple(float(v) for v in self.embedding))

    def with_embedding(self, vector: Iterable[float]) -> "CatalogItem":
        """Return a copy carrying the given embedding."""
        return replace(self, embedding=tuple(float(v) for v in vector))

    def without_embedding(self) -> "CatalogItem":
        """Return the output form of this item (embedding stripped)."""
        if self.embedding is None:
            return self
        return replace(self, embedding=None)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for output; the embedding is never included."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "color": self.color,
            "style": self.style,
            "gender": self.gender,
            "description": self.description,
        }


class Catalog:
    """
    Ordered collection of catalog items with unique ids.

    Order matters: ties in similarity ranking are broken by catalog order.
    """

    def __init__(self, items: Iterable[CatalogItem]):
        self._items: Tuple[CatalogItem, ...] = tuple(items)

        seen = set()
        duplicates: List[str] = []
        for item in self._items:
            if item.id in seen:
                duplicates.append(item.id)
            seen.add(item.id)
        if duplicates:
            raise ValueError(f"Duplicate catalog item ids: {sorted(set(duplicates))}")

    @property
    def items(self) -> Tuple[CatalogItem, ...]:
        return self._items

    def get(self, item_id: str) -> Optional[CatalogItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Catalog({len(self._items)} items)"
