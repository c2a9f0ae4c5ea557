"""Catalog sources: the built-in reference set and JSON/YAML catalog files.

A catalog file holds either a list of items or a mapping with an
``items`` list. Each item needs id, name, category, color, style, gender
and description.
"""

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from stylematch.domain.entities.catalog_item import Catalog, CatalogItem
from stylematch.utils.exceptions import ConfigError, ValidationError
from stylematch.utils.logger import get_logger

logger = get_logger(__name__)


class CatalogItemModel(BaseModel):
    """Validation model for one catalog entry read from disk."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Unique product identifier")
    name: str = Field(..., min_length=1, description="Display name")
    category: str = Field(..., description="Product category")
    color: str = Field(default="", description="Main color")
    style: str = Field(default="", description="Style keyword")
    gender: str = Field(default="Unisex", description="Target gender")
    description: str = Field(..., min_length=1, description="Text the embedding is computed from")

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Allow numeric ids in hand-written files."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        """Ensure the description is not just whitespace."""
        if not v.strip():
            raise ValueError("description cannot be blank")
        return v.strip()

    def to_entity(self) -> CatalogItem:
        return CatalogItem(
            id=self.id,
            name=self.name,
            category=self.category,
            color=self.color,
            style=self.style,
            gender=self.gender,
            description=self.description,
        )


_DEFAULT_ITEMS = [
    CatalogItem(
        id="1",
        name="Classic White Button-Down Shirt",
        category="Shirts",
        color="White",
        style="Classic",
        gender="Unisex",
        description="Timeless white cotton shirt perfect for professional and casual looks",
    ),
    CatalogItem(
        id="2",
        name="Dark Wash Skinny Jeans",
        category="Jeans",
        color="Dark Blue",
        style="Skinny",
        gender="Women",
        description="Flattering dark wash jeans with stretch for comfort and style",
    ),
    CatalogItem(
        id="3",
        name="Black Leather Ankle Boots",
        category="Boots",
        color="Black",
        style="Ankle",
        gender="Women",
        description="Versatile black leather boots suitable for multiple occasions",
    ),
    CatalogItem(
        id="4",
        name="Cashmere V-Neck Sweater",
        category="Tops",
        color="Beige",
        style="V-Neck",
        gender="Women",
        description="Luxurious cashmere sweater in neutral beige tone",
    ),
    CatalogItem(
        id="5",
        name="Tailored Navy Blazer",
        category="Blazers",
        color="Navy",
        style="Tailored",
        gender="Unisex",
        description="Professional navy blazer perfect for business attire",
    ),
    CatalogItem(
        id="6",
        name="White Canvas Sneakers",
        category="Sneakers",
        color="White",
        style="Classic",
        gender="Unisex",
        description="Clean white canvas sneakers for casual everyday wear",
    ),
]


def get_default_catalog() -> Catalog:
    """Return the built-in six-item reference catalog."""
    return Catalog(_DEFAULT_ITEMS)


def load_catalog(path: Path | str) -> Catalog:
    """Load and validate a catalog from a JSON or YAML file.

    Args:
        path: Catalog file (.json, .yaml or .yml)

    Returns:
        Catalog in file order

    Raises:
        ConfigError: If the file is missing or cannot be parsed
        ValidationError: If entries are invalid or ids repeat
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Catalog file not found: {path}", path=str(path))

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse catalog file: {e}", path=str(path)) from e

    if isinstance(data, dict):
        data = data.get("items")
    if not isinstance(data, list):
        raise ValidationError(
            "Catalog file must contain a list of items",
            field="items",
            context={"path": str(path)},
        )

    items = []
    for index, raw in enumerate(data):
        try:
            items.append(CatalogItemModel.model_validate(raw).to_entity())
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid catalog entry at position {index}: {e.error_count()} error(s)",
                field=f"items[{index}]",
                context={"path": str(path)},
            ) from e

    try:
        catalog = Catalog(items)
    except ValueError as e:
        raise ValidationError(str(e), field="id", context={"path": str(path)}) from e

    logger.info(f"Loaded catalog with {len(catalog)} items from {path}")
    return catalog


def resolve_catalog(path: Optional[Path | str] = None) -> Catalog:
    """Load the catalog at path, or the built-in set when path is None."""
    if path is None:
        return get_default_catalog()
    return load_catalog(path)
