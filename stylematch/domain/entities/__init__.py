# Domain Entities Package
"""
Core business entities as dataclasses.
"""

from .catalog_item import Catalog, CatalogItem
from .image_analysis import ImageAnalysis
from .recommendation import AnalysisResponse, MatchResult

__all__ = ["AnalysisResponse", "Catalog", "CatalogItem", "ImageAnalysis", "MatchResult"]
