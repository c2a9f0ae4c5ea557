# Use Cases Package
"""
Application use cases (business logic).

Use cases orchestrate the flow of data between domain entities, the
model providers and the catalog.
"""

from stylematch.core.use_cases.analyze_outfit import AnalyzeOutfitUseCase

__all__ = [
    "AnalyzeOutfitUseCase",
]
