# Domain Interfaces Package
"""
Abstract base classes defining contracts for infrastructure implementations.
"""

from .model_interface import EmbeddingModelInterface, VisionModelInterface

__all__ = ["EmbeddingModelInterface", "VisionModelInterface"]
