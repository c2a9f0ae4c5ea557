"""
Abstract interfaces for the vision and embedding model providers.
"""

from abc import ABC, abstractmethod
from typing import List


class VisionModelInterface(ABC):
    """
    Contract for a vision-capable language model.

    Implementations send one image plus an instruction and return the
    model's raw text answer. Transport failures must surface as
    UpstreamError.
    """

    @abstractmethod
    async def describe_image(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        """
        Ask the model about an image.

        Args:
            prompt: Instruction text.
            image_bytes: Encoded image file contents.
            mime_type: MIME type of the image (e.g. "image/jpeg").

        Returns:
            The model's free-text reply.
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model name/identifier."""
        pass


class EmbeddingModelInterface(ABC):
    """
    Contract for a text embedding model.

    Every vector returned by one instance has the same dimensionality.
    """

    @abstractmethod
    async def embed_text(self, text: str) -> List[float]:
        """
        Generate an embedding vector for a single text.

        Args:
            text: Input text.

        Returns:
            The embedding as a list of floats.
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model name/identifier."""
        pass
