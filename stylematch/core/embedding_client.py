"""Embedding client: text to vector through a bounded pool of model calls."""

import asyncio
from typing import Dict, List, Sequence

import numpy as np

from stylematch.domain.interfaces.model_interface import EmbeddingModelInterface
from stylematch.utils.exceptions import ParseError, ValidationError
from stylematch.utils.logger import get_logger

logger = get_logger(__name__)


class EmbeddingClient:
    """
    Converts text into embedding vectors.

    All calls made through one client share a semaphore, so the number of
    in-flight requests to the embedding model never exceeds
    ``max_concurrency``. One client is bound to one embedding model, which
    keeps every vector it produces comparable with every other.
    """

    def __init__(self, model: EmbeddingModelInterface, max_concurrency: int = 8):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.model = model
        self.max_concurrency = max_concurrency
        self._semaphores: Dict[int, asyncio.Semaphore] = {}

    @property
    def model_name(self) -> str:
        return self.model.model_name

    def _semaphore(self) -> asyncio.Semaphore:
        # asyncio primitives belong to one event loop
        loop_id = id(asyncio.get_running_loop())
        semaphore = self._semaphores.get(loop_id)
        if semaphore is None:
            self._semaphores = {loop_id: asyncio.Semaphore(self.max_concurrency)}
            semaphore = self._semaphores[loop_id]
        return semaphore

    async def embed(self, text: str) -> np.ndarray:
        """
        Embed a single text.

        Raises:
            ValidationError: If text is blank.
            UpstreamError: If the model call fails.
            ParseError: If the model returns something that is not a vector.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Cannot embed blank text", field="text", value=text)

        async with self._semaphore():
            raw = await self.model.embed_text(text)

        try:
            vector = np.asarray(raw, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ParseError(f"Embedding response is not numeric: {e}") from e

        if vector.ndim != 1 or vector.size == 0:
            raise ParseError(f"Embedding response has invalid shape {vector.shape}")

        return vector

    async def embed_many(self, texts: Sequence[str]) -> List[np.ndarray]:
        """
        Embed several texts concurrently.

        Identical texts are embedded once. Results are returned in the
        order of ``texts``. The first failure cancels the remaining calls
        and propagates.
        """
        unique: List[str] = list(dict.fromkeys(texts))
        if len(unique) < len(texts):
            logger.debug(f"Embedding {len(unique)} unique texts out of {len(texts)}")

        tasks = [asyncio.ensure_future(self.embed(text)) for text in unique]
        try:
            vectors = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        by_text = dict(zip(unique, vectors))
        return [by_text[text] for text in texts]
