"""Catalog embedding index.

Holds the id -> vector table for a catalog. The table is built once per
index (done-once, lock-guarded) and then shared read-only by every request
that uses the index. Building is all-or-nothing: if any item fails to
embed, nothing is committed and the error propagates.
"""

import asyncio
from typing import Dict, List, Optional, Tuple

import numpy as np

from stylematch.core.embedding_client import EmbeddingClient
from stylematch.domain.entities.catalog_item import Catalog, CatalogItem
from stylematch.infrastructure.catalog.embedding_cache import EmbeddingCache
from stylematch.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)


class CatalogEmbeddingIndex:
    """Catalog items paired with their description embeddings."""

    def __init__(self, catalog: Catalog, cache: Optional[EmbeddingCache] = None):
        self.catalog = catalog
        self.cache = cache
        self._vectors: Optional[Dict[str, np.ndarray]] = None
        self._locks: Dict[int, asyncio.Lock] = {}

        # Items that already carry an embedding need no model call
        self._preset: Dict[str, np.ndarray] = {
            item.id: np.asarray(item.embedding, dtype=np.float64)
            for item in catalog
            if item.embedding is not None
        }

    @property
    def is_ready(self) -> bool:
        """True once every catalog item has a vector."""
        return self._vectors is not None

    def _lock(self) -> asyncio.Lock:
        loop_id = id(asyncio.get_running_loop())
        lock = self._locks.get(loop_id)
        if lock is None:
            self._locks = {loop_id: asyncio.Lock()}
            lock = self._locks[loop_id]
        return lock

    async def ensure_embeddings(self, client: EmbeddingClient) -> None:
        """
        Compute catalog embeddings if they are not available yet.

        Concurrent callers wait for the first build instead of starting
        their own.

        Raises:
            UpstreamError: If any catalog description fails to embed.
        """
        if self._vectors is not None:
            return

        async with self._lock():
            if self._vectors is not None:
                return
            self._vectors = await self._build(client)

    async def _build(self, client: EmbeddingClient) -> Dict[str, np.ndarray]:
        """
        Collect a vector for every catalog item.

        Preset and cached vectors are reused; the rest are embedded in one
        batch. The cache file is then rewritten off the event loop.

        Args:
            client: Embedding client for items without a vector

        Returns:
            Vectors by item id
        """
        vectors: Dict[str, np.ndarray] = dict(self._preset)
        pending: List[CatalogItem] = []

        for item in self.catalog:
            if item.id in vectors:
                continue
            cached = self.cache.get(item) if self.cache is not None else None
            if cached is not None:
                vectors[item.id] = np.asarray(cached, dtype=np.float64)
            else:
                pending.append(item)

        logger.info(
            f"Catalog embeddings: {len(vectors)} reused, {len(pending)} to compute "
            f"with {client.model_name}"
        )

        if pending:
            with log_execution_time(logger, f"embedding {len(pending)} catalog items"):
                computed = await client.embed_many([item.description for item in pending])
            for item, vector in zip(pending, computed):
                vectors[item.id] = vector

            if self.cache is not None:
                await asyncio.to_thread(
                    self.cache.save,
                    {item.id: item for item in self.catalog},
                    {item_id: vector.tolist() for item_id, vector in vectors.items()},
                )

        return vectors

    def candidates(self) -> List[Tuple[CatalogItem, np.ndarray]]:
        """Return (item, vector) pairs in catalog order.

        Raises:
            RuntimeError: If called before ensure_embeddings().
        """
        if self._vectors is None:
            raise RuntimeError("Catalog embeddings have not been computed yet")
        return [(item, self._vectors[item.id]) for item in self.catalog]

    def embedded_items(self) -> List[CatalogItem]:
        """Return catalog items carrying their computed embedding."""
        return [item.with_embedding(vector) for item, vector in self.candidates()]

    def reset(self) -> None:
        """Drop computed vectors so the next request rebuilds them."""
        self._vectors = None
