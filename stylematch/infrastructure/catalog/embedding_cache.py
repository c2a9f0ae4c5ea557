"""JSON persistence for catalog embeddings.

File layout::

    {
      "model": "text-embedding-3-large",
      "items": {
        "<item id>": {"description_hash": "<sha1>", "vector": [...]},
        ...
      }
    }

An entry is reused only when both the model and the hash of the item's
description still match, so editing a description or switching models
forces recomputation.
"""

import hashlib
import json
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from stylematch.domain.entities.catalog_item import CatalogItem
from stylematch.utils.logger import get_logger

logger = get_logger(__name__)


def description_hash(description: str) -> str:
    """Stable hash of a description (SHA-1, stable across runs)."""
    return hashlib.sha1(description.encode('utf-8')).hexdigest()


class EmbeddingCache:
    """Catalog id -> vector table stored in a JSON file."""

    def __init__(self, path: Path | str, model_name: str):
        self.path = Path(path)
        self.model_name = model_name
        self._entries: Dict[str, Dict[str, object]] = {}
        self._loaded = False

    def load(self) -> None:
        """Read the cache file; a missing, corrupt or foreign-model file yields an empty cache."""
        self._loaded = True
        self._entries = {}

        if not self.path.exists():
            logger.debug(f"No embedding cache at {self.path}")
            return

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable embedding cache {self.path}: {e}")
            return

        if not isinstance(data, dict) or data.get("model") != self.model_name:
            logger.info(f"Embedding cache {self.path} was built for another model, ignoring it")
            return

        items = data.get("items")
        if isinstance(items, dict):
            self._entries = {str(k): v for k, v in items.items() if isinstance(v, dict)}

        logger.info(f"Loaded {len(self._entries)} cached embeddings from {self.path}")

    def get(self, item: CatalogItem) -> Optional[List[float]]:
        """Return the cached vector for item, if still valid."""
        if not self._loaded:
            self.load()

        entry = self._entries.get(item.id)
        if entry is None or entry.get("description_hash") != description_hash(item.description):
            return None

        vector = entry.get("vector")
        if not isinstance(vector, list) or not vector:
            return None
        try:
            return [float(v) for v in vector]
        except (TypeError, ValueError):
            return None

    def save(self, items: Mapping[str, CatalogItem], vectors: Mapping[str, List[float]]) -> Optional[Path]:
        """Write vectors for the given items, replacing the previous file.

        Persistence is best-effort: a file that cannot be written is logged
        and skipped, and the in-memory entries are still updated.

        Args:
            items: Catalog items by id
            vectors: Embeddings by item id

        Returns:
            Path of the written file, or None if it could not be written
        """
        payload = {
            "model": self.model_name,
            "items": {
                item_id: {
                    "description_hash": description_hash(items[item_id].description),
                    "vector": [float(v) for v in vector],
                }
                for item_id, vector in vectors.items()
                if item_id in items
            },
        }

        self._entries = payload["items"]
        self._loaded = True

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f)
            tmp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Could not write embedding cache {self.path}: {e}")
            self._discard(tmp_path)
            return None

        logger.info(f"Saved {len(payload['items'])} catalog embeddings to {self.path}")
        return self.path

    @staticmethod
    def _discard(tmp_path: Path) -> None:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Could not remove {tmp_path}: {e}")
