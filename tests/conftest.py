"""Pytest fixtures and configuration for StyleMatch tests."""

import asyncio
import io
import os
import tempfile
from typing import Dict, Iterable, List, Optional, Sequence

# Keep test runs from writing into the project's logs/ directory
os.environ.setdefault("STYLEMATCH_LOG_DIR", tempfile.mkdtemp(prefix="stylematch-logs-"))

import pytest
from PIL import Image

from stylematch.domain.entities.catalog_item import Catalog, CatalogItem
from stylematch.domain.interfaces.model_interface import EmbeddingModelInterface, VisionModelInterface
from stylematch.utils.config import AppConfig, MatchingConfig, reset_config
from stylematch.utils.exceptions import UpstreamError


class FakeVisionModel(VisionModelInterface):
    """Vision model returning a canned reply."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, object]] = []

    @property
    def model_name(self) -> str:
        return "fake-vision"

    async def describe_image(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        self.calls.append({"prompt": prompt, "size": len(image_bytes), "mime_type": mime_type})
        if self.error is not None:
            raise self.error
        return self.reply


class FakeEmbeddingModel(EmbeddingModelInterface):
    """Embedding model backed by a text -> vector table.

    Texts listed in ``fail_on`` raise UpstreamError. Unknown texts get
    ``default`` (or raise KeyError when there is none).
    """

    def __init__(
        self,
        vectors: Optional[Dict[str, Sequence[float]]] = None,
        default: Optional[Sequence[float]] = None,
        fail_on: Iterable[str] = (),
        delay: float = 0.0,
    ):
        self.vectors = dict(vectors or {})
        self.default = default
        self.fail_on = set(fail_on)
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def model_name(self) -> str:
        return "fake-embedding"

    async def embed_text(self, text: str) -> List[float]:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if text in self.fail_on:
                raise UpstreamError("Embedding API error (503)", service="embedding", status_code=503)
            if text in self.vectors:
                return list(self.vectors[text])
            if self.default is not None:
                return list(self.default)
            raise KeyError(text)
        finally:
            self.in_flight -= 1

    def calls_for(self, text: str) -> int:
        return self.calls.count(text)


def make_item(item_id: str, description: str, **overrides) -> CatalogItem:
    """Build a catalog item with filler metadata."""
    fields = {
        "id": item_id,
        "name": f"Item {item_id}",
        "category": "Tops",
        "color": "Black",
        "style": "Classic",
        "gender": "Unisex",
        "description": description,
    }
    fields.update(overrides)
    return CatalogItem(**fields)


def encode_image(fmt: str = "JPEG", size=(32, 32), color=(200, 30, 30)) -> bytes:
    """Encode a solid-color image in the given format."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def sample_jpeg_bytes() -> bytes:
    """Encoded 32x32 JPEG image."""
    return encode_image("JPEG")


@pytest.fixture
def sample_png_bytes() -> bytes:
    """Encoded 32x32 PNG image."""
    return encode_image("PNG")


@pytest.fixture
def abc_catalog() -> Catalog:
    """Three-item catalog: A along x, B along y, C close to A."""
    return Catalog([
        make_item("A", "desc A"),
        make_item("B", "desc B"),
        make_item("C", "desc C"),
    ])


@pytest.fixture
def abc_vectors() -> Dict[str, List[float]]:
    """Description and suggestion embeddings matching abc_catalog."""
    return {
        "desc A": [1.0, 0.0],
        "desc B": [0.0, 1.0],
        "desc C": [0.9, 0.1],
        "White Canvas Sneakers": [1.0, 0.0],
        "Red Silk Scarf": [-1.0, 0.0],
    }


@pytest.fixture
def vision_reply() -> str:
    """Well-formed vision model reply with two suggestions."""
    return (
        '{"items": ["White Canvas Sneakers", "Red Silk Scarf"], '
        '"category": "Jackets", "gender": "Women"}'
    )


@pytest.fixture
def matching_config() -> MatchingConfig:
    """Matching configuration used by pipeline tests."""
    return MatchingConfig(
        categories=["Jackets", "Sneakers", "Boots"],
        genders=["Men", "Women", "Unisex"],
        similarity_threshold=0.5,
        top_k=2,
    )


@pytest.fixture
def test_config(matching_config) -> AppConfig:
    """Application configuration with test matching settings."""
    return AppConfig(matching=matching_config, log_level="DEBUG")


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset the config singleton and config env vars between tests."""
    monkeypatch.delenv("STYLEMATCH_CONFIG", raising=False)
    reset_config()
    yield
    reset_config()
