"""End-to-end outfit analysis pipeline.

This module wires the vision describer, embedding client, catalog index
and ranker into one object built from AppConfig: image bytes in,
AnalysisResponse out.
"""

import asyncio
import time
from pathlib import Path
from typing import Optional

from stylematch.core.catalog_index import CatalogEmbeddingIndex
from stylematch.core.embedding_client import EmbeddingClient
from stylematch.core.scoring.ranker import SimilarityRanker
from stylematch.core.use_cases.analyze_outfit import AnalyzeOutfitUseCase
from stylematch.core.vision_describer import VisionDescriber
from stylematch.domain.entities.catalog_item import Catalog
from stylematch.domain.entities.recommendation import AnalysisResponse
from stylematch.domain.interfaces.model_interface import EmbeddingModelInterface, VisionModelInterface
from stylematch.infrastructure.catalog import EmbeddingCache, resolve_catalog
from stylematch.infrastructure.providers import build_openai_models
from stylematch.utils.config import AppConfig
from stylematch.utils.exceptions import StyleMatchError
from stylematch.utils.logger import get_logger, log_performance

logger = get_logger(__name__)


class StyleMatchPipeline:
    """Stateful orchestrator shared across requests.

    Only the catalog embedding table is shared between requests; every
    other value lives for a single ``analyze`` call.
    """

    def __init__(
        self,
        vision_model: VisionModelInterface,
        embedding_model: EmbeddingModelInterface,
        catalog: Optional[Catalog] = None,
        config: Optional[AppConfig] = None,
    ):
        """Initialize pipeline from model providers.

        Args:
            vision_model: Provider for the image description call
            embedding_model: Provider for text embeddings
            catalog: Candidate items (catalog.path from config, else the built-in set)
            config: AppConfig instance (defaults when None)
        """
        self.config = config or AppConfig()
        self.catalog = catalog if catalog is not None else resolve_catalog(self.config.catalog.path)

        cache = None
        if self.config.catalog.embedding_cache_path:
            cache = EmbeddingCache(Path(self.config.catalog.embedding_cache_path), embedding_model.model_name)

        self.embedding_client = EmbeddingClient(
            embedding_model, max_concurrency=self.config.concurrency.max_concurrent_requests
        )
        self.catalog_index = CatalogEmbeddingIndex(self.catalog, cache=cache)
        self.use_case = AnalyzeOutfitUseCase(
            describer=VisionDescriber(vision_model, self.config.matching),
            embedding_client=self.embedding_client,
            catalog_index=self.catalog_index,
            ranker=SimilarityRanker.from_config(self.config.matching),
        )

        logger.info(
            f"Pipeline initialized: vision={vision_model.model_name}, "
            f"embedding={embedding_model.model_name}, catalog={len(self.catalog)} items, "
            f"threshold={self.config.matching.similarity_threshold}, top_k={self.config.matching.top_k}"
        )

    @classmethod
    def from_openai(
        cls,
        api_key: str,
        config: Optional[AppConfig] = None,
        catalog: Optional[Catalog] = None,
    ) -> "StyleMatchPipeline":
        """Build a pipeline backed by OpenAI models.

        Raises:
            ValidationError: If api_key is blank.
        """
        config = config or AppConfig()
        vision, embedding = build_openai_models(api_key, config.models, config.api)
        return cls(vision, embedding, catalog=catalog, config=config)

    async def warm_up(self) -> None:
        """Precompute catalog embeddings before serving requests.

        Raises:
            UpstreamError: If a catalog description fails to embed.
        """
        start = time.perf_counter()
        await self.catalog_index.ensure_embeddings(self.embedding_client)
        log_performance(logger, f"catalog warm-up ({len(self.catalog)} items)", time.perf_counter() - start)

    async def analyze_async(self, image_bytes: bytes) -> AnalysisResponse:
        """Analyse one image (coroutine form)."""
        return await self.use_case.execute(image_bytes)

    def analyze(self, image_bytes: bytes) -> AnalysisResponse:
        """Analyse one image from synchronous code."""
        return asyncio.run(self.analyze_async(image_bytes))


def analyze(
    image: bytes,
    catalog: Catalog,
    config: AppConfig,
    api_key: str,
) -> AnalysisResponse:
    """
    Analyse an outfit photo against a catalog with OpenAI models.

    Credentials are taken only from ``api_key``.

    Args:
        image: Encoded JPEG/PNG/WEBP bytes.
        catalog: Candidate items.
        config: Vocabularies, ranking parameters and model settings.
        api_key: OpenAI API key.

    Returns:
        AnalysisResponse with ``success`` False on any failure.
    """
    try:
        pipeline = StyleMatchPipeline.from_openai(api_key, config=config, catalog=catalog)
    except StyleMatchError as e:
        logger.error(f"Pipeline could not be built: {e}")
        return AnalysisResponse.failed(e)
    return pipeline.analyze(image)
