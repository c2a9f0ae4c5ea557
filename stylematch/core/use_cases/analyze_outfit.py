# Analyze Outfit Use Case
"""
Use case for turning a garment photo into ranked catalog matches.

Describes the image, embeds every suggested item, ranks the catalog
against each item and assembles one MatchResult per suggestion.
"""
import asyncio
from typing import List, Optional

from stylematch.core.catalog_index import CatalogEmbeddingIndex
from stylematch.core.embedding_client import EmbeddingClient
from stylematch.core.scoring.ranker import SimilarityRanker
from stylematch.core.vision_describer import VisionDescriber
from stylematch.domain.entities.image_analysis import ImageAnalysis
from stylematch.domain.entities.recommendation import AnalysisResponse, MatchResult
from stylematch.utils.exceptions import StyleMatchError
from stylematch.utils.image_validation import MAX_FILE_SIZE_MB, validate_image_bytes
from stylematch.utils.logger import get_logger, log_exception, log_execution_time

logger = get_logger(__name__)


class AnalyzeOutfitUseCase:
    """
    Use case for analysing one outfit photo.

    This use case:
    1. Validates the image and asks the vision model for complementary items
    2. Ensures catalog embeddings exist (computed once, shared by all items)
    3. Embeds the suggested items concurrently
    4. Ranks the catalog for each item, preserving suggestion order

    Any StyleMatchError ends the request with a failed AnalysisResponse;
    partial results are never returned.
    """

    def __init__(
        self,
        describer: VisionDescriber,
        embedding_client: EmbeddingClient,
        catalog_index: CatalogEmbeddingIndex,
        ranker: Optional[SimilarityRanker] = None,
        max_image_size_mb: float = MAX_FILE_SIZE_MB,
    ):
        """
        Initialize the use case.

        Args:
            describer: Vision describer for the uploaded image.
            embedding_client: Client used for items and catalog descriptions.
            catalog_index: Catalog with (lazily computed) embeddings.
            ranker: Threshold/top-K ranker; defaults to 0.5 / 3.
            max_image_size_mb: Upload size limit.
        """
        self.describer = describer
        self.embedding_client = embedding_client
        self.catalog_index = catalog_index
        self.ranker = ranker or SimilarityRanker()
        self.max_image_size_mb = max_image_size_mb

    async def execute(self, image_bytes: bytes) -> AnalysisResponse:
        """
        Analyse an image and return ranked recommendations.

        Args:
            image_bytes: Encoded JPEG/PNG/WEBP file contents.

        Returns:
            AnalysisResponse; ``success`` is False when any step failed.
        """
        try:
            with log_execution_time(logger, "outfit analysis"):
                return await self._run(image_bytes)
        except StyleMatchError as e:
            log_exception(logger, "outfit analysis", e)
            return AnalysisResponse.failed(e)

    async def _run(self, image_bytes: bytes) -> AnalysisResponse:
        mime_type = validate_image_bytes(image_bytes, self.max_image_size_mb)

        analysis = await self.describer.describe(image_bytes, mime_type)

        # Catalog and item embeddings are independent
        _, item_vectors = await self._gather_all(
            self.catalog_index.ensure_embeddings(self.embedding_client),
            self.embedding_client.embed_many(list(analysis.items)),
        )

        recommendations = self._rank_items(analysis, item_vectors)

        logger.info(
            f"Built {len(recommendations)} recommendation sets "
            f"({sum(len(r.matches) for r in recommendations)} matches total)"
        )
        return AnalysisResponse.succeeded(analysis, recommendations)

    def _rank_items(self, analysis: ImageAnalysis, item_vectors) -> List[MatchResult]:
        candidates = self.catalog_index.candidates()
        results = []
        for item, vector in zip(analysis.items, item_vectors):
            matches = self.ranker.rank(vector, candidates)
            if not matches:
                logger.debug(f"No catalog match above threshold for '{item}'")
            results.append(MatchResult(recommended_item=item, matches=tuple(matches)))
        return results

    @staticmethod
    async def _gather_all(*aws):
        """Await all, cancelling the rest as soon as one fails."""
        tasks = [asyncio.ensure_future(aw) for aw in aws]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
