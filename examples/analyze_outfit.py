"""Example usage of the StyleMatchPipeline.

This script analyses one photo against the built-in catalog, then
again against a catalog file with a persisted embedding cache.

Requires OPENAI_API_KEY in the environment.
"""

import asyncio
import os
import sys
from pathlib import Path

from stylematch.core import StyleMatchPipeline, get_fallback_recommendations
from stylematch.infrastructure.catalog import load_catalog
from stylematch.utils.config import AppConfig, CatalogConfig


def print_response(response):
    """Print an AnalysisResponse in a readable layout."""
    if not response.success:
        print(f"  Failed ({response.error_type}): {response.error}")
        print("  Fallback suggestions:")
        for rec in get_fallback_recommendations():
            print(f"    {rec.category}: {', '.join(rec.items)}")
        return

    analysis = response.analysis
    print(f"  Category: {analysis.category}")
    print(f"  Gender:   {analysis.gender}")
    for result in response.recommendations:
        print(f"\n  {result.recommended_item}")
        if not result.matches:
            print("    (no catalog match)")
        for item in result.matches:
            print(f"    - {item.name} [{item.id}]")


async def run_twice(pipeline, image_bytes):
    """Warm the catalog up, then serve two requests in one event loop."""
    await pipeline.warm_up()
    first = await pipeline.analyze_async(image_bytes)
    second = await pipeline.analyze_async(image_bytes)
    return first, second


def main():
    """Run example analyses."""
    if len(sys.argv) < 2:
        print("Usage: python examples/analyze_outfit.py path/to/photo.jpg")
        return 1

    api_key = os.environ.get("OPENAI_API_KEY", "")
    if not api_key:
        print("Set OPENAI_API_KEY to run this example")
        return 1

    image_bytes = Path(sys.argv[1]).read_bytes()

    # Example 1: Built-in catalog, default settings
    print("=" * 60)
    print("Example 1: Built-in catalog")
    print("=" * 60)

    pipeline = StyleMatchPipeline.from_openai(api_key)
    print_response(pipeline.analyze(image_bytes))
    print()

    # Example 2: Catalog file with cached embeddings
    print("=" * 60)
    print("Example 2: Catalog file + embedding cache")
    print("=" * 60)

    catalog_path = Path("data/catalog.example.json")
    config = AppConfig(
        matching={"similarity_threshold": 0.4, "top_k": 2},
        catalog=CatalogConfig(embedding_cache_path="data/catalog_embeddings.json"),
    )
    pipeline = StyleMatchPipeline.from_openai(api_key, config=config, catalog=load_catalog(catalog_path))

    first, second = asyncio.run(run_twice(pipeline, image_bytes))
    print_response(first)
    print(f"\nSecond request reused {len(pipeline.catalog)} catalog vectors: {second.success}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
