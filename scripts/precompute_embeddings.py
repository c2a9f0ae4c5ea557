#!/usr/bin/env python
"""
StyleMatch catalog embedding precompute script

Embeds every catalog description once and writes the embedding cache
file, so later runs start with a ready catalog:
1. Loading configuration and the catalog
2. Embedding all descriptions with the configured model
3. Writing the cache file
4. Checking self-similarity of the stored vectors

Usage:
    python scripts/precompute_embeddings.py --catalog data/catalog.example.json \
        --cache data/catalog_embeddings.json

    # API key from OPENAI_API_KEY unless given
    python scripts/precompute_embeddings.py --api-key sk-...
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
import time
from pathlib import Path

from stylematch.core import StyleMatchPipeline, cosine_similarity
from stylematch.infrastructure.catalog import resolve_catalog
from stylematch.utils.config import AppConfig, load_config
from stylematch.utils.exceptions import StyleMatchError


def print_header(text: str) -> None:
    """Print a formatted header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def print_status(name: str, status: str, ok: bool = True) -> None:
    """Print a status line with checkmark or cross."""
    icon = "✅" if ok else "❌"
    print(f"  {icon} {name}: {status}")


def main():
    """Precompute and cache catalog embeddings."""
    parser = argparse.ArgumentParser(description="Precompute StyleMatch catalog embeddings")
    parser.add_argument("--config", type=Path, default=None, help="Configuration file")
    parser.add_argument("--catalog", type=Path, default=None, help="Catalog file (default: from config)")
    parser.add_argument(
        "--cache",
        type=Path,
        default=Path("data/catalog_embeddings.json"),
        help="Embedding cache file to write",
    )
    parser.add_argument("--api-key", type=str, default=None, help="OpenAI API key")
    args = parser.parse_args()

    print_header("StyleMatch Catalog Precompute")

    # =========================================
    # Step 1: Configuration and catalog
    # =========================================
    print_header("Step 1: Configuration")

    try:
        config = load_config(args.config) if args.config else AppConfig()
        catalog_cfg = config.catalog.model_copy(update={"embedding_cache_path": str(args.cache)})
        config = config.model_copy(update={"catalog": catalog_cfg})
        catalog = resolve_catalog(args.catalog or config.catalog.path)

        print_status("Embedding model", config.models.embedding_model)
        print_status("Catalog", f"{len(catalog)} items")
        print_status("Cache file", str(args.cache))
    except StyleMatchError as e:
        print_status("Configuration", f"FAILED: {e}", ok=False)
        return 1

    # =========================================
    # Step 2: Embed catalog
    # =========================================
    print_header("Step 2: Embed Catalog")

    try:
        api_key = args.api_key or os.environ.get("OPENAI_API_KEY", "")
        pipeline = StyleMatchPipeline.from_openai(api_key, config=config, catalog=catalog)

        start = time.time()
        asyncio.run(pipeline.warm_up())
        elapsed = time.time() - start

        print_status("Catalog embedded", f"OK ({elapsed:.2f}s)")
    except StyleMatchError as e:
        print_status("Catalog embedding", f"FAILED: {e}", ok=False)
        return 1

    # =========================================
    # Step 3: Check stored vectors
    # =========================================
    print_header("Step 3: Verify Vectors")

    candidates = pipeline.catalog_index.candidates()
    dims = {vector.shape[0] for _, vector in candidates}
    print_status("Dimensions", ", ".join(str(d) for d in sorted(dims)), ok=len(dims) == 1)

    for item, vector in candidates[:3]:
        print_status(f"{item.id} self-similarity", f"{cosine_similarity(vector, vector):.4f}")

    written = args.cache.exists()
    print_status("Cache written", str(args.cache), ok=written)

    return 0 if written else 1


if __name__ == "__main__":
    sys.exit(main())
