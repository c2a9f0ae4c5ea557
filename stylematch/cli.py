"""Command-line interface for outfit analysis.

Usage:
    stylematch path/to/jacket.jpg
    python -m stylematch.cli path/to/jacket.jpg --top-k 5 --fallback
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from stylematch.core.fallback import get_fallback_recommendations
from stylematch.core.pipeline import StyleMatchPipeline
from stylematch.infrastructure.catalog import resolve_catalog
from stylematch.utils import get_config, get_logger, set_package_log_level
from stylematch.utils.config import AppConfig, MatchingConfig
from stylematch.utils.exceptions import ConfigError, StyleMatchError

logger = get_logger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Suggest complementary items for a clothing photo and match them to a catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyse a photo with the built-in catalog
  stylematch photos/leather_jacket.jpg

  # Custom catalog, looser threshold, cached catalog embeddings
  stylematch photo.png --catalog data/catalog.json --threshold 0.4 \\
      --embedding-cache data/catalog_embeddings.json

  # Print static suggestions if analysis fails
  stylematch photo.jpg --fallback
        """
    )

    parser.add_argument(
        'image',
        type=Path,
        help='Path to a JPEG, PNG or WEBP photo of one clothing item'
    )

    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to configuration file (default: built-in defaults unless STYLEMATCH_CONFIG is set)'
    )

    parser.add_argument(
        '--catalog',
        type=Path,
        default=None,
        help='JSON/YAML catalog file (overrides config)'
    )

    parser.add_argument(
        '--api-key',
        type=str,
        default=None,
        help='OpenAI API key (default: OPENAI_API_KEY environment variable)'
    )

    parser.add_argument(
        '--threshold',
        type=float,
        default=None,
        help='Minimum cosine similarity for a match (overrides config)'
    )

    parser.add_argument(
        '--top-k',
        type=int,
        default=None,
        help='Matches kept per suggested item (overrides config)'
    )

    parser.add_argument(
        '--embedding-cache',
        type=Path,
        default=None,
        help='JSON file used to persist catalog embeddings between runs'
    )

    parser.add_argument(
        '--fallback',
        action='store_true',
        help='Include static fallback suggestions when analysis fails'
    )

    parser.add_argument(
        '--output',
        type=Path,
        default=None,
        help='Write the JSON result to this file instead of stdout'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Override log level'
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration and apply command-line overrides."""
    if args.config is not None or os.environ.get('STYLEMATCH_CONFIG'):
        config = get_config(args.config)
    else:
        config = AppConfig()

    overrides: Dict[str, Any] = {}
    if args.threshold is not None:
        overrides["similarity_threshold"] = args.threshold
    if args.top_k is not None:
        overrides["top_k"] = args.top_k
    if overrides:
        try:
            matching = MatchingConfig.model_validate({**config.matching.model_dump(), **overrides})
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid command-line override: {e}") from e
        config = config.model_copy(update={"matching": matching})

    if args.embedding_cache is not None:
        catalog_cfg = config.catalog.model_copy(update={"embedding_cache_path": str(args.embedding_cache)})
        config = config.model_copy(update={"catalog": catalog_cfg})

    return config


async def run_analysis(pipeline: StyleMatchPipeline, image_bytes: bytes, precompute: bool) -> Dict[str, Any]:
    """Run one analysis inside a single event loop."""
    if precompute:
        await pipeline.warm_up()
    response = await pipeline.analyze_async(image_bytes)
    return response.to_dict()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)

    try:
        config = build_config(args)

        log_level = args.log_level or config.log_level
        set_package_log_level(log_level)
        logger.debug(f"Log level set to {log_level}")

        api_key = args.api_key or os.environ.get('OPENAI_API_KEY', '')
        catalog = resolve_catalog(args.catalog or config.catalog.path)

        if not args.image.exists():
            logger.error(f"Image not found: {args.image}")
            return 1
        image_bytes = args.image.read_bytes()

        pipeline = StyleMatchPipeline.from_openai(api_key, config=config, catalog=catalog)
        result = asyncio.run(run_analysis(pipeline, image_bytes, config.catalog.precompute))

    except StyleMatchError as e:
        logger.error(f"Analysis could not start: {e}")
        result = {"success": False, "error": e.message, "errorType": e.__class__.__name__, "errorCode": e.code}
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130

    if not result["success"] and args.fallback:
        result["fallbackRecommendations"] = [rec.to_dict() for rec in get_fallback_recommendations()]

    output = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output + "\n", encoding='utf-8')
        logger.info(f"Result written to {args.output}")
    else:
        print(output)

    return 0 if result["success"] else 1


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
