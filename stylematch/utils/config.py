"""StyleMatch settings: pydantic v2 models loaded from a YAML file.

Every section has defaults, so an empty file (or no file, when callers
build AppConfig() directly) gives a working configuration.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from stylematch.utils.exceptions import ConfigError


DEFAULT_CATEGORIES = [
    "Shirts", "Jeans", "Dresses", "Skirts", "Jackets", "Blazers",
    "Tops", "Pants", "Shoes", "Sneakers", "Boots", "Sandals",
    "Accessories", "Bags", "Watches", "Sunglasses",
]

DEFAULT_GENDERS = ["Men", "Women", "Boys", "Girls", "Unisex"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _validate_vocabulary(name: str, values: list[str]) -> list[str]:
    """Strip entries and reject empty or duplicate vocabularies."""
    cleaned = [value.strip() for value in values]
    if not cleaned or any(not value for value in cleaned):
        raise ValueError(f"{name} must be a non-empty list of non-blank strings")
    folded = [value.casefold() for value in cleaned]
    if len(set(folded)) != len(folded):
        raise ValueError(f"{name} must not contain duplicates")
    return cleaned


class ModelConfig(BaseModel):
    """Configuration for the vision and embedding models."""

    vision_model: str = Field(default="gpt-4o-mini", description="Vision-capable chat model")
    embedding_model: str = Field(default="text-embedding-3-large", description="Text embedding model")
    max_tokens: int = Field(default=500, ge=1, description="Completion budget for the vision call")
    embedding_dimensions: Optional[int] = Field(
        default=None, ge=1, description="Requested embedding size (model default when unset)"
    )


class MatchingConfig(BaseModel):
    """Vocabularies and ranking parameters for one analysis."""

    categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    genders: list[str] = Field(default_factory=lambda: list(DEFAULT_GENDERS))
    similarity_threshold: float = Field(default=0.5, ge=-1.0, le=1.0, description="Minimum cosine similarity")
    top_k: int = Field(default=3, ge=1, description="Matches kept per suggested item")

    @field_validator('categories')
    @classmethod
    def validate_categories(cls, v: list[str]) -> list[str]:
        """Ensure categories form a usable closed vocabulary."""
        return _validate_vocabulary("categories", v)

    @field_validator('genders')
    @classmethod
    def validate_genders(cls, v: list[str]) -> list[str]:
        """Ensure genders form a usable closed vocabulary."""
        return _validate_vocabulary("genders", v)


class ApiConfig(BaseModel):
    """HTTP client settings for the model provider."""

    base_url: Optional[str] = Field(default=None, description="Override for the provider base URL")
    timeout_seconds: float = Field(default=30.0, gt=0.0, description="Per-request timeout")
    max_retries: int = Field(default=0, ge=0, description="Client-level retries (0 = single attempt)")


class ConcurrencyConfig(BaseModel):
    """Bounds on outbound model calls."""

    max_concurrent_requests: int = Field(default=8, ge=1, description="Simultaneous model calls")


class CatalogConfig(BaseModel):
    """Catalog source and embedding cache settings."""

    path: Optional[str] = Field(default=None, description="JSON/YAML catalog file (built-in set when unset)")
    embedding_cache_path: Optional[str] = Field(default=None, description="JSON file for catalog vectors")
    precompute: bool = Field(default=False, description="Embed the catalog before the first request")


class AppConfig(BaseModel):
    """Root configuration model containing all sub-configurations."""

    models: ModelConfig = Field(default_factory=ModelConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING, ERROR or CRITICAL")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize to upper case and reject unknown levels."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level


_config: Optional[AppConfig] = None


def _default_config_path() -> Path:
    """STYLEMATCH_CONFIG if set, else config/config.yaml at the project root."""
    env_path = os.environ.get('STYLEMATCH_CONFIG')
    if env_path:
        return Path(env_path)
    return Path(__file__).resolve().parents[2] / "config" / "config.yaml"


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """Read and validate a YAML configuration file.

    An empty file yields the defaults.

    Raises:
        ConfigError: If the file is missing, is not valid YAML or fails validation
    """
    path = Path(config_path) if config_path is not None else _default_config_path()

    if not path.exists():
        raise ConfigError(
            f"Configuration file not found: {path}. "
            f"Pass --config or set the STYLEMATCH_CONFIG environment variable.",
            path=str(path),
        )

    try:
        raw = yaml.safe_load(path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse YAML: {e}", path=str(path)) from e

    try:
        return AppConfig.model_validate(raw or {})
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}", path=str(path)) from e


def get_config(config_path: Optional[Path | str] = None, reload: bool = False) -> AppConfig:
    """Return the process-wide configuration, loading it on first use.

    ``config_path`` is only read when nothing is cached yet or ``reload`` is set.
    """
    global _config
    if reload or _config is None:
        _config = load_config(config_path)
    return _config


def reset_config() -> None:
    """Forget the cached configuration."""
    global _config
    _config = None
