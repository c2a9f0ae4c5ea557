"""Configuration, logging, error types and upload validation."""

from .config import AppConfig, MatchingConfig, get_config, load_config, reset_config
from .exceptions import (
    ConfigError,
    InvalidImageError,
    ParseError,
    StyleMatchError,
    UpstreamError,
    ValidationError,
)
from .image_validation import validate_image_bytes
from .logger import (
    get_logger,
    log_exception,
    log_execution_time,
    log_performance,
    set_package_log_level,
)

__all__ = [
    "AppConfig",
    "MatchingConfig",
    "get_config",
    "load_config",
    "reset_config",
    "StyleMatchError",
    "ConfigError",
    "UpstreamError",
    "ParseError",
    "ValidationError",
    "InvalidImageError",
    "validate_image_bytes",
    "get_logger",
    "log_exception",
    "log_execution_time",
    "log_performance",
    "set_package_log_level",
]
