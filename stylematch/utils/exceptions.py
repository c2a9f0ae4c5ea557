"""
Error types raised by the StyleMatch pipeline.

Request-level failures (a model call that fails, a reply that cannot be
parsed, a value outside its vocabulary, a bad upload) all derive from
StyleMatchError, which is what the analysis use case turns into a failed
AnalysisResponse. ConfigError signals a broken setup rather than a bad
request.

Every error carries a message, a stable code and a context dict, and
serializes with to_dict() for structured logs.

Example:
    >>> from stylematch.utils.exceptions import UpstreamError
    >>> raise UpstreamError("Embedding call failed", service="embedding", status_code=503)
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Sequence

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _with_entries(context: Optional[Dict[str, Any]], **entries: Any) -> Dict[str, Any]:
    """Copy context and add the entries that are set."""
    merged = dict(context or {})
    merged.update({key: value for key, value in entries.items() if value is not None})
    return merged


class StyleMatchError(Exception):
    """
    Root of the StyleMatch error hierarchy.

    Attributes:
        message: Human-readable error description.
        code: Stable identifier for programmatic handling
            (UPPER_SNAKE_CASE class name unless given).
        context: Extra debugging details.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or _CAMEL_BOUNDARY.sub("_", type(self).__name__).upper()
        self.context = dict(context or {})

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}" if self.code else self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "context": self.context,
        }


class ConfigError(StyleMatchError):
    """Configuration or catalog file is missing, unreadable or invalid."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="CONFIG_ERROR", context=_with_entries(context, path=path))


# --------------------------------------------
# Request errors
# --------------------------------------------


class UpstreamError(StyleMatchError):
    """
    A vision or embedding call failed in transport.

    Covers connection errors, timeouts and non-2xx HTTP responses.
    Never retried inside the pipeline.

    Example:
        >>> raise UpstreamError("Embedding API error (503)", service="embedding", status_code=503)
    """

    def __init__(
        self,
        message: str = "Upstream model request failed",
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(
            message,
            code="UPSTREAM_ERROR",
            context=_with_entries(context, service=service, status_code=status_code),
        )


class ParseError(StyleMatchError):
    """
    Model output is not JSON, or not the expected shape.

    Only the first 200 characters of the raw output are kept.
    """

    def __init__(
        self,
        message: str = "Could not parse model output",
        raw_output: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        snippet = raw_output[:200] if raw_output is not None else None
        super().__init__(message, code="PARSE_ERROR", context=_with_entries(context, raw_output=snippet))


class ValidationError(StyleMatchError):
    """
    A value is outside its allowed set, or input is unusable.

    Example:
        >>> raise ValidationError(
        ...     "Category 'Shoes' is not allowed",
        ...     field="category",
        ...     value="Shoes",
        ...     allowed=["Sneakers", "Boots"],
        ... )
    """

    def __init__(
        self,
        message: str = "Invalid value",
        field: Optional[str] = None,
        value: Any = None,
        allowed: Optional[Sequence[str]] = None,
        code: str = "VALIDATION_ERROR",
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            code=code,
            context=_with_entries(
                context,
                field=field or None,
                value=str(value)[:100] if value is not None else None,
                allowed=list(allowed) if allowed is not None else None,
            ),
        )


class InvalidImageError(ValidationError):
    """Uploaded image is empty, too large, unreadable or in an unsupported format."""

    def __init__(
        self,
        message: str = "Invalid image",
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message, field="image", code="INVALID_IMAGE", context=_with_entries(context, reason=reason)
        )
