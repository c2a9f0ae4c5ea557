"""
Recommendation results returned to the caller of the analysis pipeline.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from stylematch.domain.entities.catalog_item import CatalogItem
from stylematch.domain.entities.image_analysis import ImageAnalysis


@dataclass(frozen=True)
class MatchResult:
    """Catalog matches for one suggested item, best match first."""

    recommended_item: str
    matches: Tuple[CatalogItem, ...] = ()

    def __post_init__(self) -> None:
        # Output items never carry their embedding
        object.__setattr__(
            self, "matches", tuple(item.without_embedding() for item in self.matches)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendedItem": self.recommended_item,
            "matches": [item.to_dict() for item in self.matches],
        }


@dataclass(frozen=True)
class AnalysisResponse:
    """
    Outcome of one analysis request.

    A successful response has one MatchResult per suggested item, in the
    order of ``analysis.items``. A failed response carries no
    recommendations and names what failed.
    """

    analysis: Optional[ImageAnalysis]
    recommendations: Tuple[MatchResult, ...] = ()
    success: bool = True
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_code: Optional[str] = None

    def __post_init__(self) -> None:
        """Enforce the success/failure invariants."""
        object.__setattr__(self, "recommendations", tuple(self.recommendations))
        if self.success:
            if self.error is not None:
                raise ValueError("A successful response cannot carry an error")
            if self.analysis is None:
                raise ValueError("A successful response requires an analysis")
            if len(self.recommendations) != len(self.analysis.items):
                raise ValueError(
                    f"Expected {len(self.analysis.items)} recommendations, "
                    f"got {len(self.recommendations)}"
                )
        else:
            if self.recommendations:
                raise ValueError("A failed response cannot carry recommendations")
            if not self.error:
                raise ValueError("A failed response requires an error message")

    @classmethod
    def succeeded(
        cls,
        analysis: ImageAnalysis,
        recommendations: Sequence[MatchResult],
    ) -> "AnalysisResponse":
        return cls(analysis=analysis, recommendations=tuple(recommendations), success=True)

    @classmethod
    def failed(cls, error: Exception) -> "AnalysisResponse":
        """Build a failed response from the exception that ended the request."""
        message = getattr(error, "message", None) or str(error) or error.__class__.__name__
        return cls(
            analysis=None,
            recommendations=(),
            success=False,
            error=message,
            error_type=error.__class__.__name__,
            error_code=getattr(error, "code", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape consumed by the UI."""
        payload: Dict[str, Any] = {"success": self.success}
        if self.analysis is not None:
            payload["analysis"] = self.analysis.to_dict()
        if self.success:
            payload["recommendations"] = [result.to_dict() for result in self.recommendations]
        else:
            payload["error"] = self.error
            payload["errorType"] = self.error_type
            if self.error_code:
                payload["errorCode"] = self.error_code
        return payload
