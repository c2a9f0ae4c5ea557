"""Vision describer: turns a garment photo into a typed ImageAnalysis.

The model is asked for a strict JSON object; the reply is stripped of any
markdown fence, validated with pydantic, and category/gender are checked
against the configured vocabularies.
"""

import json
import re
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from stylematch.domain.entities.image_analysis import ImageAnalysis
from stylematch.domain.interfaces.model_interface import VisionModelInterface
from stylematch.utils.config import MatchingConfig
from stylematch.utils.exceptions import ParseError, ValidationError
from stylematch.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)


class VisionPayload(BaseModel):
    """Shape the vision model must answer with."""

    model_config = ConfigDict(strict=True)

    items: list[str] = Field(..., min_length=1)
    category: str
    gender: str


def build_prompt(categories: Sequence[str], genders: Sequence[str]) -> str:
    """Build the instruction sent alongside the image."""
    return (
        'Given an image of an item of clothing, analyze the item and generate a JSON output '
        'with the following fields: "items", "category", and "gender".\n'
        'Use your understanding of fashion trends, styles, and gender preferences to provide '
        'accurate and relevant suggestions for how to complete the outfit.\n'
        'The items field should be a list of items that would go well with the item in the '
        'picture. Each item should be a short title of an item of clothing that contains the '
        'style, color, and gender of the item, with no extra prose.\n'
        f'The category must be chosen from this list: {json.dumps(list(categories))}.\n'
        f'The gender must be chosen from this list: {json.dumps(list(genders))}.\n'
        'Do not include the description of the item in the picture. Return only the JSON '
        'object. Do not wrap it in a ```json ``` block or any other markdown.\n\n'
        'Example Input: An image representing a black leather jacket.\n\n'
        'Example Output: {"items": ["Fitted White Women\'s T-shirt", "White Canvas Sneakers", '
        '"Women\'s Black Skinny Jeans"], "category": "Jackets", "gender": "Women"}'
    )


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    raw = (text or "").strip()
    match = _FENCE_RE.match(raw)
    if match:
        return match.group(1).strip()
    return raw


def _match_vocabulary(field: str, value: str, allowed: Sequence[str]) -> str:
    """Return the configured spelling of value, or raise ValidationError."""
    lookup = {option.casefold(): option for option in allowed}
    canonical = lookup.get(value.strip().casefold())
    if canonical is None:
        raise ValidationError(
            f"{field.capitalize()} '{value}' is not one of the allowed values",
            field=field,
            value=value,
            allowed=allowed,
        )
    return canonical


def parse_analysis(
    text: str,
    categories: Sequence[str],
    genders: Sequence[str],
) -> ImageAnalysis:
    """
    Parse the vision model reply into an ImageAnalysis.

    Args:
        text: Raw model reply.
        categories: Allowed category values.
        genders: Allowed gender values.

    Returns:
        Validated ImageAnalysis with category/gender in configured spelling.

    Raises:
        ParseError: Reply is not a JSON object of the expected shape.
        ValidationError: Category or gender is outside its vocabulary.
    """
    cleaned = strip_code_fence(text)
    if not cleaned:
        raise ParseError("Vision model returned an empty response", raw_output=text or "")

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse analysis result: {cleaned[:200]}")
        raise ParseError(f"Invalid analysis response format: {e.msg}", raw_output=text) from e

    try:
        payload = VisionPayload.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(
            f"Analysis response is missing or mistyped fields: {e.error_count()} error(s)",
            raw_output=text,
            context={"errors": [err["loc"] for err in e.errors()]},
        ) from e

    items = [item.strip() for item in payload.items if item.strip()]
    if not items:
        raise ParseError("Analysis response contains no usable items", raw_output=text)

    category = _match_vocabulary("category", payload.category, categories)
    gender = _match_vocabulary("gender", payload.gender, genders)

    return ImageAnalysis(items=tuple(items), category=category, gender=gender)


class VisionDescriber:
    """Runs the vision call and parses its reply."""

    def __init__(self, model: VisionModelInterface, config: Optional[MatchingConfig] = None):
        self.model = model
        self.config = config or MatchingConfig()
        self.prompt = build_prompt(self.config.categories, self.config.genders)

    async def describe(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> ImageAnalysis:
        """
        Describe complementary items for the garment in the image.

        Single attempt; UpstreamError from the model propagates unchanged.
        """
        with log_execution_time(logger, f"vision call ({self.model.model_name})"):
            reply = await self.model.describe_image(self.prompt, image_bytes, mime_type)

        analysis = parse_analysis(reply, self.config.categories, self.config.genders)
        logger.info(
            f"Image analysed: category={analysis.category}, gender={analysis.gender}, "
            f"{len(analysis.items)} suggested items"
        )
        return analysis
