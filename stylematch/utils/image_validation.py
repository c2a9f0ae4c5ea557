"""Upload validation for images sent to the vision model."""

import io

from PIL import Image, UnidentifiedImageError

from stylematch.utils.exceptions import InvalidImageError
from stylematch.utils.logger import get_logger

logger = get_logger(__name__)

MAX_FILE_SIZE_MB = 5

SUPPORTED_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}


def validate_image_bytes(data: bytes, max_size_mb: float = MAX_FILE_SIZE_MB) -> str:
    """Validate raw image bytes before they are sent upstream.

    Args:
        data: Encoded image file contents
        max_size_mb: Upper bound on the payload size

    Returns:
        MIME type matching the detected format

    Raises:
        InvalidImageError: If the payload is empty, too large, corrupted
            or in an unsupported format
    """
    if not data:
        raise InvalidImageError("Image is empty", reason="empty")

    size_mb = len(data) / (1024 * 1024)
    if size_mb > max_size_mb:
        raise InvalidImageError(
            f"Image too large: {size_mb:.1f}MB (max {max_size_mb}MB)",
            reason="too_large",
        )

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageError(f"Corrupted or invalid image: {e}", reason="unreadable") from e

    if image_format not in SUPPORTED_FORMATS:
        raise InvalidImageError(
            f"Unsupported format: {image_format} (supported: {', '.join(SUPPORTED_FORMATS)})",
            reason="unsupported_format",
        )

    logger.debug(f"Image validation passed: {image_format}, {size_mb:.2f}MB")
    return SUPPORTED_FORMATS[image_format]
