"""
OpenAI-backed vision and embedding models.

Wraps ``openai.AsyncOpenAI``. Credentials are passed in explicitly; this
module never reads API keys from the environment. Every SDK error is
translated into UpstreamError so callers see one failure type per
transport problem.

Example:
    >>> client = make_openai_client(api_key, ApiConfig())
    >>> vision = OpenAIVisionModel(client, model="gpt-4o-mini")
    >>> text = await vision.describe_image(prompt, image_bytes, "image/jpeg")
"""

from __future__ import annotations

import base64
from typing import Any, List, Optional

import openai
from openai import AsyncOpenAI

from stylematch.domain.interfaces.model_interface import EmbeddingModelInterface, VisionModelInterface
from stylematch.utils.config import ApiConfig, ModelConfig
from stylematch.utils.exceptions import ParseError, UpstreamError, ValidationError
from stylematch.utils.logger import get_logger

logger = get_logger(__name__)


def make_openai_client(api_key: str, config: Optional[ApiConfig] = None) -> AsyncOpenAI:
    """
    Create the async OpenAI client shared by both models.

    Args:
        api_key: OpenAI API key.
        config: Base URL, timeout and retry settings.

    Raises:
        ValidationError: If api_key is blank.
    """
    if not api_key or not api_key.strip():
        raise ValidationError("An OpenAI API key is required", field="api_key")

    config = config or ApiConfig()
    return AsyncOpenAI(
        api_key=api_key.strip(),
        base_url=config.base_url,
        timeout=config.timeout_seconds,
        max_retries=config.max_retries,
    )


def _to_upstream_error(service: str, error: openai.APIError) -> UpstreamError:
    """Translate an SDK error into UpstreamError."""
    status_code = getattr(error, "status_code", None)
    if isinstance(error, openai.APITimeoutError):
        message = f"{service.capitalize()} API timed out"
    elif isinstance(error, openai.APIConnectionError):
        message = f"{service.capitalize()} API connection failed: {error.message}"
    elif status_code is not None:
        message = f"{service.capitalize()} API error ({status_code}): {error.message}"
    else:
        message = f"{service.capitalize()} API error: {error.message}"
    return UpstreamError(message, service=service, status_code=status_code)


class OpenAIVisionModel(VisionModelInterface):
    """Vision model served by the OpenAI chat completions endpoint."""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o-mini", max_tokens: int = 500):
        self._client = client
        self._model = model
        self.max_tokens = max_tokens

    @property
    def model_name(self) -> str:
        return self._model

    async def describe_image(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        b64 = base64.b64encode(image_bytes).decode("utf-8")
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": f"data:{mime_type};base64,{b64}"},
                            },
                        ],
                    }
                ],
                max_tokens=self.max_tokens,
            )
        except openai.APIError as e:
            raise _to_upstream_error("vision", e) from e

        return _extract_message_text(response)


class OpenAIEmbeddingModel(EmbeddingModelInterface):
    """Embedding model served by the OpenAI embeddings endpoint."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "text-embedding-3-large",
        dimensions: Optional[int] = None,
    ):
        self._client = client
        self._model = model
        self.dimensions = dimensions

    @property
    def model_name(self) -> str:
        if self.dimensions:
            return f"{self._model}@{self.dimensions}"
        return self._model

    async def embed_text(self, text: str) -> List[float]:
        kwargs: dict[str, Any] = {"input": text, "model": self._model}
        if self.dimensions:
            kwargs["dimensions"] = self.dimensions

        try:
            response = await self._client.embeddings.create(**kwargs)
        except openai.APIError as e:
            raise _to_upstream_error("embedding", e) from e

        data = getattr(response, "data", None)
        if not data:
            raise ParseError("Embedding response contains no data")
        return list(data[0].embedding)


def _extract_message_text(response: Any) -> str:
    """Pull the assistant text out of a chat completion."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise ParseError("Vision response contains no choices")

    content = choices[0].message.content
    if not isinstance(content, str) or not content.strip():
        raise ParseError("Vision response contains no text", raw_output=str(content))
    return content


def build_openai_models(
    api_key: str,
    models: Optional[ModelConfig] = None,
    api: Optional[ApiConfig] = None,
) -> tuple[OpenAIVisionModel, OpenAIEmbeddingModel]:
    """Create vision and embedding models sharing one client."""
    models = models or ModelConfig()
    client = make_openai_client(api_key, api)
    vision = OpenAIVisionModel(client, model=models.vision_model, max_tokens=models.max_tokens)
    embedding = OpenAIEmbeddingModel(
        client, model=models.embedding_model, dimensions=models.embedding_dimensions
    )
    logger.debug(f"OpenAI models ready: vision={vision.model_name}, embedding={embedding.model_name}")
    return vision, embedding
