"""OpenAI implementations of the model provider contracts."""

from stylematch.infrastructure.providers.openai_models import (
    OpenAIEmbeddingModel,
    OpenAIVisionModel,
    build_openai_models,
    make_openai_client,
)

__all__ = [
    "OpenAIEmbeddingModel",
    "OpenAIVisionModel",
    "build_openai_models",
    "make_openai_client",
]
