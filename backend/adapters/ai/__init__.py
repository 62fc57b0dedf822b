# AI Adapters
# Anthropic, Replicate integrations

from .anthropic_adapter import (
    AnthropicContentService,
    ContentGenerationError,
    content_ai_service,
    placeholder_image,
)
from .replicate_adapter import (
    ImageGenerationError,
    ReplicateImageService,
    image_ai_service,
    image_dimensions,
)

__all__ = [
    "AnthropicContentService",
    "ContentGenerationError",
    "content_ai_service",
    "placeholder_image",
    "ReplicateImageService",
    "ImageGenerationError",
    "image_ai_service",
    "image_dimensions",
]
