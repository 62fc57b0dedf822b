"""
Replicate adapter for AI image generation.

The default model accepts an aspect ratio and a 1K/2K/4K resolution tier
directly. The synchronous Replicate client runs in a worker thread.
"""

import asyncio
import logging
from typing import Optional

import replicate
from replicate.exceptions import ReplicateError

from core.interfaces.services import ImageResult, ImageService
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

# Long edge in pixels for each resolution tier
RESOLUTIONS = {"1K": 1024, "2K": 2048, "4K": 4096}

ASPECT_RATIOS = {
    "1:1": (1, 1),
    "16:9": (16, 9),
    "9:16": (9, 16),
    "4:3": (4, 3),
    "3:4": (3, 4),
}


class ImageGenerationError(Exception):
    """Image generation failed; str(error) is shown to the admin."""


def image_dimensions(aspect_ratio: str, resolution: str) -> tuple[int, int]:
    """
    Pixel size for an aspect ratio / resolution pair.

    Raises:
        ValueError: for unsupported values, before any network call is made
    """
    if aspect_ratio not in ASPECT_RATIOS:
        raise ValueError(
            f"Unsupported aspect ratio {aspect_ratio!r}; choose one of {', '.join(ASPECT_RATIOS)}"
        )
    if resolution not in RESOLUTIONS:
        raise ValueError(
            f"Unsupported resolution {resolution!r}; choose one of {', '.join(RESOLUTIONS)}"
        )
    long_edge = RESOLUTIONS[resolution]
    w, h = ASPECT_RATIOS[aspect_ratio]
    if w >= h:
        return long_edge, round(long_edge * h / w)
    return round(long_edge * w / h), long_edge


class ReplicateImageService(ImageService):
    """AI image generation service using Replicate."""

    def __init__(self, api_token: Optional[str] = None, model: Optional[str] = None):
        api_token = api_token if api_token is not None else settings.replicate_api_token
        self._model = model or settings.replicate_model
        if not api_token:
            logger.warning("REPLICATE_API_TOKEN not set; image generation will use mock mode")
            self._client = None
        else:
            self._client = replicate.Client(api_token=api_token)
            logger.info("Replicate client initialized with model: %s", self._model)

    @property
    def is_available(self) -> bool:
        return self._client is not None

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
        resolution: str = "1K",
    ) -> ImageResult:
        """
        Generate an image from a text prompt.

        Args:
            prompt: Text description of the image to generate
            aspect_ratio: One of 1:1, 16:9, 9:16, 4:3, 3:4
            resolution: 1K, 2K or 4K

        Returns:
            ImageResult with URL and metadata
        """
        width, height = image_dimensions(aspect_ratio, resolution)
        prompt = (prompt or "").strip()
        if not prompt:
            raise ValueError("Image prompt is required")

        if not self._client:
            return self._mock_image(prompt, width, height, aspect_ratio, resolution)

        try:
            output = await asyncio.to_thread(self._run_model, prompt, aspect_ratio, resolution)
        except ReplicateError as e:
            logger.error("Replicate image generation failed: %s", e)
            raise ImageGenerationError(f"Image generation failed: {e}") from e

        # Replicate models return a URL string, a list of URLs, or a FileOutput
        if isinstance(output, list) and output:
            output = output[0]
        image_url = output.url if hasattr(output, "url") else str(output or "")
        if not image_url:
            raise ImageGenerationError("Image generation returned no image")

        logger.info("Generated image %s (%s, %s)", image_url, aspect_ratio, resolution)
        return ImageResult(
            url=str(image_url),
            width=width,
            height=height,
            prompt=prompt,
            aspect_ratio=aspect_ratio,
            resolution=resolution,
        )

    def _run_model(self, prompt: str, aspect_ratio: str, resolution: str):
        """Run the Replicate model synchronously (called in a worker thread)."""
        logger.info(
            "Calling Replicate model %s with aspect_ratio=%s, resolution=%s",
            self._model,
            aspect_ratio,
            resolution,
        )
        return self._client.run(
            self._model,
            input={
                "prompt": prompt,
                "aspect_ratio": aspect_ratio,
                "resolution": resolution,
            },
        )

    def _mock_image(
        self,
        prompt: str,
        width: int,
        height: int,
        aspect_ratio: str,
        resolution: str,
    ) -> ImageResult:
        """Placeholder image from picsum.photos for development."""
        return ImageResult(
            url=f"https://picsum.photos/{width}/{height}",
            width=width,
            height=height,
            prompt=prompt,
            aspect_ratio=aspect_ratio,
            resolution=resolution,
        )


# Singleton instance
image_ai_service = ReplicateImageService()
