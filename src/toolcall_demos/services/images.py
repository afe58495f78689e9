"""Text-to-image generation via the OpenAI images API."""

import logging

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class ImageGenerationService:
    """Generates images from text prompts.

    Attributes:
        model: Image model name (e.g. "dall-e-3")
    """

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        self._client = client
        self.model = model

    async def generate_image(self, prompt: str, width: int, height: int) -> str:
        """Generate one image and return its URL.

        Raises:
            openai.OpenAIError: If the API request fails
            RuntimeError: If the API returned no image URL
        """
        logger.info(f"Generating {width}x{height} image with model {self.model}")
        response = await self._client.images.generate(
            model=self.model,
            prompt=prompt,
            size=f"{width}x{height}",
            n=1,
        )

        url = response.data[0].url if response.data else None
        if not url:
            raise RuntimeError("Image API returned no image URL")
        return url

    async def close(self) -> None:
        await self._client.close()
