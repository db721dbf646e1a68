"""Interface of the remote generative capability consumed by the studio."""

from typing import List, Optional, Protocol, Sequence

from studio.models.image import ContentPart, ImagePayload


class GenerativeCapability(Protocol):
    """
    Remote image generation, editing and analysis. Every call may fail with an
    arbitrary exception; callers normalize failures through MapExceptions.
    """

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str,
        count: int = 1,
        output_format: str = "image/png",
    ) -> List[bytes]:
        """Return raw bytes for each generated image (possibly none)."""
        ...

    async def edit_images(
        self, prompt: str, images: Sequence[ImagePayload]
    ) -> List[ContentPart]:
        """Return the reply's content parts; at most some carry image bytes."""
        ...

    async def analyze_image_for_suggestions(self, image: ImagePayload) -> str:
        """Return JSON text expected to hold an array of prompt strings."""
        ...

    async def refine_text_prompt(
        self, text: str, style_image: Optional[ImagePayload] = None
    ) -> str:
        """Return refined prompt text, styled after ``style_image`` when given."""
        ...
