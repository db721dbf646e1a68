"""Offline capability that lets the UI exercise every flow without Gemini."""

import io
import json
from typing import List, Optional, Sequence, Tuple

from PIL import Image

from studio.config.mock import Mock
from studio.models.image import ContentPart, ImagePayload
from studio.utility.data_url import payload_bytes
from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

MOCK_SIZES = {
    "1:1": (512, 512),
    "16:9": (768, 432),
    "9:16": (432, 768),
    "4:3": (640, 480),
    "3:4": (480, 640),
}


class MockCapability:
    """
    Mock version of the Gemini capability.

    Does NOT call any external API. Generation draws a flat PNG, editing
    hands back the first input image, and text calls return canned copy.
    """

    def __init__(self, color: Tuple[int, int, int] = (64, 96, 160)):
        self.color = color
        self.mock = Mock()

    def _render_png(self, aspect_ratio: str) -> bytes:
        size = MOCK_SIZES.get(aspect_ratio, MOCK_SIZES["1:1"])
        buf = io.BytesIO()
        Image.new("RGB", size, self.color).save(buf, format="PNG")
        return buf.getvalue()

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str,
        count: int = 1,
        output_format: str = "image/png",
    ) -> List[bytes]:
        logger.info("Running mock generate_image (no external API call).")
        return [self._render_png(aspect_ratio) for _ in range(count)]

    async def edit_images(
        self, prompt: str, images: Sequence[ImagePayload]
    ) -> List[ContentPart]:
        logger.info("Running mock edit_images (no external API call).")
        if not images:
            return []
        base = images[0]
        return [
            ContentPart(text=f"Mock edit: {prompt}"),
            ContentPart(data=payload_bytes(base), mime_type=base.mime_type),
        ]

    async def analyze_image_for_suggestions(self, image: ImagePayload) -> str:
        return json.dumps(self.mock.MOCK_SUGGESTIONS)

    async def refine_text_prompt(
        self, text: str, style_image: Optional[ImagePayload] = None
    ) -> str:
        if style_image is not None:
            return self.mock.MOCK_STYLE_REFINED_PROMPT
        return self.mock.MOCK_REFINED_PROMPT
