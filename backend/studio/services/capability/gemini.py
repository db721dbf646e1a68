"""Gemini-backed implementation of the generative capability."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from google import genai
from google.genai import types

from studio.config.settings import Settings
from studio.models.image import ContentPart, ImagePayload
from studio.utility.data_url import payload_bytes
from studio.utility.logger import AppLogger
from studio.utility.utils import Helper

logger = AppLogger.get_logger(__name__)


class GeminiCapability:
    """Talks to Imagen and Gemini through the async ``google.genai`` client.

    The client is created on first use from the configured API key, or injected.
    Failures are left to propagate; the orchestrator normalizes them.
    Prompt instructions come from the YAML templates.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[Any] = None,
        helper: Optional[Helper] = None,
    ):
        """Keep settings and collaborators; no network access happens here."""
        self.settings = settings
        self._client = client
        self.utility = helper or Helper()

    def _get_client(self) -> Any:
        """Return the cached Gemini client, creating it from the API key if needed."""
        if self._client is None:
            if not self.settings.gemini_api_key:
                raise RuntimeError(
                    "Gemini API key not found. Set GEMINI_API_KEY in the environment or .env file."
                )
            self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    @staticmethod
    def _image_part(image: ImagePayload) -> types.Part:
        """Wrap a payload as an inline-data part."""
        return types.Part.from_bytes(data=payload_bytes(image), mime_type=image.mime_type)

    @staticmethod
    def _first_candidate_parts(resp: Any) -> List[Any]:
        """Return the parts of the first candidate, or an empty list."""
        candidates = getattr(resp, "candidates", None) or []
        if not candidates:
            return []
        content = getattr(candidates[0], "content", None)
        return list(getattr(content, "parts", None) or [])

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str,
        count: int = 1,
        output_format: str = "image/png",
    ) -> List[bytes]:
        """Generate images with Imagen and return their raw bytes."""
        client = self._get_client()
        logger.info(f"Generating {count} image(s) with {self.settings.image_model}")
        resp = await client.aio.models.generate_images(
            model=self.settings.image_model,
            prompt=prompt,
            config=types.GenerateImagesConfig(
                number_of_images=count,
                output_mime_type=output_format,
                aspect_ratio=aspect_ratio,
            ),
        )

        images: List[bytes] = []
        for generated in getattr(resp, "generated_images", None) or []:
            image = getattr(generated, "image", None)
            data = getattr(image, "image_bytes", None)
            if data:
                images.append(data)
        return images

    async def edit_images(
        self, prompt: str, images: Sequence[ImagePayload]
    ) -> List[ContentPart]:
        """Send the images followed by the instruction and return the reply parts."""
        client = self._get_client()
        parts = [self._image_part(image) for image in images]
        parts.append(types.Part(text=prompt))

        logger.info(f"Editing {len(images)} image(s) with {self.settings.edit_model}")
        resp = await client.aio.models.generate_content(
            model=self.settings.edit_model,
            contents=types.Content(role="user", parts=parts),
            config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
        )

        result: List[ContentPart] = []
        for part in self._first_candidate_parts(resp):
            inline = getattr(part, "inline_data", None)
            result.append(
                ContentPart(
                    text=getattr(part, "text", None),
                    data=getattr(inline, "data", None) if inline else None,
                    mime_type=getattr(inline, "mime_type", None) if inline else None,
                )
            )
        return result

    async def analyze_image_for_suggestions(self, image: ImagePayload) -> str:
        """Ask Gemini for a JSON array of photoshoot prompts for the product."""
        client = self._get_client()
        instruction = self.utility.render_template("suggestions")

        resp = await client.aio.models.generate_content(
            model=self.settings.text_model,
            contents=types.Content(
                role="user",
                parts=[self._image_part(image), types.Part(text=instruction)],
            ),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=types.Schema(
                    type=types.Type.ARRAY,
                    items=types.Schema(type=types.Type.STRING),
                ),
            ),
        )
        return (getattr(resp, "text", None) or "").strip()

    async def refine_text_prompt(
        self, text: str, style_image: Optional[ImagePayload] = None
    ) -> str:
        """Translate and refine ``text``; with a style image, borrow its look."""
        client = self._get_client()

        if style_image is not None:
            instruction = self.utility.render_template("style_refine", user_text=text)
            contents: Any = types.Content(
                role="user",
                parts=[types.Part(text=instruction), self._image_part(style_image)],
            )
        else:
            contents = self.utility.render_template("refine", user_text=text)

        resp = await client.aio.models.generate_content(
            model=self.settings.text_model,
            contents=contents,
        )
        return (getattr(resp, "text", None) or "").strip()
