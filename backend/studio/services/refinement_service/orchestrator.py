"""Sequences generative-capability calls for prompts, suggestions, generation and edits."""

from __future__ import annotations

from typing import Awaitable, List, Optional, Sequence, TypeVar

from studio.config.options import ASPECT_RATIOS
from studio.handlers.error_handler import (
    NO_EDITED_IMAGE,
    NO_IMAGE_GENERATED,
    NO_REFINED_PROMPT,
    EmptyResultError,
    MapExceptions,
    StudioError,
    ValidationError,
)
from studio.models.image import DataUrl, ImagePayload
from studio.models.refine import parse_suggestions
from studio.services.capability.base import GenerativeCapability
from studio.utility.data_url import encode_bytes
from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

T = TypeVar("T")


class PromptRefinementOrchestrator:
    """
    Turns user intent into capability calls: translate/refine text, restyle a
    prompt after a reference image, suggest prompts for a product photo,
    generate from text and edit from images.

    Every operation returns its value or raises exactly one StudioError. Remote
    failures and empty results go through the shared MapExceptions mapper.
    """

    def __init__(
        self,
        capability: GenerativeCapability,
        exceptions: Optional[MapExceptions] = None,
    ):
        self.capability = capability
        self.exceptions = exceptions or MapExceptions()

    async def _remote(self, call: Awaitable[T]) -> T:
        """Await a capability call, normalizing any non-studio failure."""
        try:
            return await call
        except StudioError:
            raise
        except Exception as e:
            raise self.exceptions.map_gemini_exception(e) from e

    def _empty(self, sentinel: str) -> StudioError:
        return self.exceptions.map_gemini_exception(EmptyResultError(message=sentinel))

    async def _refine(self, text: str, style_image: Optional[ImagePayload]) -> str:
        refined = await self._remote(
            self.capability.refine_text_prompt(text, style_image=style_image)
        )
        refined = (refined or "").strip()
        if not refined:
            raise self._empty(NO_REFINED_PROMPT)
        return refined

    async def translate_and_refine(self, free_text: str) -> str:
        """Translate free-form text to English and rewrite it as a product-photo prompt."""
        if not (free_text or "").strip():
            raise ValidationError("Please enter text to translate and refine.")
        logger.info("Translating and refining prompt")
        return await self._refine(free_text, None)

    async def refine_with_style_reference(
        self, suggestion_text: str, reference_image: Optional[ImagePayload]
    ) -> str:
        """Rewrite a suggestion so the scene matches the reference image's style."""
        if reference_image is None:
            raise ValidationError("A reference image is required to refine from style.")
        logger.info("Refining prompt from reference image style")
        return await self._refine(suggestion_text, reference_image)

    async def fetch_suggestions(self, product_image: Optional[ImagePayload]) -> List[str]:
        """Ask for photoshoot prompt ideas for the product image."""
        if product_image is None:
            raise ValidationError("Please upload a product image.")

        logger.info("Fetching prompt suggestions")
        raw = await self._remote(self.capability.analyze_image_for_suggestions(product_image))

        parsed = parse_suggestions(raw)
        if isinstance(parsed, StudioError):
            logger.error(f"Rejected suggestions reply: {parsed.details}")
            raise parsed
        if len(parsed) != 3:
            logger.warning(f"Expected 3 suggestions, got {len(parsed)}")
        return parsed

    async def generate(self, prompt: str, aspect_ratio: str, style: str) -> DataUrl:
        """Generate one PNG from text in the requested style and aspect ratio."""
        if not (prompt or "").strip():
            raise ValidationError("Please enter a prompt.")
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValidationError(
                f"Unsupported aspect ratio '{aspect_ratio}'. Choose one of {', '.join(ASPECT_RATIOS)}."
            )

        full_prompt = f"{prompt}, {style} style"
        logger.info(f"Generating image at {aspect_ratio}")
        images = await self._remote(
            self.capability.generate_image(
                full_prompt, aspect_ratio, count=1, output_format="image/png"
            )
        )
        if not images:
            raise self._empty(NO_IMAGE_GENERATED)

        return encode_bytes(images[0], "image/png")

    async def apply_edit(self, prompt: str, images: Sequence[ImagePayload]) -> DataUrl:
        """Edit the given images per ``prompt`` and return the first image in the reply."""
        if not images:
            raise ValidationError("At least one image must be provided for editing.")
        if not (prompt or "").strip():
            raise ValidationError("Please enter a prompt.")

        logger.info(f"Applying edit with {len(images)} image(s)")
        parts = await self._remote(self.capability.edit_images(prompt, list(images)))

        for part in parts or []:
            if part.has_image:
                return encode_bytes(part.data, part.mime_type or "image/png")
        raise self._empty(NO_EDITED_IMAGE)
