"""Canned model replies used when the studio runs without a Gemini backend."""

from typing import List


class Mock:
    """Provide suggestion and refinement text for mock capability flows."""

    def __init__(self):
        self.MOCK_SUGGESTIONS: List[str] = [
            "Place the product on a rustic wooden table with warm, soft lighting from the side.",
            "Create a minimalist scene with a solid pastel background and a single, elegant prop.",
            "Showcase the product on a reflective black surface with dramatic, cinematic lighting.",
        ]

        self.MOCK_REFINED_PROMPT: str = (
            "Place the product on a clean marble countertop in soft morning light, "
            "shallow depth of field, neutral background, high-end e-commerce photography."
        )

        self.MOCK_STYLE_REFINED_PROMPT: str = (
            "Recreate the reference scene's warm directional lighting, earthy palette and "
            "centered minimalist composition around the product, keeping the product's "
            "color, shape, material, texture and markings exactly unchanged."
        )
