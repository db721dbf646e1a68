"""Default option sets for generation and style refinement."""

from typing import Dict, List

ASPECT_RATIOS = ("1:1", "16:9", "9:16", "4:3", "3:4")
STYLE_PRESETS = ("photorealistic", "illustration", "minimalist", "cinematic", "fantasy")


class Options:
    """Provide in-memory catalogs the studio UI renders as selectable controls.

    Aspect ratios and style presets feed the generate tab.
    Style refinement prompts feed the reference-image quick actions.
    Values are static per process.
    """

    def __init__(self):
        """Initialize the labelled catalogs."""
        self.aspect_ratios = [
            {"value": "1:1", "label": "Square (1:1)"},
            {"value": "16:9", "label": "Widescreen (16:9)"},
            {"value": "9:16", "label": "Portrait (9:16)"},
            {"value": "4:3", "label": "Landscape (4:3)"},
            {"value": "3:4", "label": "Tall (3:4)"},
        ]

        self.style_presets = [
            {"value": "photorealistic", "label": "Photorealistic"},
            {"value": "illustration", "label": "Illustration"},
            {"value": "minimalist", "label": "Minimalist"},
            {"value": "cinematic", "label": "Cinematic"},
            {"value": "fantasy", "label": "Fantasy"},
        ]

        self.style_refinements = [
            {
                "label": "Match Style & Mood",
                "prompt": "Match the overall style, lighting, and mood of the reference image.",
            },
            {
                "label": "Adopt Color Palette",
                "prompt": "Adopt the color palette from the reference image.",
            },
            {
                "label": "Match Background",
                "prompt": "Recreate the background and composition of the reference image.",
            },
        ]

    def get_options(self) -> Dict[str, List[Dict[str, str]]]:
        """Return all option categories grouped by control."""
        return {
            "aspect_ratios": self.aspect_ratios,
            "style_presets": self.style_presets,
            "style_refinements": self.style_refinements,
        }
