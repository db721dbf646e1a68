"""Shared helper utilities for prompt template handling."""

import yaml
from typing import Dict

from studio.utility.path_finder import Finder


class Helper:
    """Provide reusable utilities for loading and filling prompt templates.

    Templates live in ``config/templates.yml`` and are keyed by a short name.
    Loaded files are cached per helper instance.
    """

    TEMPLATE_MAP = {
        "refine": "REFINE_PROMPT_TEMPLATE",
        "style_refine": "STYLE_REFINE_PROMPT_TEMPLATE",
        "suggestions": "SUGGESTIONS_PROMPT_TEMPLATE",
    }

    def __init__(self):
        """Initialize the helper with access to configured paths."""
        self.path = Finder()
        self._cache: Dict[str, Dict[str, str]] = {}

    def load_template(self, template: str, filename: str = "templates.yml") -> str:
        """Load a prompt template from disk based on the requested type."""
        template_key = self.TEMPLATE_MAP.get(template)
        if not template_key:
            raise ValueError(f"Unknown template type: {template}")

        if filename not in self._cache:
            full_path = self.path.get_directory("config") / filename
            with open(full_path, "r", encoding="utf-8") as f:
                self._cache[filename] = yaml.safe_load(f) or {}
        data = self._cache[filename]

        if template_key not in data:
            raise KeyError(f"Template '{template_key}' missing in {filename}")

        return data[template_key]

    def render_template(self, template: str, **values: str) -> str:
        """Load a template and fill its placeholders."""
        return self.load_template(template).format(**values).strip()
