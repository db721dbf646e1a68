"""Runtime settings resolved from the environment and the backend ``.env`` file."""

from __future__ import annotations

import logging
import os
from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from studio.utility.path_finder import Finder


class Settings(BaseModel):
    """Everything the app factory needs to wire logging and the capability."""

    gemini_api_key: Optional[str] = None
    image_model: str = "imagen-4.0-generate-001"
    edit_model: str = "gemini-2.5-flash-image"
    text_model: str = "gemini-2.5-flash"
    run_mode: Literal["actual", "mock"] = "actual"
    log_level: str = "INFO"
    log_to_file: bool = False
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    max_sessions: int = 100

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, INFO when the name is unknown."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Return Settings populated from ``<backend>/.env`` and the process environment."""
    env_path = Finder().get_directory("root") / ".env"
    load_dotenv(env_path)

    origins = os.getenv("ALLOWED_ORIGINS", "*")
    run_mode = os.getenv("RUN_MODE", "actual").strip().lower()

    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
        image_model=os.getenv("GEMINI_IMAGE_MODEL", "imagen-4.0-generate-001"),
        edit_model=os.getenv("GEMINI_EDIT_MODEL", "gemini-2.5-flash-image"),
        text_model=os.getenv("GEMINI_TEXT_MODEL", "gemini-2.5-flash"),
        run_mode="mock" if run_mode == "mock" else "actual",
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_to_file=_env_flag("LOG_TO_FILE"),
        allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
        max_sessions=int(os.getenv("STUDIO_MAX_SESSIONS", "100")),
    )
