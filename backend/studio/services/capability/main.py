"""Factory for the capability selected by the run mode."""

from studio.config.settings import Settings
from studio.services.capability.base import GenerativeCapability
from studio.services.capability.gemini import GeminiCapability
from studio.services.capability.mock import MockCapability
from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)


def build_capability(settings: Settings) -> GenerativeCapability:
    """Return the mock capability in mock mode, Gemini otherwise."""
    if settings.run_mode == "mock":
        logger.info("Using mock generative capability")
        return MockCapability()
    return GeminiCapability(settings=settings)
