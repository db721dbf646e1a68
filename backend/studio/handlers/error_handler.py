"""Error taxonomy for the studio and helpers mapping remote failures to API responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

NO_IMAGE_GENERATED = "No image was generated."
NO_EDITED_IMAGE = "No edited image was returned."
NO_REFINED_PROMPT = "The model did not return a refined prompt."

SENTINEL_MESSAGES = (NO_IMAGE_GENERATED, NO_EDITED_IMAGE, NO_REFINED_PROMPT)


@dataclass(eq=False)
class StudioError(Exception):
    """
    Base error for every failure the studio reports to a client.
    The message is always safe to display as-is.
    """

    message: str
    status_code: int = 500
    error_type: str = "studio_error"
    provider: str = "studio"
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class ValidationError(StudioError):
    """A required input is missing or out of range; no remote call was made."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_type: str = "validation_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type=error_type,
            details=details,
        )


class FormatError(StudioError):
    """Malformed data URL or malformed structured reply from the model."""

    def __init__(
        self,
        message: str,
        status_code: int = 422,
        error_type: str = "format_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type=error_type,
            details=details,
        )


class ReadError(StudioError):
    """A local or uploaded file could not be read into a data URL."""

    def __init__(
        self,
        message: str = "Failed to read file as data URL.",
        status_code: int = 400,
        error_type: str = "read_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type=error_type,
            details=details,
        )


class RemoteError(StudioError):
    """A normalized failure of the generative capability."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_type: str = "unknown_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type=error_type,
            provider="gemini",
            details=details,
        )


class EmptyResultError(StudioError):
    """The capability answered but gave back nothing usable."""

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        error_type: str = "empty_result",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type=error_type,
            provider="gemini",
            details=details,
        )


class ErrorCategory(str, Enum):
    SAFETY_BLOCKED = "safety_blocked"
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_REQUEST = "bad_request"
    SERVER_ERROR = "server_error"
    SENTINEL = "empty_result"
    UNKNOWN = "unknown_error"


@dataclass(frozen=True)
class NormalizedError:
    """Outcome of classifying a failure: category, display message and HTTP status."""

    category: ErrorCategory
    message: str
    status_code: int


CATEGORY_MESSAGES: Dict[ErrorCategory, str] = {
    ErrorCategory.SAFETY_BLOCKED: (
        "Your request was blocked due to safety settings. "
        "Please modify your prompt and try again."
    ),
    ErrorCategory.QUOTA_EXCEEDED: (
        "You have exceeded your API quota. "
        "Please check your Google AI Studio account for details."
    ),
    ErrorCategory.INVALID_REQUEST: (
        "There was an issue with the request. "
        "Please ensure your prompt, images, and settings are valid."
    ),
    ErrorCategory.SERVER_ERROR: (
        "The server encountered an error. Please wait a moment and try again."
    ),
    ErrorCategory.UNKNOWN: "An unexpected error occurred. Please try again later.",
}

CATEGORY_STATUS: Dict[ErrorCategory, int] = {
    ErrorCategory.SAFETY_BLOCKED: 400,
    ErrorCategory.QUOTA_EXCEEDED: 429,
    ErrorCategory.INVALID_REQUEST: 400,
    ErrorCategory.SERVER_ERROR: 503,
    ErrorCategory.SENTINEL: 502,
    ErrorCategory.UNKNOWN: 500,
}


class MapExceptions:
    """Translate remote-capability failures into user-facing studio errors.

    Holds the ordered keyword rules shared by every Gemini call.
    Also registers the FastAPI handler that renders StudioError as JSON.
    """

    def classify(self, exc: BaseException) -> NormalizedError:
        """Pick the first matching category for a failure. Never raises."""
        text = str(exc).lower()

        if "safety" in text or "blocked" in text:
            category = ErrorCategory.SAFETY_BLOCKED
        elif "quota" in text:
            category = ErrorCategory.QUOTA_EXCEEDED
        elif "400" in text or "bad request" in text or "invalid argument" in text:
            category = ErrorCategory.INVALID_REQUEST
        elif "500" in text or "server error" in text:
            category = ErrorCategory.SERVER_ERROR
        else:
            raw = getattr(exc, "message", None)
            message = (raw if isinstance(raw, str) else str(exc)).strip()
            if message in SENTINEL_MESSAGES:
                return NormalizedError(
                    category=ErrorCategory.SENTINEL,
                    message=message,
                    status_code=CATEGORY_STATUS[ErrorCategory.SENTINEL],
                )
            category = ErrorCategory.UNKNOWN

        return NormalizedError(
            category=category,
            message=CATEGORY_MESSAGES[category],
            status_code=CATEGORY_STATUS[category],
        )

    def normalize(self, exc: BaseException) -> str:
        """Return the display message for a failure and log the original."""
        logger.error("Gemini API error: %s", exc, exc_info=exc)
        return self.classify(exc).message

    def map_gemini_exception(self, exc: BaseException) -> StudioError:
        """
        Map a failure from the generative capability to the single
        error the calling operation should raise.
        """
        message = self.normalize(exc)
        normalized = self.classify(exc)

        if normalized.category is ErrorCategory.SENTINEL:
            return EmptyResultError(message=message)

        details = None
        if normalized.category is ErrorCategory.UNKNOWN:
            details = {"exception_type": exc.__class__.__name__}
        return RemoteError(
            message=message,
            status_code=normalized.status_code,
            error_type=normalized.category.value,
            details=details,
        )

    @staticmethod
    def register_exception_handlers(app: FastAPI) -> None:
        """
        Call this once in the app factory to register handlers:

            app = FastAPI()
            MapExceptions.register_exception_handlers(app)
        """

        @app.exception_handler(StudioError)
        async def studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
            logger.warning(
                "StudioError caught by FastAPI handler: %s",
                exc,
                extra={"provider": exc.provider, "type": exc.error_type},
            )

            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "status": "error",
                    "provider": exc.provider,
                    "error_type": exc.error_type,
                    "message": exc.message,
                    "details": exc.details,
                },
            )
