"""Models for prompt refinement, suggestions and their parse step."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from studio.handlers.error_handler import FormatError
from studio.models.image import ImagePayload

INVALID_SUGGESTIONS = "Invalid JSON response format for suggestions."

_suggestions_adapter = TypeAdapter(List[StrictStr])


class TranslateRequest(BaseModel):
    """Free-form text (Bangla, English or a mix) to translate and refine."""

    text: str = ""


class RefineStyleRequest(BaseModel):
    """Suggestion text to restyle after the session's reference image."""

    suggestion: str


class RefinementResult(BaseModel):
    """Latest refinement outcome, replaced by the next call or cleared."""

    source_text: str
    refined_text: str
    style_image: Optional[ImagePayload] = None


class SuggestionsResponse(BaseModel):
    suggestions: List[str] = Field(default_factory=list)


def _strip_code_fence(raw: str) -> str:
    """Remove a surrounding ``` or ```json fence if the model added one."""
    text = raw.strip()
    if not text.startswith("```"):
        return text
    lines = text.splitlines()
    if lines and lines[0].startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_suggestions(raw: Optional[str]) -> Union[List[str], FormatError]:
    """
    Validate the model's suggestions reply.

    Returns the list of strings on success, or the FormatError describing
    why the reply was rejected. Never raises.
    """
    try:
        return _suggestions_adapter.validate_json(_strip_code_fence(raw or ""))
    except PydanticValidationError as exc:
        return FormatError(INVALID_SUGGESTIONS, details={"reason": str(exc)[:200]})
