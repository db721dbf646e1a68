"""Response model describing the full state of one studio session."""

from typing import List, Optional

from pydantic import BaseModel, Field

from studio.models.edit_image import EditHistoryView
from studio.models.generate import PromptHistoryView
from studio.models.refine import RefinementResult


class SessionView(BaseModel):
    """Everything the studio UI needs to re-render after an action."""

    session_id: str
    source_image: Optional[str] = None
    reference_image: Optional[str] = None
    display_image: Optional[str] = None
    edit_history: EditHistoryView = Field(default_factory=EditHistoryView)
    prompt_history: PromptHistoryView = Field(default_factory=PromptHistoryView)
    suggestions: List[str] = Field(default_factory=list)
    translation: Optional[RefinementResult] = None
    style_refinement: Optional[RefinementResult] = None
    generated_image: Optional[str] = None
    in_flight: List[str] = Field(default_factory=list)
