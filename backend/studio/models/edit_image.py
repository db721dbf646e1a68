"""Models used for the edit endpoints and the edit-history view."""

from typing import List

from pydantic import BaseModel, Field


class EditRequest(BaseModel):
    """Incoming instruction to edit the currently displayed image."""

    prompt: str

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class JumpRequest(BaseModel):
    """Select a history thumbnail; -1 is the original product image."""

    index: int = Field(ge=-1)


class EditHistoryView(BaseModel):
    """Snapshot of the edit history as the UI renders it."""

    entries: List[str] = Field(default_factory=list)
    cursor: int = -1
    can_undo: bool = False
    can_redo: bool = False
    viewing_original: bool = True
