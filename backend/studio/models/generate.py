"""Pydantic models for generation requests and the prompt-history view."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

AspectRatio = Literal["1:1", "16:9", "9:16", "4:3", "3:4"]
StylePreset = Literal["photorealistic", "illustration", "minimalist", "cinematic", "fantasy"]


class GenerateRequest(BaseModel):
    """Payload describing a text-to-image request from the generate tab."""

    prompt: str
    aspect_ratio: AspectRatio = Field(default="1:1", alias="aspectRatio")
    style: StylePreset = "photorealistic"

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class PromptHistoryView(BaseModel):
    """Snapshot of the prompt history; entries are most recent first."""

    entries: List[str] = Field(default_factory=list)
    cursor: int = -1
    pending_text: str = ""
    display: str = ""


class LiveEditRequest(BaseModel):
    """Current content of the prompt box while the user types."""

    text: str = ""


class PromptNavigationResponse(BaseModel):
    """Text the prompt box should show after a history move, plus the new state."""

    display: str
    history: PromptHistoryView


class GenerateResponse(BaseModel):
    """Generated image plus the updated prompt history."""

    message: str = "Image generation successful"
    image: Optional[str] = None
    prompt_history: PromptHistoryView = Field(default_factory=PromptHistoryView)
