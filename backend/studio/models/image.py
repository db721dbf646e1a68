"""Image value types shared by the codec, the capability and the API models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

# data:<mime_type>;base64,<payload>
DataUrl = str


class ImagePayload(BaseModel):
    """Image blob encoded as base64 with MIME metadata."""

    model_config = ConfigDict(frozen=True)

    mime_type: str
    data_b64: str


class ContentPart(BaseModel):
    """One part of a multi-modal model reply: text, inline image bytes, or both."""

    text: Optional[str] = None
    data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @property
    def has_image(self) -> bool:
        """True when the part carries inline image bytes."""
        return bool(self.data)
