from typing import Any, Literal

from pydantic import BaseModel


class NormalizedResult(BaseModel):
    """Uniform shape for every ScreenshotOne response."""

    content_type: str
    type: Literal["json", "text", "base64"]
    response: Any
    """Parsed JSON object, decoded text, or ``{"base64": "..."}`` for binary."""
