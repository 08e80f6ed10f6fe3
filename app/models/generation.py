"""
Generation Models
Structured prompt parameters and the tagged result of a generation call.
"""

from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, model_validator


class ContentStyle(str, Enum):
    """Writing style of the generated piece."""
    ARTICLE = "article"
    BLOG = "blog"
    SCRIPT = "script"


class ContentLength(str, Enum):
    """Advisory length of the generated piece."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class GenerationErrorKind(str, Enum):
    """Why a generation call failed."""
    TRANSPORT = "transport"
    FORMAT = "format"


class GenerationRequest(BaseModel):
    """What the user asked for. Topic emptiness is checked by the gate, not here."""

    topic: str = Field(default="", description="What to write about")
    style: ContentStyle = Field(default=ContentStyle.ARTICLE, description="Writing style")
    length: ContentLength = Field(default=ContentLength.MEDIUM, description="Advisory length")

    @property
    def has_topic(self) -> bool:
        return bool(self.topic and self.topic.strip())


class GenerationResult(BaseModel):
    """Outcome of one generation call: text on success, error on failure, never both."""

    text: str = Field(default="", description="Generated text, empty on failure")
    error: Optional[str] = Field(default=None, description="User-facing error message")
    error_kind: Optional[GenerationErrorKind] = Field(default=None, description="Failure category")

    @model_validator(mode="after")
    def _text_xor_error(self) -> "GenerationResult":
        if self.error is not None and self.text:
            raise ValueError("A failed generation result cannot carry text")
        if (self.error is None) != (self.error_kind is None):
            raise ValueError("error and error_kind must be set together")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(text=text)

    @classmethod
    def failure(cls, kind: GenerationErrorKind, message: str) -> "GenerationResult":
        return cls(text="", error=message, error_kind=kind)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"text": self.text}
        if self.error is not None:
            data["error"] = self.error
            data["error_kind"] = self.error_kind.value
        return data
