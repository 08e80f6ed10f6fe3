"""
Generation Request/Response Schemas
API schemas for content generation.
"""

from pydantic import BaseModel, Field

from app.models.generation import ContentLength, ContentStyle, GenerationRequest


class GenerateContentRequest(BaseModel):
    """Request to generate new content."""

    topic: str = Field(default="", max_length=2000, description="What to write about")
    style: ContentStyle = Field(default=ContentStyle.ARTICLE, description="article, blog or script")
    length: ContentLength = Field(default=ContentLength.MEDIUM, description="short, medium or long")

    def to_domain(self) -> GenerationRequest:
        return GenerationRequest(topic=self.topic, style=self.style, length=self.length)


class QuotaResponse(BaseModel):
    """Generation quota usage."""

    used: int = Field(ge=0, description="Successful generations so far")
    limit: int = Field(ge=0, description="Quota ceiling")
    remaining: int = Field(ge=0, description="Generations left before an upgrade is needed")


class GenerateContentResponse(BaseModel):
    """Generated text plus quota after accounting."""

    text: str = Field(description="Generated text")
    quota: QuotaResponse = Field(description="Quota usage after this request")
