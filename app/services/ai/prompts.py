"""Prompt templates for content generation."""

from app.models.generation import ContentLength, ContentStyle

# Advisory only; the generated text is never checked against these.
LENGTH_GUIDE = {
    ContentLength.SHORT: 300,
    ContentLength.MEDIUM: 600,
    ContentLength.LONG: 1000,
}

GENERATION_TEMPLATE = """Write a {length} {style} about: {topic}.
Make it engaging and well-structured.
Length guide: {length_guide}."""


def _length_guide() -> str:
    return ", ".join(f"{length.value} ({words} words)" for length, words in LENGTH_GUIDE.items())


def build_generation_prompt(topic: str, style: ContentStyle, length: ContentLength) -> str:
    """Build the single instruction sent to the generative provider.

    Args:
        topic: What the piece is about
        style: Writing style hint
        length: Length hint

    Returns:
        Prompt text
    """
    return GENERATION_TEMPLATE.format(
        length=ContentLength(length).value,
        style=ContentStyle(style).value,
        topic=topic,
        length_guide=_length_guide(),
    )
