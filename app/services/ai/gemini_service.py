"""Gemini REST integration for text generation."""

from typing import Any, Optional

import httpx

from app.models.generation import (
    ContentLength,
    ContentStyle,
    GenerationErrorKind,
    GenerationResult,
)
from app.services.ai.prompts import build_generation_prompt
from app.utils.logger import get_logger

logger = get_logger(__name__)

INVALID_FORMAT_MESSAGE = "Invalid response format from API"
TRANSPORT_FAILURE_MESSAGE = "API request failed"


def _extract_text(payload: Any) -> Optional[str]:
    """Pull candidates[0].content.parts[0].text out of a response body."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text:
        return None
    return text


class GeminiService:
    """Service for text generation using the Gemini generateContent endpoint."""

    DEFAULT_TIMEOUT = 60.0  # seconds

    def __init__(
        self,
        endpoint: str,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Gemini service.

        Args:
            endpoint: generateContent URL (without the key query parameter)
            api_key: Default API key, used when a call passes none
            timeout: Request timeout in seconds
            http_client: Shared client; a short-lived one is opened per call when omitted
        """
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
        self._http_client = http_client

        logger.info("GeminiService initialized with timeout=%s", timeout)

    async def generate(
        self,
        topic: str,
        style: ContentStyle,
        length: ContentLength,
        api_key: Optional[str] = None,
    ) -> GenerationResult:
        """
        Generate a piece of text. Never raises; failures come back as a tagged result.

        Args:
            topic: What to write about
            style: Writing style hint
            length: Length hint
            api_key: Credential for this call, defaults to the configured key

        Returns:
            GenerationResult with either text or error set
        """
        prompt = build_generation_prompt(topic, style, length)
        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt}],
                }
            ]
        }
        params = {"key": api_key if api_key is not None else self.api_key}

        try:
            logger.info("Sending request to Gemini API")
            response = await self._post(body, params)
            logger.info("Received response from Gemini API, status: %s", response.status_code)
        except httpx.HTTPError as e:
            logger.error("Error generating content: %s", e)
            return GenerationResult.failure(GenerationErrorKind.TRANSPORT, TRANSPORT_FAILURE_MESSAGE)

        if not response.is_success:
            message = f"API request failed with status {response.status_code}"
            logger.error("Error generating content: %s", message)
            return GenerationResult.failure(GenerationErrorKind.TRANSPORT, message)

        try:
            payload = response.json()
        except ValueError:
            payload = None

        text = _extract_text(payload)
        if text is None:
            logger.error("Error generating content: %s", INVALID_FORMAT_MESSAGE)
            return GenerationResult.failure(GenerationErrorKind.FORMAT, INVALID_FORMAT_MESSAGE)

        return GenerationResult.success(text)

    async def _post(self, body: dict, params: dict) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(
                self.endpoint, json=body, params=params, timeout=self.timeout
            )
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.endpoint, json=body, params=params)
