"""Gemini API service client."""

import httpx
from typing import Any, Dict, Optional
from config.settings import settings
from utils.errors import AIServiceError, ContentBlockedError
from utils.logger import setup_logger

logger = setup_logger(__name__)


class GeminiService:
    """Client for the Gemini generateContent endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.base_url = settings.gemini_base_url.rstrip("/")
        self.transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate_json(self, prompt: str, response_schema: Dict[str, Any]) -> str:
        """Send one prompt with a structured-output schema and return the JSON text.

        Raises:
            AIServiceError: Missing key, transport failure, non-2xx response or
                a response without candidates.
            ContentBlockedError: The prompt or the answer was blocked by the
                safety filters.
        """
        if not self.api_key:
            logger.warning("Gemini API key not configured")
            raise AIServiceError("AI plan generation is not configured.")

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            },
        }

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    self.url,
                    params={"key": self.api_key},
                    json=payload,
                    timeout=settings.ai_timeout_seconds,
                )
        except httpx.HTTPError as e:
            logger.error(f"Error calling Gemini API: {e}", exc_info=True)
            raise AIServiceError("Could not reach the AI service. Please try again.") from e

        if response.is_error:
            logger.error(f"Gemini API returned {response.status_code}: {response.text[:500]}")
            raise AIServiceError(
                f"AI service error ({response.status_code}). Please try again.",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise AIServiceError("AI service returned an unreadable response.") from e

        return self._extract_text(result)

    @staticmethod
    def _extract_text(result: Dict[str, Any]) -> str:
        block_reason = (result.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            logger.warning(f"Gemini blocked the prompt: {block_reason}")
            raise ContentBlockedError(f"The request was blocked by the AI safety filters ({block_reason}).")

        candidates = result.get("candidates") or []
        if not candidates:
            raise AIServiceError("AI service returned no answer.")

        candidate = candidates[0]
        if candidate.get("finishReason") in ("SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST"):
            logger.warning(f"Gemini blocked the answer: {candidate.get('finishReason')}")
            raise ContentBlockedError("The answer was blocked by the AI safety filters.")

        parts = (candidate.get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)
