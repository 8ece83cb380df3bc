"""AI-assisted plan generation.

Builds the prompt from the user's request and current goals, sends it to the
configured provider, parses the JSON answer and normalizes it. Any failure
raises a ``PlanGenerationError`` subclass; nothing here touches the profile.
"""

import json
import re
from typing import Any, Optional

from config.settings import settings
from prompts.plan_generator_prompt import PLAN_GENERATOR_PROMPT, PLAN_RESPONSE_SCHEMA
from schemas.profile import NutritionGoals
from services.gemini_service import GeminiService
from services.plan_normalizer import NormalizedPlan, normalize_generated_plan
from utils.errors import AIServiceError, SchemaError
from utils.logger import setup_logger

logger = setup_logger(__name__)

_CODE_FENCE = re.compile(r"^```[a-zA-Z0-9]*\s*|\s*```$")


def parse_json_response(text: str) -> Any:
    """Parse the model's JSON text, tolerating a surrounding markdown fence."""
    cleaned = _CODE_FENCE.sub("", (text or "").strip())
    if not cleaned:
        raise SchemaError("AI service returned an empty answer.")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON from AI service: {e}; text: {cleaned[:200]}")
        raise SchemaError("AI service returned invalid JSON.") from e


class PlanGenerator:
    """Generates a normalized plan from a free-text request."""

    def __init__(self, gemini: Optional[GeminiService] = None, llm=None, provider: Optional[str] = None):
        self.provider = (provider or settings.ai_provider).lower()
        self.gemini = gemini
        self.llm = llm

    def build_prompt(self, request_text: str, goals: NutritionGoals) -> str:
        return PLAN_GENERATOR_PROMPT.format(
            request=(request_text or "").strip() or "A balanced hypertrophy plan.",
            calories=goals.calories,
            protein_grams=goals.protein_grams,
            carb_grams=goals.carb_grams,
            fat_grams=goals.fat_grams,
            day_count=settings.canonical_plan_days,
        )

    async def _complete(self, prompt: str) -> Any:
        if self.provider == "gemini":
            if self.gemini is None:
                self.gemini = GeminiService()
            return await self.gemini.generate_json(prompt, PLAN_RESPONSE_SCHEMA)

        if self.provider == "openai":
            if self.llm is None:
                # Imported lazily: building the chat model needs credentials
                from services.llm_factory import get_plan_model
                try:
                    self.llm = get_plan_model()
                except RuntimeError as e:
                    raise AIServiceError("AI plan generation is not configured.") from e
            try:
                result = await self.llm.ainvoke(prompt)
            except Exception as e:
                logger.error(f"Error calling chat model: {e}", exc_info=True)
                raise AIServiceError("The AI service is temporarily unavailable. Please try again.") from e
            # Structured output yields the parsed object; a plain model yields a message
            if isinstance(result, dict):
                return result
            content = getattr(result, "content", None)
            return content if isinstance(content, str) else ""

        raise AIServiceError(f"Unknown AI provider '{self.provider}'.")

    async def generate(self, request_text: str, goals: NutritionGoals) -> NormalizedPlan:
        """Request a plan and return it normalized.

        Raises:
            AIServiceError / ContentBlockedError: The provider failed or refused.
            SchemaError / EmptyPlanError: The answer is unusable.
        """
        prompt = self.build_prompt(request_text, goals)
        logger.info(f"Requesting plan from {self.provider}, prompt length: {len(prompt)}")
        answer = await self._complete(prompt)
        payload = answer if isinstance(answer, dict) else parse_json_response(answer)
        plan = normalize_generated_plan(payload)
        logger.info(f"Generated plan with {len(plan.workout_plan)} day(s)")
        return plan
