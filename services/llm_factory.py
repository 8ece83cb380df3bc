"""Chat models for plan generation: OpenAI first, Claude as the fallback."""

from typing import Any, Dict, List, Optional

from config.agent_config import AGENT_CONFIG
from config.settings import settings
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI
from prompts.plan_generator_prompt import PLAN_JSON_SCHEMA
from utils.logger import setup_logger

logger = setup_logger(__name__)


def _build_model(model_class, model_name: Optional[str], api_key: str, temperature: float) -> Optional[BaseChatModel]:
    if not (api_key and model_name):
        return None
    try:
        return model_class(
            model=model_name,
            temperature=temperature,
            api_key=api_key,
            timeout=settings.ai_timeout_seconds,
        )
    except Exception as e:
        logger.warning("Could not create chat model '%s': %s", model_name, e)
        return None


def get_llm(agent_name: str, schema: Optional[Dict[str, Any]] = None) -> Runnable:
    """Chat model for ``agent_name``, with a Claude fallback when configured.

    With ``schema`` every model is bound to it through structured output, so
    the runnable returns the parsed object instead of a message.

    Raises:
        ValueError: ``agent_name`` has no entry in ``AGENT_CONFIG``.
        RuntimeError: Neither OpenAI nor Anthropic credentials are set.
    """
    config = AGENT_CONFIG.get(agent_name)
    if not config:
        raise ValueError(f"No model configuration for '{agent_name}'")

    temperature = config.get("temperature", 0.3)
    models: List[Runnable] = [
        model for model in (
            _build_model(ChatOpenAI, config.get("model"), settings.openai_api_key, temperature),
            _build_model(ChatAnthropic, config.get("fallback_model"), settings.anthropic_api_key, temperature),
        )
        if model is not None
    ]
    if not models:
        raise RuntimeError(
            f"No chat model available for '{agent_name}'; set OPENAI_API_KEY or ANTHROPIC_API_KEY."
        )

    if schema is not None:
        models = [model.with_structured_output(schema) for model in models]

    primary, *fallbacks = models
    logger.info(f"Chat model for {agent_name}: {len(models)} provider(s), structured={schema is not None}")
    return primary.with_fallbacks(fallbacks) if fallbacks else primary


def get_plan_model() -> Runnable:
    """Plan generator model that answers in the training-plan shape."""
    return get_llm("plan_generator", schema=PLAN_JSON_SCHEMA)
