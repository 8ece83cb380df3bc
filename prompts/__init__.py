"""Prompts for AI plan generation."""

from prompts.plan_generator_prompt import PLAN_GENERATOR_PROMPT, PLAN_RESPONSE_SCHEMA

__all__ = [
    "PLAN_GENERATOR_PROMPT",
    "PLAN_RESPONSE_SCHEMA",
]
