"""Agent-specific configuration."""

from typing import Dict, Any

# Model configuration for LangChain-backed plan generation
AGENT_CONFIG: Dict[str, Any] = {
    "plan_generator": {
        "model": "gpt-4o-mini",
        "fallback_model": "claude-3-haiku-20240307",
        "temperature": 0.4,
    },
}
