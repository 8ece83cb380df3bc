"""Application settings using Pydantic Settings."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Gemini Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # OpenAI Configuration (used when ai_provider is "openai")
    openai_api_key: str = ""

    # Anthropic Configuration (Optional fallback for the OpenAI provider)
    anthropic_api_key: str = ""

    # Plan generation
    ai_provider: str = "gemini"
    ai_timeout_seconds: float = 60.0
    canonical_plan_days: int = 6
    max_target_sets: int = 10

    # Database Configuration
    mongodb_url: str = "mongodb://localhost:27017/training_diary"

    # Application Configuration
    app_name: str = "Training Diary"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "INFO"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS Configuration
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Session Configuration
    notification_duration_seconds: float = 3.0
    min_password_length: int = 6

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
