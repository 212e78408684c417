from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # API
    API_TITLE: str = "BoardBravo AI API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Provider selection
    AI_PROVIDER: str = "gemini"  # or "openai", "anthropic"

    # Google Gemini
    GOOGLE_AI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-pro"

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4"

    # Anthropic
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_MODEL: str = "claude-3-5-sonnet-20241022"

    # Generation
    AI_TEMPERATURE: float = 0.7
    AI_MAX_TOKENS: int = 4000

    # Invocation
    AI_MAX_ATTEMPTS: int = 3
    AI_RETRY_BASE_DELAY: float = 2.0
    AI_REQUEST_TIMEOUT_SECONDS: Optional[float] = None

    # Prompt context
    DOCUMENT_CONTEXT_CHARS: int = 1000

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore" # Allow extra fields in .env

@lru_cache()
def get_settings() -> Settings:
    return Settings()
