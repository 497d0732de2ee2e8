"""
Configuration management for duologue.
"""
import os
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Framework settings loaded from environment variables."""

    # Anthropic
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")

    # Model configurations
    DEFAULT_MODEL: str = os.getenv("DUOLOGUE_DEFAULT_MODEL", "claude-3-5-haiku-20241022")
    MAX_TOKENS: int = int(os.getenv("DUOLOGUE_MAX_TOKENS", "1024"))

    # USD per 1K tokens: (prompt, completion)
    MODEL_PRICES: dict[str, tuple[float, float]] = {
        "claude-3-5-haiku-20241022": (0.0008, 0.004),
        "claude-3-5-sonnet-20241022": (0.003, 0.015),
        "claude-sonnet-4-20250514": (0.003, 0.015),
        "claude-3-opus-20240229": (0.015, 0.075),
    }

    # Conversation limits
    MAX_CONSECUTIVE_AUTO_REPLY: int = int(os.getenv("DUOLOGUE_MAX_CONSECUTIVE_AUTO_REPLY", "100"))
    CHAT_RECURSION_LIMIT: int = int(os.getenv("DUOLOGUE_CHAT_RECURSION_LIMIT", "1000"))

    # API settings
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    def validate(self) -> list[str]:
        """Validate required settings. Returns list of missing keys."""
        missing = []
        if not self.ANTHROPIC_API_KEY:
            missing.append("ANTHROPIC_API_KEY")
        return missing

    def price_for(self, model: str) -> tuple[float, float] | None:
        """Look up per-1K token prices for a model name."""
        return self.MODEL_PRICES.get(model)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
