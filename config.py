"""Configuration management using Pydantic settings"""

from typing import List, Optional

from pydantic_settings import BaseSettings


# Variables the server cannot run AI endpoints without
REQUIRED_VARS = {
    "OPENROUTER_API_KEY": "OpenRouter API key for AI-powered prompt generation",
}

# Variables that only matter once deployed
RECOMMENDED_PRODUCTION_VARS = {
    "SITE_URL": "Production site URL (used for CORS and API referrer headers)",
    "ALLOWED_ORIGINS": "Comma-separated list of allowed CORS origins",
}

DEFAULT_DEV_ORIGINS = [
    "http://localhost:5000",
    "http://localhost:5173",
]


class Settings(BaseSettings):
    """Application settings"""

    # Runtime
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 5173
    SITE_URL: Optional[str] = None
    ALLOWED_ORIGINS: Optional[str] = None

    # OpenRouter (OpenAI-compatible chat completions)
    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_MODEL: str = "anthropic/claude-3.5-sonnet"
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT: int = 60

    # Langflow suggestion flow (optional)
    LANGFLOW_BASE_URL: Optional[str] = None
    LANGFLOW_API_KEY: Optional[str] = None
    LANGFLOW_SUGGESTION_FLOW_ID: Optional[str] = None

    # Prompt session
    PROMPT_COMMIT_DEBOUNCE_SECONDS: float = 3.0
    DEFAULT_SUGGESTION_COUNT: int = 8
    API_BASE_URL: str = "http://localhost:5173"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in ("production", "prod")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() in ("development", "dev", "local")

    def get_allowed_origins(self) -> List[str]:
        """Resolve CORS origins: explicit list, then site URL in production, then dev defaults"""
        if self.ALLOWED_ORIGINS:
            return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]
        if self.is_production:
            return [self.SITE_URL or "https://sorapromptgenie.com"]
        return list(DEFAULT_DEV_ORIGINS)

    def get_referer(self) -> str:
        return self.SITE_URL or "http://localhost:5000"

    def missing_required(self) -> List[str]:
        """Return `NAME (description)` entries for unset required variables"""
        return [
            f"{name} ({description})"
            for name, description in REQUIRED_VARS.items()
            if not (getattr(self, name) or "").strip()
        ]

    def missing_recommended(self) -> List[str]:
        """Recommended variables are only checked in production"""
        if not self.is_production:
            return []
        return [
            f"{name} ({description})"
            for name, description in RECOMMENDED_PRODUCTION_VARS.items()
            if not (getattr(self, name) or "").strip()
        ]


# Global settings instance
settings = Settings()
