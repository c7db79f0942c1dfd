"""
LangChain Providers - LLM interface for the prompt services
============================================================

OpenRouter exposes an OpenAI-compatible chat completions API, so both
providers here are built on LangChain's ChatOpenAI:
- OpenRouter (default; anthropic/claude-3.5-sonnet)
- OpenAI-compatible endpoints (OpenAI itself or a self-hosted gateway)

Each provider implements a common interface for:
- Text generation (system + user prompt)
- Chat-based generation
- Availability checking

Reference Documentation:
- LangChain: https://python.langchain.com/docs/
- OpenRouter: https://openrouter.ai/docs
"""

import re
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any, Literal

import httpx
from pydantic import BaseModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from config import settings
from utils.logger import logger


# =============================================================================
# Errors
# =============================================================================

class LLMConfigurationError(RuntimeError):
    """Provider cannot be used because configuration is missing"""


class LLMProviderError(RuntimeError):
    """Upstream call failed (transport, HTTP status or empty output)"""


def describe_upstream_error(exc: Exception) -> str:
    """
    Turn an SDK exception into a message the error formatter can classify.

    The OpenAI SDK names its exceptions after the failure class
    (APIConnectionError, RateLimitError, AuthenticationError, ...).
    """
    name = type(exc).__name__
    if "RateLimit" in name:
        return f"Rate limit reached at provider: {exc}"
    if "Authentication" in name or "PermissionDenied" in name:
        return f"Authentication with provider failed: {exc}"
    if "Connection" in name or "Timeout" in name:
        return f"Network error contacting provider: {exc}"
    return f"{name}: {exc}"


# =============================================================================
# Provider Configuration
# =============================================================================

class ProviderConfig(BaseModel):
    """Configuration for an LLM provider"""
    type: Literal["openrouter", "openai"]
    model: str
    api_key: Optional[str] = None
    endpoint: Optional[str] = None

    # OpenRouter attribution
    referer: Optional[str] = None

    # Additional options
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    timeout: Optional[int] = None


# =============================================================================
# Base Provider Abstract Class
# =============================================================================

class BaseLangChainProvider(ABC):
    """
    Base class for all LangChain-based providers.

    Provides a unified interface for text generation and chat.
    """

    def __init__(self, config: ProviderConfig):
        self.config = config
        self.model = config.model
        self._chat_model = None
        self._initialized = False

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the LangChain model. Call before first use."""
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None
    ) -> str:
        """Generate text from a prompt."""
        pass

    @abstractmethod
    async def chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> str:
        """Generate response from a list of chat messages."""
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if the provider is available and properly configured."""
        pass

    @staticmethod
    def clean_json_response(response: str) -> str:
        """Clean JSON from LLM response, removing thinking tags and markdown."""
        cleaned = re.sub(r'<think>[\s\S]*?</think>', '', response, flags=re.IGNORECASE)
        cleaned = re.sub(r'<\|.*?\|>', '', cleaned)

        json_match = re.search(r'```(?:json)?\s*([\s\S]*?)\s*```', cleaned)
        if json_match:
            cleaned = json_match.group(1)

        # Try to find JSON array or object
        json_match = re.search(r'(\[[\s\S]*\]|\{[\s\S]*\})', cleaned)
        if json_match:
            cleaned = json_match.group(1)

        return cleaned.strip()


# =============================================================================
# OpenAI-compatible Provider
# =============================================================================

class OpenAILangChainProvider(BaseLangChainProvider):
    """
    OpenAI-compatible provider using LangChain's ChatOpenAI.

    `endpoint` points the client at any OpenAI-compatible base URL.
    """

    LABEL = "OpenAI"
    DEFAULT_ENDPOINT = "https://api.openai.com/v1"

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        self.api_key = config.api_key
        self.endpoint = config.endpoint

    def _missing_key_message(self) -> str:
        return "OpenAI API key is required. Pass api_key in the provider config."

    def _default_headers(self) -> Optional[Dict[str, str]]:
        return None

    async def initialize(self) -> None:
        """Initialize the ChatModel."""
        if self._initialized:
            return

        if not self.api_key:
            raise LLMConfigurationError(self._missing_key_message())

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "api_key": self.api_key,
            "temperature": self.config.temperature if self.config.temperature is not None else 0.7,
            "max_tokens": self.config.max_tokens,
            "timeout": self.config.timeout or 60,
            "max_retries": 0,
        }
        if self.endpoint:
            kwargs["base_url"] = self.endpoint
        headers = self._default_headers()
        if headers:
            kwargs["default_headers"] = headers

        self._chat_model = ChatOpenAI(**kwargs)
        self._initialized = True
        logger.info(f"[{self.LABEL}] Initialized with model: {self.model}")

    async def generate(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None
    ) -> str:
        """Generate text from a single user prompt and optional system prompt."""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return await self.chat(messages, max_tokens=max_tokens, temperature=temperature)

    async def chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> str:
        """Chat-based generation."""
        await self.initialize()

        lc_messages = []
        for msg in messages:
            role = msg.get("role", "user")
            content = msg.get("content", "")

            if role == "system":
                lc_messages.append(SystemMessage(content=content))
            elif role == "assistant":
                lc_messages.append(AIMessage(content=content))
            else:
                lc_messages.append(HumanMessage(content=content))

        if temperature is not None:
            self._chat_model.temperature = temperature
        if max_tokens is not None:
            self._chat_model.max_tokens = max_tokens

        logger.info(f"[{self.LABEL}] Generating with model {self.model}")

        try:
            response = await self._chat_model.ainvoke(lc_messages)
        except Exception as e:
            error_msg = f"{self.LABEL} API error: {describe_upstream_error(e)}"
            logger.error(f"[{self.LABEL}] {error_msg}")
            raise LLMProviderError(error_msg) from e

        result = response.content if isinstance(response.content, str) else str(response.content)
        if not result.strip():
            raise LLMProviderError(f"{self.LABEL} API error: empty completion")

        logger.info(f"[{self.LABEL}] Generation complete: {len(result)} chars")
        return result

    async def is_available(self) -> bool:
        """Check if the models endpoint answers with our key."""
        if not self.api_key:
            return False

        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get(
                    f"{(self.endpoint or self.DEFAULT_ENDPOINT).rstrip('/')}/models",
                    headers={"Authorization": f"Bearer {self.api_key}"}
                )
                return response.status_code == 200
        except httpx.HTTPError:
            return False


# =============================================================================
# OpenRouter Provider
# =============================================================================

class OpenRouterLangChainProvider(OpenAILangChainProvider):
    """
    OpenRouter provider (OpenAI-compatible API with attribution headers).

    Environment Variables:
    - OPENROUTER_API_KEY: Your OpenRouter API key
    - SITE_URL: Sent as HTTP-Referer for OpenRouter attribution
    """

    LABEL = "OpenRouter"
    DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1"

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        self.endpoint = config.endpoint or self.DEFAULT_ENDPOINT
        self.referer = config.referer or "http://localhost:5000"

    def _missing_key_message(self) -> str:
        return "OPENROUTER_API_KEY environment variable is not set"

    def _default_headers(self) -> Optional[Dict[str, str]]:
        return {"HTTP-Referer": self.referer}


# =============================================================================
# Provider Factory
# =============================================================================

class LangChainProviderFactory:
    """
    Factory class for creating LangChain providers.

    Usage:
        config = ProviderConfig(type="openrouter", model="anthropic/claude-3.5-sonnet", api_key="...")
        provider = LangChainProviderFactory.create(config)
        result = await provider.generate("Hello, world!")
    """

    PROVIDER_MAP = {
        "openrouter": OpenRouterLangChainProvider,
        "openai": OpenAILangChainProvider,
    }

    @classmethod
    def create(cls, config: ProviderConfig) -> BaseLangChainProvider:
        provider_class = cls.PROVIDER_MAP.get(config.type)

        if not provider_class:
            supported = ", ".join(cls.PROVIDER_MAP.keys())
            raise ValueError(f"Unknown provider type: {config.type}. Supported: {supported}")

        logger.info(f"[Factory] Creating {config.type} provider with model: {config.model}")
        return provider_class(config)

    @classmethod
    def get_supported_providers(cls) -> List[str]:
        return list(cls.PROVIDER_MAP.keys())


def openrouter_config_from_settings() -> ProviderConfig:
    """Build the default OpenRouter provider config from application settings"""
    return ProviderConfig(
        type="openrouter",
        model=settings.OPENROUTER_MODEL,
        api_key=settings.OPENROUTER_API_KEY,
        endpoint=settings.OPENROUTER_BASE_URL,
        referer=settings.get_referer(),
        temperature=settings.LLM_TEMPERATURE,
        timeout=settings.LLM_TIMEOUT,
    )


_default_provider: Optional[BaseLangChainProvider] = None


def get_llm_provider() -> BaseLangChainProvider:
    """Shared OpenRouter provider built from settings"""
    global _default_provider
    if _default_provider is None:
        _default_provider = LangChainProviderFactory.create(openrouter_config_from_settings())
    return _default_provider


def reset_llm_provider():
    """Forget the cached provider (settings changed, or between tests)"""
    global _default_provider
    _default_provider = None
