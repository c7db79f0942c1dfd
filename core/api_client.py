"""
Prompt API Client - PromptCollaborator implementation over the HTTP API

Talks to the /api routes served by web_ui.api.main using the camelCase wire
names of the public contract. Non-2xx responses become PromptServiceError
carrying the server's `error` text; 400 becomes PromptValidationError.
"""

from typing import Any, Dict, List, Optional

import httpx

from utils.logger import logger
from models.enhancement import Enhancement
from core.collaborators import (
    PromptCollaborator,
    PromptProviderError,
    PromptServiceError,
    PromptValidationError,
)


class PromptApiClient(PromptCollaborator):
    """
    Async HTTP client for the prompt API.

    A fresh httpx.AsyncClient is opened per call; `transport` lets tests plug
    in httpx.MockTransport.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if base_url is None:
            from config import settings
            base_url = settings.API_BASE_URL
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout, connect=10.0)
        self._transport = transport

    async def merge_enhancement(self, current_prompt: str, enhancement: Enhancement) -> str:
        data = await self._post("/api/enhance-prompt", {
            "currentPrompt": current_prompt,
            "enhancement": enhancement.to_merge_payload(),
        })
        return self._require_str(data, "enhancedPrompt")

    async def fetch_suggestions(
        self,
        category: str,
        count: int,
        current_prompt: Optional[str] = None,
    ) -> List[Enhancement]:
        payload: Dict[str, Any] = {"category": category, "count": count}
        if current_prompt:
            payload["currentPrompt"] = current_prompt
        data = await self._post("/api/generate-suggestions", payload)

        items = data.get("suggestions")
        if not isinstance(items, list):
            raise PromptProviderError("Malformed suggestions response")
        try:
            return [Enhancement.from_dict(item, category=item.get("category") or category) for item in items]
        except (KeyError, AttributeError, TypeError) as e:
            raise PromptProviderError(f"Malformed suggestion item: {e}")

    async def auto_generate(self, basic_prompt: str) -> str:
        data = await self._post("/api/auto-generate-prompt", {"basicPrompt": basic_prompt})
        return self._require_str(data, "generatedPrompt")

    async def structure_prompt(self, current_prompt: str) -> str:
        data = await self._post("/api/structure-prompt", {"currentPrompt": current_prompt})
        return self._require_str(data, "structuredPrompt")

    async def health(self) -> Dict[str, Any]:
        async with self._client() as client:
            try:
                response = await client.get("/api/health")
            except httpx.HTTPError as e:
                raise PromptProviderError(f"Network error: {e}")
        return self._handle(response)

    # ---- Internals ----

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"base_url": self.base_url, "timeout": self.timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with self._client() as client:
            try:
                response = await client.post(path, json=payload)
            except httpx.HTTPError as e:
                logger.error(f"[PromptApi] POST {path} failed: {e}")
                raise PromptProviderError(f"Network error: {e}")
        return self._handle(response)

    def _handle(self, response: httpx.Response) -> Dict[str, Any]:
        if response.is_success:
            try:
                data = response.json()
            except ValueError:
                raise PromptProviderError("Invalid JSON in API response", response.status_code)
            if not isinstance(data, dict):
                raise PromptProviderError(
                    f"Expected a JSON object from the API, got {type(data).__name__}", response.status_code
                )
            return data

        message = self._error_text(response)
        logger.warning(f"[PromptApi] {response.request.url.path} -> {response.status_code}: {message}")
        if response.status_code == 400:
            raise PromptValidationError(message, response.status_code)
        raise PromptServiceError(message, response.status_code)

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return response.reason_phrase

    @staticmethod
    def _require_str(data: Dict[str, Any], key: str) -> str:
        value = data.get(key)
        if not isinstance(value, str):
            raise PromptProviderError(f"Response missing '{key}'")
        return value
