"""
Langflow Client - Optional flow-orchestration provider

Runs a Langflow flow through its REST API:

    POST {base}/api/v1/run/{flow_id}?stream=false
    x-api-key: <key>
    {"input_value": ..., "input_type": "structured", "output_type": "json", "tweaks": {}}

and pulls the first usable output out of Langflow's nested response.
"""

import json
from typing import Any, Dict, Optional, Union

import httpx

from config import settings
from utils.logger import logger


class LangflowError(RuntimeError):
    """Langflow is unconfigured, unreachable or returned an unusable result"""


class LangflowClient:
    """
    Thin async client for Langflow's run endpoint.

    Configured iff both a base URL and an API key are present; the flow id may
    come from the default or be passed per call.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        default_flow_id: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.default_flow_id = default_flow_id
        self.timeout = httpx.Timeout(timeout, connect=10.0)
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "LangflowClient":
        return cls(
            base_url=settings.LANGFLOW_BASE_URL,
            api_key=settings.LANGFLOW_API_KEY,
            default_flow_id=settings.LANGFLOW_SUGGESTION_FLOW_ID,
        )

    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    async def run_flow(
        self,
        input_value: Union[Dict[str, Any], str],
        flow_id: Optional[str] = None,
        input_type: str = "structured",
        output_type: str = "json",
        stream: bool = False,
        tweaks: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Invoke a flow and return its extracted output (text or raw payload)"""
        if not self.is_configured():
            raise LangflowError("Langflow client is not configured")

        flow_id = flow_id or self.default_flow_id
        if not flow_id:
            raise LangflowError("Langflow flowId is required")

        url = f"{self.base_url}/api/v1/run/{flow_id}"
        body = {
            "input_value": input_value,
            "input_type": input_type,
            "output_type": output_type,
            "tweaks": tweaks or {},
        }

        client_kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        async with httpx.AsyncClient(**client_kwargs) as client:
            try:
                response = await client.post(
                    url,
                    params={"stream": str(stream).lower()},
                    headers={"x-api-key": self.api_key},
                    json=body,
                )
            except httpx.HTTPError as e:
                raise LangflowError(f"Network error calling Langflow: {e}") from e

        if not response.is_success:
            raise LangflowError(f"Langflow API error ({response.status_code}): {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise LangflowError(f"Langflow returned non-JSON body: {response.text[:200]}") from e

        if isinstance(data, dict) and data.get("error"):
            raise LangflowError(f"Langflow flow error: {data['error']}")

        logger.debug(f"[Langflow] Flow {flow_id} completed")
        return self.extract_output(data)

    async def run_json_flow(self, input_value: Union[Dict[str, Any], str], **kwargs) -> Any:
        """Run a flow and parse string output as JSON"""
        raw = await self.run_flow(input_value, **kwargs)
        if isinstance(raw, str):
            trimmed = raw.strip()
            try:
                return json.loads(trimmed)
            except json.JSONDecodeError as e:
                raise LangflowError(f"Langflow response is not valid JSON: {trimmed[:200]}") from e
        return raw

    @staticmethod
    def extract_output(data: Any) -> Any:
        """
        First non-empty output across the nested chunks, checked in order:
        text, data.text, message.content, data.outputs[0].message.content.
        Falls back to the whole payload.
        """
        if not isinstance(data, dict):
            return data
        outputs = data.get("outputs") or []
        if not outputs:
            return data

        for chunk in outputs:
            for inner in (chunk or {}).get("outputs") or []:
                if not isinstance(inner, dict):
                    continue
                inner_data = inner.get("data") or {}
                message = inner.get("message") or {}
                if inner.get("text"):
                    return inner["text"]
                if inner_data.get("text"):
                    return inner_data["text"]
                if message.get("content"):
                    return message["content"]
                nested = inner_data.get("outputs") or []
                if nested:
                    content = ((nested[0] or {}).get("message") or {}).get("content")
                    if content:
                        return content

        return data
