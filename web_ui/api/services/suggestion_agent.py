"""
Suggestion Agent - Langflow first, OpenRouter fallback

If a Langflow suggestion flow is configured it gets the first attempt; any
failure there (transport, schema, empty result) is logged and the request
falls through to the OpenRouter suggestion prompt.
"""

import time
from typing import List, Optional

from pydantic import ValidationError

from utils.logger import logger
from web_ui.api.schemas.agent_schemas import SuggestionAgentInput, SuggestionAgentOutput
from web_ui.api.schemas.prompt_schemas import Suggestion
from web_ui.api.services.langflow_client import LangflowClient, LangflowError
from web_ui.api.services.prompt_engineer import PromptEngineer, get_prompt_engineer


class SuggestionAgent:
    def __init__(
        self,
        langflow: Optional[LangflowClient] = None,
        prompt_engineer: Optional[PromptEngineer] = None,
    ):
        self.langflow = langflow or LangflowClient.from_settings()
        self._prompt_engineer = prompt_engineer

    @property
    def prompt_engineer(self) -> PromptEngineer:
        if self._prompt_engineer is None:
            self._prompt_engineer = get_prompt_engineer()
        return self._prompt_engineer

    async def generate(self, agent_input: SuggestionAgentInput) -> List[Suggestion]:
        if not self.langflow.is_configured():
            return await self._fallback(agent_input)

        try:
            return await self._generate_with_langflow(agent_input)
        except (LangflowError, ValidationError, ValueError) as e:
            logger.error(f"[SuggestionAgent] Langflow invocation failed: {e}")
            logger.warning("[SuggestionAgent] Falling back to OpenRouter suggestions")
            return await self._fallback(agent_input)

    async def _generate_with_langflow(self, agent_input: SuggestionAgentInput) -> List[Suggestion]:
        start = time.perf_counter()
        raw = await self.langflow.run_json_flow(
            agent_input.to_flow_input(),
            flow_id=agent_input.flow_id,
            input_type="structured",
            output_type="json",
        )
        output = SuggestionAgentOutput.model_validate(raw)
        latency_ms = round((time.perf_counter() - start) * 1000)

        metadata = output.metadata
        logger.info(
            f"[SuggestionAgent] Langflow response: provider="
            f"{(metadata.provider if metadata else None) or 'langflow'} latency={latency_ms}ms"
            f" warnings={metadata.warnings if metadata else None}"
        )

        if not output.suggestions:
            raise ValueError("Langflow suggestion agent returned no suggestions")

        stamp = int(time.time() * 1000)
        return [
            Suggestion(
                id=item.id or f"agent-{agent_input.category}-{stamp}-{index}",
                title=item.title.strip(),
                description=item.description.strip(),
                category=item.category or agent_input.category,
            )
            for index, item in enumerate(output.suggestions)
        ]

    async def _fallback(self, agent_input: SuggestionAgentInput) -> List[Suggestion]:
        return await self.prompt_engineer.generate_suggestions(
            agent_input.category,
            agent_input.count,
            agent_input.current_prompt,
        )


_suggestion_agent: Optional[SuggestionAgent] = None


def get_suggestion_agent() -> SuggestionAgent:
    global _suggestion_agent
    if _suggestion_agent is None:
        _suggestion_agent = SuggestionAgent()
    return _suggestion_agent
