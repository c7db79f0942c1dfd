"""In-process PromptCollaborator: drives a PromptSession without going over HTTP"""

from typing import List, Optional

from utils.logger import logger
from models.enhancement import Enhancement
from core.collaborators import PromptCollaborator, PromptProviderError, PromptValidationError
from web_ui.api.schemas.agent_schemas import SuggestionAgentInput
from web_ui.api.schemas.prompt_schemas import EnhancementPayload, MIN_BASIC_PROMPT_WORDS
from web_ui.api.services.langchain_providers import LLMConfigurationError, LLMProviderError
from web_ui.api.services.prompt_engineer import PromptEngineer, get_prompt_engineer
from web_ui.api.services.suggestion_agent import SuggestionAgent, get_suggestion_agent


class LocalPromptCollaborator(PromptCollaborator):
    """Calls the prompt services directly, mapping their errors onto the session's"""

    def __init__(
        self,
        prompt_engineer: Optional[PromptEngineer] = None,
        suggestion_agent: Optional[SuggestionAgent] = None,
    ):
        self.prompt_engineer = prompt_engineer or get_prompt_engineer()
        self.suggestion_agent = suggestion_agent or get_suggestion_agent()

    async def merge_enhancement(self, current_prompt: str, enhancement: Enhancement) -> str:
        payload = EnhancementPayload(**enhancement.to_merge_payload())
        try:
            return await self.prompt_engineer.enhance_prompt(current_prompt, payload)
        except (LLMConfigurationError, LLMProviderError) as e:
            raise PromptProviderError(str(e)) from e

    async def fetch_suggestions(
        self,
        category: str,
        count: int,
        current_prompt: Optional[str] = None,
    ) -> List[Enhancement]:
        try:
            suggestions = await self.suggestion_agent.generate(
                SuggestionAgentInput(category=category, count=count, current_prompt=current_prompt)
            )
        except (LLMConfigurationError, LLMProviderError) as e:
            raise PromptProviderError(str(e)) from e
        return [Enhancement.from_dict(s.model_dump()) for s in suggestions]

    async def auto_generate(self, basic_prompt: str) -> str:
        if len(basic_prompt.split()) < MIN_BASIC_PROMPT_WORDS:
            raise PromptValidationError(f"Basic prompt must contain at least {MIN_BASIC_PROMPT_WORDS} words", 400)
        try:
            return await self.prompt_engineer.auto_generate_prompt(basic_prompt)
        except (LLMConfigurationError, LLMProviderError) as e:
            logger.error(f"Auto-generate failed: {e}")
            raise PromptProviderError(str(e)) from e

    async def structure_prompt(self, current_prompt: str) -> str:
        try:
            return await self.prompt_engineer.structure_prompt(current_prompt)
        except (LLMConfigurationError, LLMProviderError) as e:
            raise PromptProviderError(str(e)) from e
