"""
Prompt Collaborators - Boundary contract between the prompt session and the
services that merge, suggest, author and restructure prompt text.

The session never talks to an LLM directly. It awaits one of these four calls
and treats any raised PromptServiceError as "no state change".
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from models.enhancement import Enhancement


class PromptServiceError(Exception):
    """Base error for collaborator failures"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PromptValidationError(PromptServiceError):
    """Request rejected as invalid (HTTP 400 on the wire)"""


class PromptProviderError(PromptServiceError):
    """Transport, upstream or response-parsing failure"""


class PromptCollaborator(ABC):
    """
    Async services the prompt session depends on.

    Implemented over HTTP by core.api_client.PromptApiClient and in-process by
    web_ui.api.services.local_collaborator.LocalPromptCollaborator.
    """

    @abstractmethod
    async def merge_enhancement(self, current_prompt: str, enhancement: Enhancement) -> str:
        """Return `current_prompt` rewritten to include the enhancement"""
        pass

    @abstractmethod
    async def fetch_suggestions(
        self,
        category: str,
        count: int,
        current_prompt: Optional[str] = None,
    ) -> List[Enhancement]:
        """Return fresh candidate enhancements for a category"""
        pass

    @abstractmethod
    async def auto_generate(self, basic_prompt: str) -> str:
        pass

    @abstractmethod
    async def structure_prompt(self, current_prompt: str) -> str:
        pass
