"""Core prompt session logic for Sora Prompt Genie"""

from .collaborators import (
    PromptCollaborator,
    PromptServiceError,
    PromptValidationError,
    PromptProviderError,
)
from .history_stack import HistoryStack
from .prompt_editor import PromptOrigin, PromptTextModel
from .suggestion_cache import SuggestionCache
from .enhancement_reconciler import EnhancementReconciler, ToggleOutcome, ToggleResult
from .prompt_session import Notice, PromptSession

__all__ = [
    "PromptCollaborator",
    "PromptServiceError",
    "PromptValidationError",
    "PromptProviderError",
    "HistoryStack",
    "PromptOrigin",
    "PromptTextModel",
    "SuggestionCache",
    "EnhancementReconciler",
    "ToggleOutcome",
    "ToggleResult",
    "Notice",
    "PromptSession",
]
