"""
Prompt Session - Owns one editing session's state and exposes user actions

Wires the catalog, suggestion cache, history stack, prompt text model and
reconciler together. Collaborator failures never escape: they are turned
into notices and the session state is left untouched.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Union

from config import settings
from utils.logger import logger
from models.enhancement import Enhancement
from models.prompt_history import HistoryEntry
from core import enhancement_catalog
from core.collaborators import PromptCollaborator, PromptProviderError, PromptServiceError, PromptValidationError
from core.enhancement_reconciler import EnhancementReconciler, ToggleOutcome, ToggleResult
from core.history_stack import HistoryStack
from core.prompt_editor import PromptOrigin, PromptTextModel
from core.suggestion_cache import SuggestionCache



@dataclass
class Notice:
    """User-visible message (toast)"""
    level: str  # info, success, warning, error
    title: str
    message: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "title": self.title,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
        }


NoticeCallback = Callable[[Notice], None]


class PromptSession:
    """
    Single-user prompt editing session.

    Usage:
        session = PromptSession(PromptApiClient())
        await session.toggle_enhancement(find_enhancement("l-1"))
        session.undo()
    """

    def __init__(
        self,
        collaborator: PromptCollaborator,
        debounce_seconds: Optional[float] = None,
        suggestion_count: Optional[int] = None,
        on_notice: Optional[NoticeCallback] = None,
    ):
        if debounce_seconds is None:
            debounce_seconds = settings.PROMPT_COMMIT_DEBOUNCE_SECONDS
        self.collaborator = collaborator
        self.suggestion_count = suggestion_count or settings.DEFAULT_SUGGESTION_COUNT
        self.history = HistoryStack()
        self.text = PromptTextModel(self.history, debounce_seconds=debounce_seconds)
        self.suggestions = SuggestionCache()
        self.reconciler = EnhancementReconciler(self.text, collaborator, self.suggestions)
        self.notices: List[Notice] = []
        self._on_notice = on_notice

    # ---- State views ----

    @property
    def current_prompt(self) -> str:
        return self.text.value

    @property
    def last_origin(self) -> Optional[PromptOrigin]:
        return self.text.last_origin

    @property
    def history_entries(self) -> List[HistoryEntry]:
        return self.history.entries

    @property
    def history_index(self) -> int:
        return self.history.index

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def applied_ids(self):
        return self.reconciler.applied_ids

    def applied_enhancements(self) -> List[Enhancement]:
        """Applied records in catalog category order, unknown categories last"""
        order = {c.id: i for i, c in enumerate(enhancement_catalog.ALL_CATEGORIES)}
        return sorted(
            self.reconciler.applied(),
            key=lambda e: order.get(e.category, len(order)),
        )

    def candidates(self, category: str) -> List[Enhancement]:
        """Cards to show for a category: refreshed suggestions or the catalog"""
        return self.suggestions.get(category)

    # ---- Enhancements ----

    async def toggle_enhancement(self, enhancement: Enhancement) -> ToggleResult:
        result = await self.reconciler.toggle_enhancement(enhancement)

        if result.outcome == ToggleOutcome.FAILED:
            self._notify_failure("Enhancement failed", result.error)
        elif result.outcome == ToggleOutcome.BUSY:
            self.notify(
                "info",
                "Still working",
                f"An enhancement is already being applied in {enhancement_catalog.get_category_label(enhancement.category)}.",
            )
        elif result.outcome == ToggleOutcome.REMOVED:
            self.notify("info", "Enhancement removed", result.enhancement.title)
        elif result.outcome in (ToggleOutcome.APPLIED, ToggleOutcome.REPLACED, ToggleOutcome.STALE):
            self.notify("success", "Enhancement applied", result.enhancement.title)
        return result

    def remove_enhancement(self, enhancement: Union[Enhancement, str]) -> bool:
        return self.reconciler.remove_enhancement(enhancement)

    async def refresh_category(self, category: str, count: Optional[int] = None) -> bool:
        count = count or self.suggestion_count
        try:
            suggestions = await self.reconciler.refresh_category(category, count)
        except Exception as e:
            self._notify_failure("Couldn't refresh suggestions", self._as_service_error(e))
            return False
        label = enhancement_catalog.get_category_label(category)
        self.notify("success", "Suggestions refreshed", f"{len(suggestions)} new {label} ideas")
        return True

    async def apply_preset(self, preset_id: str) -> bool:
        """
        Apply every enhancement of a preset in order.

        Items already applied are skipped (toggling them would remove them).
        Stops at the first failure; items applied before it stay applied.
        """
        preset = enhancement_catalog.get_preset(preset_id)
        if preset is None:
            self.notify("error", "Unknown preset", preset_id)
            return False

        for enhancement in preset.to_enhancements():
            if self.reconciler.is_applied(enhancement):
                continue
            result = await self.reconciler.toggle_enhancement(enhancement)
            if not result.changed:
                if result.outcome == ToggleOutcome.FAILED:
                    self._notify_failure(f"Preset '{preset.name}' stopped", result.error)
                else:
                    self.notify("info", f"Preset '{preset.name}' stopped", "Another enhancement is still being applied.")
                return False

        self.notify("success", "Preset applied", preset.name)
        return True

    # ---- History ----

    def undo(self) -> bool:
        self.text.cancel_pending()
        prompt = self.history.undo()
        if prompt is None:
            return False
        self.text.set_prompt_programmatic(prompt, commit=False)
        return True

    def redo(self) -> bool:
        self.text.cancel_pending()
        prompt = self.history.redo()
        if prompt is None:
            return False
        self.text.set_prompt_programmatic(prompt, commit=False)
        return True

    def jump_to_history(self, index: int) -> bool:
        self.text.cancel_pending()
        try:
            prompt = self.history.jump_to(index)
        except IndexError:
            logger.warning(f"Ignoring jump to missing history entry {index}")
            return False
        self.text.set_prompt_programmatic(prompt, commit=False)
        return True

    # ---- Prompt text ----

    def set_prompt_from_user_edit(self, value: str):
        self.text.set_prompt_from_user_edit(value)

    def select_starter_prompt(self, prompt: str):
        self.text.set_prompt_programmatic(prompt, commit=True)

    async def auto_generate(self, basic_prompt: str) -> bool:
        try:
            generated = await self.collaborator.auto_generate(basic_prompt)
        except Exception as e:
            self._notify_failure("Auto-generate failed", self._as_service_error(e))
            return False
        self.text.set_prompt_programmatic(generated, commit=True)
        self.notify("success", "Prompt generated")
        return True

    async def structure_prompt(self) -> bool:
        try:
            structured = await self.collaborator.structure_prompt(self.text.value)
        except Exception as e:
            self._notify_failure("Structuring failed", self._as_service_error(e))
            return False
        self.text.set_prompt_programmatic(structured, commit=True)
        self.notify("success", "Prompt structured")
        return True

    # ---- Notices ----

    def notify(self, level: str, title: str, message: str = "") -> Notice:
        notice = Notice(level=level, title=title, message=message)
        self.notices.append(notice)
        if self._on_notice:
            try:
                self._on_notice(notice)
            except Exception as e:
                logger.error(f"Notice callback failed: {e}")
        return notice

    @staticmethod
    def _as_service_error(error: Exception) -> PromptServiceError:
        if isinstance(error, PromptServiceError):
            return error
        logger.error(f"Unexpected collaborator failure: {type(error).__name__}: {error}")
        return PromptProviderError(str(error))

    def _notify_failure(self, title: str, error: Optional[PromptServiceError]):
        if isinstance(error, PromptValidationError):
            # Validation messages are written for end users
            self.notify("warning", title, error.message)
        else:
            if error is not None:
                logger.error(f"{title}: {error}")
            self.notify("error", title, "Something went wrong. Please try again.")
