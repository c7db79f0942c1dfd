"""
Applied-Enhancement Reconciler

Tracks which enhancement is applied in each category (at most one), and the
prompt text as it was just before that category's enhancement was first
merged. Mediates add, replace and remove:

- remove: restore the category baseline (if any) locally, no external call
- add: capture the baseline, merge against the current prompt
- replace: merge against the baseline so the old enhancement's wording is
  not carried into the new text

Bookkeeping (applied record, baseline) is only written after the merge
collaborator succeeds, so a failed merge leaves the session exactly as it was.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set, Union

from utils.logger import logger
from models.enhancement import Enhancement
from core.collaborators import PromptCollaborator, PromptProviderError, PromptServiceError
from core.prompt_editor import PromptTextModel
from core.suggestion_cache import SuggestionCache


class ToggleOutcome(str, Enum):
    APPLIED = "applied"      # Clean activation in a category
    REPLACED = "replaced"    # Swapped the category's previous enhancement
    REMOVED = "removed"
    STALE = "stale"          # Merged text written, category refreshed meanwhile
    BUSY = "busy"            # Category already has a merge in flight
    FAILED = "failed"


@dataclass
class ToggleResult:
    outcome: ToggleOutcome
    enhancement: Enhancement
    replaced: Optional[Enhancement] = None
    error: Optional[PromptServiceError] = None

    @property
    def changed(self) -> bool:
        return self.outcome in (
            ToggleOutcome.APPLIED,
            ToggleOutcome.REPLACED,
            ToggleOutcome.REMOVED,
            ToggleOutcome.STALE,
        )


class EnhancementReconciler:
    """Per-category applied state layered over the prompt text model"""

    def __init__(
        self,
        text_model: PromptTextModel,
        collaborator: PromptCollaborator,
        suggestion_cache: SuggestionCache,
    ):
        self._text = text_model
        self._collaborator = collaborator
        self._cache = suggestion_cache

        self._applied: Dict[str, Enhancement] = {}   # category -> applied record
        self._baselines: Dict[str, str] = {}         # category -> prompt before first merge
        self._busy: Set[str] = set()
        self._generations: Dict[str, int] = {}       # bumped on every refresh

    # ---- Queries ----

    @property
    def applied_ids(self) -> Set[str]:
        return {e.id for e in self._applied.values()}

    def applied(self) -> List[Enhancement]:
        return list(self._applied.values())

    def applied_in(self, category: str) -> Optional[Enhancement]:
        return self._applied.get(category)

    def is_applied(self, enhancement: Union[Enhancement, str]) -> bool:
        """
        A record is applied when it is the applied one of its own category.
        Ids are only unique within a category, so a bare id matches any category.
        """
        if isinstance(enhancement, str):
            return enhancement in self.applied_ids
        applied = self._applied.get(enhancement.category)
        return applied is not None and applied.id == enhancement.id

    def baseline_for(self, category: str) -> Optional[str]:
        return self._baselines.get(category)

    def is_busy(self, category: str) -> bool:
        return category in self._busy

    # ---- Operations ----

    async def toggle_enhancement(self, enhancement: Enhancement) -> ToggleResult:
        category = enhancement.category
        if category in self._busy:
            logger.info(f"Merge already in flight for '{category}', ignoring toggle of {enhancement.id}")
            return ToggleResult(ToggleOutcome.BUSY, enhancement)

        if self.is_applied(enhancement):
            self._remove(enhancement)
            return ToggleResult(ToggleOutcome.REMOVED, enhancement)

        return await self._apply(enhancement)

    def remove_enhancement(self, enhancement: Union[Enhancement, str]) -> bool:
        """Remove an applied enhancement by record or id. Not applied is a no-op."""
        if isinstance(enhancement, str):
            record = next((e for e in self._applied.values() if e.id == enhancement), None)
        elif self.is_applied(enhancement):
            record = self._applied[enhancement.category]
        else:
            record = None
        if record is None:
            return False
        if record.category in self._busy:
            logger.info(f"Merge in flight for '{record.category}', removal of {record.id} ignored")
            return False
        self._remove(record)
        return True

    async def refresh_category(self, category: str, count: int) -> List[Enhancement]:
        """
        Drop the category's applied state, then fetch new candidates.

        The prune happens before the fetch and sticks even if the fetch fails.
        Collaborator errors propagate to the caller.
        """
        self._generations[category] = self._generations.get(category, 0) + 1
        dropped = self._applied.pop(category, None)
        self._baselines.pop(category, None)
        if dropped:
            logger.debug(f"Refresh pruned applied enhancement {dropped.id} from '{category}'")

        current = self._text.value or None
        suggestions = await self._collaborator.fetch_suggestions(category, count, current)
        self._cache.store(category, suggestions)
        logger.info(f"Refreshed '{category}' with {len(suggestions)} suggestions")
        return suggestions

    # ---- Internals ----

    def _remove(self, record: Enhancement):
        category = record.category
        del self._applied[category]
        baseline = self._baselines.pop(category, None)
        if baseline is not None:
            self._text.set_prompt_programmatic(baseline, commit=True)
        logger.debug(f"Removed {record.id} from '{category}'")

    async def _apply(self, enhancement: Enhancement) -> ToggleResult:
        category = enhancement.category
        existing = self._applied.get(category)

        if existing is not None and category in self._baselines:
            base_prompt = self._baselines[category]
        else:
            base_prompt = self._text.value

        generation = self._generations.get(category, 0)
        self._busy.add(category)
        try:
            merged = await self._collaborator.merge_enhancement(base_prompt, enhancement)
        except PromptServiceError as e:
            logger.warning(f"Merge failed for {enhancement.id}: {e}")
            return ToggleResult(ToggleOutcome.FAILED, enhancement, replaced=existing, error=e)
        except Exception as e:
            logger.error(f"Unexpected merge failure for {enhancement.id}: {e}")
            return ToggleResult(
                ToggleOutcome.FAILED, enhancement, replaced=existing, error=PromptProviderError(str(e))
            )
        finally:
            self._busy.discard(category)

        self._text.set_prompt_programmatic(merged, commit=True)

        if self._generations.get(category, 0) != generation:
            logger.info(f"'{category}' was refreshed during merge of {enhancement.id}; applied state not recorded")
            return ToggleResult(ToggleOutcome.STALE, enhancement)

        if existing is None:
            self._baselines[category] = base_prompt
        self._applied[category] = enhancement

        if existing is not None:
            logger.info(f"Replaced {existing.id} with {enhancement.id} in '{category}'")
            return ToggleResult(ToggleOutcome.REPLACED, enhancement, replaced=existing)
        logger.info(f"Applied {enhancement.id} in '{category}'")
        return ToggleResult(ToggleOutcome.APPLIED, enhancement)
