"""
Prompt Text Model - The editable prompt string and its debounced history commit

Two mutation paths:
- USER_EDIT: free-text typing. The value changes immediately but the history
  commit is deferred until the text has been quiet for the debounce period.
  Every new edit reschedules the timer (trailing edge).
- PROGRAMMATIC: reconciler merges, undo/redo/jump, AI responses. Applied at
  once, cancel any pending debounced commit, optionally commit themselves.

Each mutation carries its own origin so listeners never have to infer whether
a change came from the user.
"""

import asyncio
from enum import Enum
from typing import Callable, List, Optional

from utils.logger import logger
from core.history_stack import HistoryStack


DEFAULT_DEBOUNCE_SECONDS = 3.0


class PromptOrigin(str, Enum):
    USER_EDIT = "user_edit"
    PROGRAMMATIC = "programmatic"


PromptListener = Callable[[str, PromptOrigin], None]


class PromptTextModel:
    """Current prompt text plus the trailing-edge commit timer"""

    def __init__(
        self,
        history: HistoryStack,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self._history = history
        self._debounce_seconds = debounce_seconds
        self._value = ""
        self._last_origin: Optional[PromptOrigin] = None
        self._pending: Optional[asyncio.TimerHandle] = None
        self._listeners: List[PromptListener] = []

    @property
    def value(self) -> str:
        return self._value

    @property
    def last_origin(self) -> Optional[PromptOrigin]:
        """Origin of the most recent mutation"""
        return self._last_origin

    @property
    def debounce_seconds(self) -> float:
        return self._debounce_seconds

    @property
    def has_pending_commit(self) -> bool:
        return self._pending is not None

    def add_listener(self, listener: PromptListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: PromptListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ---- Mutations ----

    def set_prompt_from_user_edit(self, value: str):
        """Update the text now and (re)schedule the history commit"""
        self._apply(value, PromptOrigin.USER_EDIT)
        self.cancel_pending()
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self._debounce_seconds, self._commit_pending)

    def set_prompt_programmatic(self, value: str, commit: bool = True):
        """Replace the text, dropping any pending user-edit commit"""
        self.cancel_pending()
        self._apply(value, PromptOrigin.PROGRAMMATIC)
        if commit:
            self._history.commit(value)

    def cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def flush_pending(self) -> bool:
        """Run a pending debounced commit immediately. Returns True if one ran."""
        if self._pending is None:
            return False
        self._pending.cancel()
        self._commit_pending()
        return True

    # ---- Internals ----

    def _apply(self, value: str, origin: PromptOrigin):
        self._value = value
        self._last_origin = origin
        for listener in list(self._listeners):
            try:
                listener(value, origin)
            except Exception as e:
                logger.error(f"Prompt listener failed: {e}")

    def _commit_pending(self):
        self._pending = None
        value = self._value
        # Empty text and no-op edits never become history entries
        if not value.strip() or value == self._history.current_prompt():
            logger.debug("Skipping debounced commit (empty or unchanged prompt)")
            return
        self._history.commit(value)
        logger.debug(f"Committed user edit to history (index={self._history.index})")
