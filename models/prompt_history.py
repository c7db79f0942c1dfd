"""Prompt history entry model"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of the prompt text at a committed transition"""
    prompt: str
    timestamp: int  # Monotonic nanoseconds, unique within a session

    def to_dict(self) -> dict:
        return {"prompt": self.prompt, "timestamp": self.timestamp}
