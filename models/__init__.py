"""Data models for Sora Prompt Genie"""

from .enhancement import Category, CategoryGroup, Enhancement, Preset, PresetEnhancement
from .prompt_history import HistoryEntry

__all__ = [
    "Category",
    "CategoryGroup",
    "Enhancement",
    "Preset",
    "PresetEnhancement",
    "HistoryEntry",
]
