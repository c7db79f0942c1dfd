"""Suggestion Cache - Per-category candidate overrides backed by the static catalog"""

from typing import Dict, List, Optional

from models.enhancement import Enhancement
from core import enhancement_catalog


class SuggestionCache:
    """
    Holds AI-refreshed candidate lists per category.

    A category with no override reads from the static catalog. Overrides are
    replaced wholesale by `store`, never merged.
    """

    def __init__(self, catalog: Optional[Dict[str, List[Enhancement]]] = None):
        self._catalog = catalog if catalog is not None else enhancement_catalog.ENHANCEMENTS
        self._overrides: Dict[str, List[Enhancement]] = {}

    def get(self, category: str) -> List[Enhancement]:
        if category in self._overrides:
            return list(self._overrides[category])
        return list(self._catalog.get(category, []))

    def store(self, category: str, suggestions: List[Enhancement]):
        self._overrides[category] = list(suggestions)

    def clear(self, category: Optional[str] = None):
        if category is None:
            self._overrides.clear()
        else:
            self._overrides.pop(category, None)

    def has_override(self, category: str) -> bool:
        return category in self._overrides
