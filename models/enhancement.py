"""Enhancement models - Cinematic options that can be merged into a prompt"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Enhancement:
    """
    A named, described cinematic option belonging to exactly one category.

    Records are immutable once loaded from the static catalog or from a
    suggestion response. `id` is unique within the catalog.
    """
    id: str
    title: str
    description: str
    category: str  # Category id, e.g. "lighting"

    def to_dict(self) -> dict:
        """Serialize to dictionary"""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
        }

    def to_merge_payload(self) -> dict:
        """Fields sent to the merge collaborator (id stays client side)"""
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict, category: Optional[str] = None) -> 'Enhancement':
        """Deserialize from dictionary, optionally forcing the category"""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            category=category or data.get("category", ""),
        )

    def __str__(self) -> str:
        return f"Enhancement({self.id}, {self.title!r}, {self.category})"


@dataclass(frozen=True)
class Category:
    """Mutually exclusive classification bucket for enhancements"""
    id: str
    label: str


@dataclass(frozen=True)
class CategoryGroup:
    """Named group of categories shown together in advanced mode"""
    id: str
    label: str
    categories: List[Category] = field(default_factory=list)


@dataclass(frozen=True)
class PresetEnhancement:
    """Enhancement definition inside a preset (presets carry no catalog ids)"""
    title: str
    description: str
    category: str


@dataclass(frozen=True)
class Preset:
    """Bundle of enhancements applied together in simple mode"""
    id: str
    name: str
    description: str
    enhancements: List[PresetEnhancement] = field(default_factory=list)

    def to_enhancements(self) -> List[Enhancement]:
        """
        Expand into Enhancement records.

        Ids are derived from the preset id and position so that a preset item
        can be tracked in the applied set like any catalog card.
        """
        return [
            Enhancement(
                id=f"preset-{self.id}-{index}",
                title=item.title,
                description=item.description,
                category=item.category,
            )
            for index, item in enumerate(self.enhancements)
        ]
