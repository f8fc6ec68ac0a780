"""Category model for transaction categorization."""

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_EMOJI = "💸"


@dataclass
class Subcategory:
    """A named bucket inside a category.

    Attributes:
        id: Identifier unique within the parent category (e.g., "food-s0").
        name: Display name.
    """

    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass
class Category:
    """Represents a user-defined transaction category.

    Attributes:
        id: Unique identifier ("food", or "c<millis>" for created categories).
        name: Category name (non-empty).
        emoji: Short glyph shown next to the name.
        subcategories: Ordered subcategories; ids are unique within the category.
    """

    id: str
    name: str
    emoji: str = DEFAULT_EMOJI
    subcategories: List[Subcategory] = field(default_factory=list)

    def find_subcategory(self, subcategory_id: Optional[str]) -> Optional[Subcategory]:
        """Get a subcategory by id, or None if it does not belong to this category."""
        if not subcategory_id:
            return None
        for sub in self.subcategories:
            if sub.id == subcategory_id:
                return sub
        return None

    def to_dict(self) -> dict:
        """Convert category to its persisted JSON form."""
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "subs": [sub.to_dict() for sub in self.subcategories],
        }

    @classmethod
    def from_dict(cls, category_id: str, data: dict) -> "Category":
        """Build a Category from its persisted JSON form.

        Subcategories without an id, and repeated ids, are skipped.

        Raises:
            ValueError: If the category has no name.
        """
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"category {category_id} has no name")

        subcategories = []
        seen = set()
        raw_subs = data.get("subs")
        for raw in raw_subs if isinstance(raw_subs, list) else []:
            if not isinstance(raw, dict) or not raw.get("id"):
                continue
            sub_id = str(raw["id"])
            if sub_id in seen:
                continue
            seen.add(sub_id)
            subcategories.append(Subcategory(id=sub_id, name=str(raw.get("name") or "")))

        emoji = data.get("emoji")
        if not isinstance(emoji, str) or not emoji.strip():
            emoji = DEFAULT_EMOJI

        return cls(
            id=str(data.get("id") or category_id),
            name=name,
            emoji=emoji,
            subcategories=subcategories,
        )
