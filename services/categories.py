"""Category service: creating, editing and deleting categories."""

from typing import Iterable, List, Optional

from errors import ValidationError
from models.category import DEFAULT_EMOJI, Category, Subcategory
from models.document import Document
from services.ids import new_id
from logger import get_logger

logger = get_logger()


class CategoryService:
    """Service for managing categories."""

    def __init__(self, document: Document, store):
        """Initialize the category service.

        Args:
            document: The shared in-memory document.
            store: StateStore used to persist after each change.
        """
        self.document = document
        self.store = store

    def find_all(self) -> List[Category]:
        """Get all categories, in the order they were added."""
        return list(self.document.categories.values())

    def find(self, category_id: str) -> Optional[Category]:
        """Get a single category by ID.

        Returns:
            Category object if found, None otherwise.
        """
        return self.document.categories.get(category_id)

    def usage_count(self, category_id: str) -> int:
        """Count the transactions that reference a category."""
        return sum(1 for t in self.document.transactions if t.category_id == category_id)

    def create(
        self,
        name: str,
        emoji: Optional[str] = None,
        subcategory_names: Iterable[str] = (),
    ) -> Category:
        """Create a new category.

        Args:
            name: Category name (non-empty).
            emoji: Optional glyph; defaults to 💸.
            subcategory_names: Names of the subcategories, in order.

        Returns:
            The created Category object with id populated.

        Raises:
            ValidationError: If the name is empty.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name required")

        category_id = new_id(self.document.categories, prefix="c")
        names = [n.strip() for n in subcategory_names if n and n.strip()]
        category = Category(
            id=category_id,
            name=name,
            emoji=(emoji or "").strip() or DEFAULT_EMOJI,
            subcategories=[
                Subcategory(id=f"{category_id}-s{i}", name=n) for i, n in enumerate(names)
            ],
        )
        self.document.categories[category_id] = category
        self.store.save(self.document)

        logger.debug(f"Created category {category_id} ({name})")
        return category

    def edit_category(
        self,
        category_id: str,
        name: str,
        emoji: Optional[str],
        subcategories: List[Subcategory],
    ) -> Category:
        """Replace a category's fields in place.

        Transactions that reference a subcategory no longer in the list have
        their subcategory cleared; their category stays.

        Args:
            category_id: The category ID to edit.
            name: New name (non-empty).
            emoji: New glyph; defaults to 💸 when blank.
            subcategories: The complete new subcategory list.

        Returns:
            The updated Category object.

        Raises:
            ValidationError: If the category is not found, the name is empty,
                or subcategory ids repeat.
        """
        category = self.find(category_id)
        if category is None:
            raise ValidationError(f"Category with ID {category_id} not found")

        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name required")

        new_ids = [sub.id for sub in subcategories]
        if len(set(new_ids)) != len(new_ids):
            raise ValidationError("Subcategory ids must be unique within a category")

        removed = {sub.id for sub in category.subcategories} - set(new_ids)

        category.name = name
        category.emoji = (emoji or "").strip() or DEFAULT_EMOJI
        category.subcategories = list(subcategories)

        cleared = 0
        if removed:
            for transaction in self.document.transactions:
                if (
                    transaction.category_id == category_id
                    and transaction.subcategory_id in removed
                ):
                    transaction.subcategory_id = None
                    cleared += 1

        self.store.save(self.document)

        logger.debug(
            f"Edited category {category_id}; removed {len(removed)} subcategories, "
            f"cleared {cleared} transactions"
        )
        return category

    def subcategories_from_names(
        self, category: Category, names: Iterable[str]
    ) -> List[Subcategory]:
        """Build a subcategory list for an edit from plain names.

        A name that matches an existing subcategory keeps that subcategory's
        id; other names get fresh "<category>-s<n>" ids.
        """
        by_name = {sub.name: sub.id for sub in category.subcategories}
        used = set()
        pairs = []
        for raw in names:
            name = (raw or "").strip()
            if not name:
                continue
            sub_id = by_name.get(name)
            if sub_id in used:
                sub_id = None
            if sub_id:
                used.add(sub_id)
            pairs.append((sub_id, name))

        # Fresh ids never reuse one from before the edit
        taken = {sub.id for sub in category.subcategories}
        n = 0
        subcategories = []
        for sub_id, name in pairs:
            if sub_id is None:
                while f"{category.id}-s{n}" in taken:
                    n += 1
                sub_id = f"{category.id}-s{n}"
                taken.add(sub_id)
            subcategories.append(Subcategory(id=sub_id, name=name))
        return subcategories

    def delete_category(self, category_id: str) -> int:
        """Delete a category, keeping the transactions that used it.

        Every transaction referencing the category has its category and
        subcategory cleared.

        Args:
            category_id: The category ID to delete.

        Returns:
            Number of transactions whose category was cleared.

        Raises:
            ValidationError: If the category is not found.
        """
        if category_id not in self.document.categories:
            raise ValidationError(f"Category with ID {category_id} not found")

        del self.document.categories[category_id]

        cleared = 0
        for transaction in self.document.transactions:
            if transaction.category_id == category_id:
                transaction.category_id = None
                transaction.subcategory_id = None
                cleared += 1

        self.store.save(self.document)

        logger.info(f"Deleted category {category_id}; cleared {cleared} transactions")
        return cleared
