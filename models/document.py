"""The persisted document: every transaction, category and setting in one unit."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.category import Category
from models.settings import Settings
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()


@dataclass
class Document:
    """Aggregate of all application data.

    Written and read as one JSON object of the shape
    ``{"tx": [...], "cats": {id: {...}}, "settings": {...}}``.
    """

    transactions: List[Transaction] = field(default_factory=list)
    categories: Dict[str, Category] = field(default_factory=dict)
    settings: Settings = field(default_factory=Settings)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def replace_with(self, other: "Document") -> None:
        """Replace this document's contents wholesale, keeping the same object."""
        self.transactions = other.transactions
        self.categories = other.categories
        self.settings = other.settings

    def to_dict(self) -> dict:
        return {
            "tx": [t.to_dict() for t in self.transactions],
            "cats": {cid: c.to_dict() for cid, c in self.categories.items()},
            "settings": self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict, settings: Optional[Settings] = None) -> "Document":
        """Build a Document, falling back field by field to defaults.

        A bad top-level field (or a bad record inside one) is logged and
        replaced by its default; the rest of the document is kept.

        Args:
            data: Parsed JSON object.
            settings: Settings to use when ``data`` has none. Defaults to
                fresh Settings.
        """
        categories = _categories_from(data.get("cats"))
        transactions = _transactions_from(data.get("tx"), categories)

        raw_settings = data.get("settings")
        if isinstance(raw_settings, dict):
            doc_settings = Settings.from_dict(raw_settings)
        else:
            if raw_settings is not None:
                logger.warning("Ignoring malformed settings in stored data")
            doc_settings = settings if settings is not None else Settings()

        return cls(
            transactions=transactions,
            categories=categories,
            settings=doc_settings,
        )


def _categories_from(raw) -> Dict[str, Category]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring malformed categories in stored data")
        return {}

    categories: Dict[str, Category] = {}
    for category_id, raw_category in raw.items():
        if not isinstance(raw_category, dict):
            logger.warning(f"Skipping malformed category {category_id}")
            continue
        try:
            category = Category.from_dict(str(category_id), raw_category)
        except ValueError as e:
            logger.warning(f"Skipping category: {e}")
            continue
        categories[category.id] = category
    return categories


def _transactions_from(raw, categories: Dict[str, Category]) -> List[Transaction]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Ignoring malformed transactions in stored data")
        return []

    transactions = []
    for raw_transaction in raw:
        if not isinstance(raw_transaction, dict):
            logger.warning("Skipping malformed transaction record")
            continue
        try:
            transaction = Transaction.from_dict(raw_transaction)
        except ValueError as e:
            logger.warning(f"Skipping transaction: {e}")
            continue

        # A subcategory only counts if it belongs to the referenced category
        if transaction.subcategory_id:
            category = categories.get(transaction.category_id)
            if category is None or not category.find_subcategory(
                transaction.subcategory_id
            ):
                transaction.subcategory_id = None

        transactions.append(transaction)
    return transactions
