"""State store: loading, saving, importing and resetting the persisted document."""

import json
from pathlib import Path
from typing import Union

from errors import DocumentParseError
from models.category import Category, Subcategory
from models.document import Document
from models.settings import Settings
from logger import get_logger

logger = get_logger()

# (id, name, emoji, subcategory names)
DEFAULT_CATEGORIES = [
    ("food", "Food & Drinks", "🍕", ["Groceries 🛒", "Dining Out 🍽"]),
    ("shop", "Shopping", "🛍️", ["Online", "Offline"]),
    ("trans", "Transport", "🚗", ["Cab 🚕", "Fuel ⛽"]),
    ("health", "Health", "💊", ["Doctor", "Medicines"]),
]


def seed_default_categories(doc: Document) -> bool:
    """Insert the starter categories if the document has none.

    Args:
        doc: Document to seed.

    Returns:
        True if categories were added, False if any category already existed.
    """
    if doc.categories:
        return False

    for category_id, name, emoji, sub_names in DEFAULT_CATEGORIES:
        doc.categories[category_id] = Category(
            id=category_id,
            name=name,
            emoji=emoji,
            subcategories=[
                Subcategory(id=f"{category_id}-s{i}", name=sub_name)
                for i, sub_name in enumerate(sub_names)
            ],
        )
    return True


def export_json(doc: Document) -> str:
    """Serialize the document in the backup/export file format (pretty-printed)."""
    return json.dumps(doc.to_dict(), indent=2, ensure_ascii=False)


class StateStore:
    """Owns persistence of the document under a fixed storage key."""

    def __init__(self, storage, key: str):
        """Initialize the state store.

        Args:
            storage: Key/value storage (StorageManager or a test double).
            key: Storage key the document lives under.
        """
        self.storage = storage
        self.key = key

    def load(self) -> Document:
        """Read the persisted document.

        Missing or malformed data falls back to defaults field by field; a
        blob that is not JSON at all is logged and treated as no data. A
        document without categories is seeded with the defaults.

        Returns:
            The loaded Document.
        """
        raw = None
        try:
            raw = self.storage.get_item(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read stored data, starting fresh: {e}")

        data = {}
        if raw:
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.error(f"Stored data is not valid JSON, starting fresh: {e}")
                parsed = {}
            if isinstance(parsed, dict):
                data = parsed
            else:
                logger.error("Stored data is not a JSON object, starting fresh")

        doc = Document.from_dict(data)
        if seed_default_categories(doc):
            logger.info("Seeded default categories")
        logger.debug(
            f"Loaded {len(doc.transactions)} transactions and "
            f"{len(doc.categories)} categories"
        )
        return doc

    def save(self, doc: Document) -> None:
        """Serialize the full document and overwrite storage.

        Write failures are logged, not raised.
        """
        try:
            self.storage.set_item(self.key, json.dumps(doc.to_dict(), ensure_ascii=False))
        except OSError as e:
            logger.error(f"Failed to persist data: {e}")

    def import_replace(self, doc: Document, raw_json: str) -> Document:
        """Replace the document's contents with imported data.

        Missing transactions or categories become empty; missing settings
        keep the current settings.

        Args:
            doc: Current document, replaced in place on success.
            raw_json: Text of the imported file.

        Returns:
            The same document object, now holding the imported data.

        Raises:
            DocumentParseError: If raw_json is not JSON or not a JSON object.
                The document is left untouched.
        """
        try:
            parsed = json.loads(raw_json)
        except (json.JSONDecodeError, TypeError) as e:
            raise DocumentParseError(f"Could not import: {e}")

        if not isinstance(parsed, dict):
            raise DocumentParseError("Could not import: data is not a JSON object")

        imported = Document.from_dict(parsed, settings=doc.settings)
        doc.replace_with(imported)
        self.save(doc)

        logger.info(
            f"Imported {len(doc.transactions)} transactions and "
            f"{len(doc.categories)} categories"
        )
        return doc

    def reset_all(self, doc: Document) -> Document:
        """Clear all data except the PIN, then re-seed the default categories.

        Returns:
            The same document object, now reset.
        """
        doc.replace_with(
            Document(settings=Settings(pin_hash=doc.settings.pin_hash))
        )
        seed_default_categories(doc)
        self.save(doc)

        logger.info("All data cleared")
        return doc

    def export_to(self, doc: Document, path: Union[str, Path]) -> Path:
        """Write the document to a file in the export format.

        Raises:
            OSError: If the file cannot be written.
        """
        path = Path(path)
        path.write_text(export_json(doc), encoding="utf-8")
        logger.info(f"Exported data to {path}")
        return path
