import json
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from errors import DocumentParseError
from models.document import Document
from services.state import StateStore, export_json, seed_default_categories
from storage.manager import StorageManager
from tests.helpers import MemoryStorage


class TestSeedDefaultCategories:
    """Tests for seed_default_categories."""

    def test_seeds_empty_document(self):
        doc = Document()

        assert seed_default_categories(doc) is True

        assert list(doc.categories) == ["food", "shop", "trans", "health"]
        for category in doc.categories.values():
            assert [s.id for s in category.subcategories] == [
                f"{category.id}-s0",
                f"{category.id}-s1",
            ]
        assert doc.categories["food"].subcategories[0].name == "Groceries 🛒"

    def test_no_op_when_any_category_exists(self, services):
        services.store.reset_all(services.document)
        services.categories.delete_category("food")
        services.categories.delete_category("shop")
        services.categories.delete_category("trans")

        assert seed_default_categories(services.document) is False
        assert list(services.document.categories) == ["health"]


class TestStateStore:
    """Tests for StateStore load/save/import/reset."""

    def test_load_empty_storage_seeds_defaults(self):
        store = StateStore(MemoryStorage(), "doc")

        doc = store.load()

        assert doc.transactions == []
        assert len(doc.categories) == 4
        assert doc.settings.pin_hash is None

    def test_load_malformed_json_falls_back(self):
        """Test unparseable stored data is treated as no data."""
        store = StateStore(MemoryStorage({"doc": "{not json"}), "doc")

        doc = store.load()

        assert doc.transactions == []
        assert len(doc.categories) == 4

    def test_load_undecodable_bytes_falls_back(self, test_config):
        """Test a stored file that is not valid UTF-8 is treated as no data."""
        storage = StorageManager(test_config)
        test_config.data_dir.mkdir(parents=True, exist_ok=True)
        storage.path_for("doc").write_bytes(b'{"tx": [\xff\xfe]}')

        doc = StateStore(storage, "doc").load()

        assert doc.transactions == []
        assert len(doc.categories) == 4

    def test_load_non_object_falls_back(self):
        store = StateStore(MemoryStorage({"doc": "[1, 2, 3]"}), "doc")

        doc = store.load()

        assert doc.transactions == []

    def test_added_transaction_survives_reload(self, services, storage):
        """Test a transaction reloads field for field."""
        added = services.transactions.add(
            type="expense",
            amount="12.75",
            date=date(2024, 3, 5),
            category_id="food",
            subcategory_id="food-s1",
            note="lunch",
        )

        reloaded = StateStore(storage, services.config.storage_key).load()

        assert reloaded.transactions == [added]
        assert reloaded.transactions[0].amount == Decimal("12.75")

    def test_save_failure_is_swallowed(self, services, storage):
        """Test a storage write failure is logged, not raised."""
        storage.fail_writes = True

        services.store.save(services.document)

    def test_saved_blob_is_single_json_object(self, services, storage):
        services.store.save(services.document)

        data = json.loads(storage.items[services.config.storage_key])

        assert set(data) == {"tx", "cats", "settings"}

    def test_import_replace(self, services):
        services.lock.set_pin("1234")
        raw = json.dumps(
            {
                "tx": [{"id": "9", "type": "income", "amount": 100, "date": "2024-01-02"}],
                "cats": {"pets": {"id": "pets", "name": "Pets", "emoji": "🐶", "subs": []}},
            }
        )

        doc = services.store.import_replace(services.document, raw)

        assert doc is services.document
        assert [t.id for t in doc.transactions] == ["9"]
        assert list(doc.categories) == ["pets"]
        # No settings in the file: current settings are kept
        assert services.lock.verify_pin("1234")

    def test_import_missing_lists_become_empty(self, services):
        services.transactions.add("expense", 5, date(2024, 3, 5))

        services.store.import_replace(services.document, "{}")

        assert services.document.transactions == []
        assert services.document.categories == {}

    def test_import_not_json_leaves_document_unchanged(self, services):
        """Test importing "not json" fails and changes nothing."""
        services.transactions.add("expense", 250, date(2024, 3, 5), "food", "food-s0")
        before = services.document.to_dict()

        with pytest.raises(DocumentParseError):
            services.store.import_replace(services.document, "not json")

        assert services.document.to_dict() == before

    def test_import_non_object_is_rejected(self, services):
        before = services.document.to_dict()

        with pytest.raises(DocumentParseError, match="not a JSON object"):
            services.store.import_replace(services.document, "[]")

        assert services.document.to_dict() == before

    def test_reset_all_keeps_pin_only(self, services):
        services.lock.set_pin("4321")
        services.lock.toggle_biometric()
        services.document.settings.last_backup_at = datetime.now(timezone.utc)
        services.transactions.add("expense", 5, date(2024, 3, 5))
        services.categories.create("Pets")

        doc = services.store.reset_all(services.document)

        assert doc.transactions == []
        assert list(doc.categories) == ["food", "shop", "trans", "health"]
        assert services.lock.verify_pin("4321")
        assert doc.settings.biometric_enabled is False
        assert doc.settings.last_backup_at is None

    def test_export_to_writes_pretty_json(self, services, tmp_path):
        services.transactions.add("expense", 250, date(2024, 3, 5), "food")
        path = tmp_path / "expense-backup.json"

        services.store.export_to(services.document, path)

        text = path.read_text(encoding="utf-8")
        assert text == export_json(services.document)
        assert text.startswith('{\n  "tx"')
        assert json.loads(text)["tx"][0]["amount"] == 250
