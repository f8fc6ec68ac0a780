from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from models.category import Category, Subcategory
from models.document import Document
from models.settings import Settings
from models.transaction import Transaction


def _sample_document():
    food = Category(
        id="food",
        name="Food & Drinks",
        emoji="🍕",
        subcategories=[Subcategory("food-s0", "Groceries 🛒"), Subcategory("food-s1", "Dining Out 🍽")],
    )
    return Document(
        transactions=[
            Transaction(
                id="1709600000000",
                type="expense",
                amount=Decimal("250"),
                date=date(2024, 3, 5),
                category_id="food",
                subcategory_id="food-s0",
                note="weekly shop",
            ),
            Transaction(
                id="1709600000001",
                type="income",
                amount=Decimal("1200.50"),
                date=date(2024, 3, 1),
            ),
        ],
        categories={"food": food},
        settings=Settings(
            pin_hash="NDMyMQ==",
            biometric_enabled=True,
            last_backup_at=datetime(2024, 3, 5, 10, 30, tzinfo=timezone.utc),
        ),
    )


class TestDocumentSerialization:
    """Tests for Document.to_dict / Document.from_dict."""

    def test_wire_shape(self):
        """Test the persisted JSON uses the tx/cats/settings keys."""
        data = _sample_document().to_dict()

        assert set(data) == {"tx", "cats", "settings"}
        assert data["tx"][0] == {
            "id": "1709600000000",
            "type": "expense",
            "amount": 250,
            "catId": "food",
            "subId": "food-s0",
            "date": "2024-03-05",
            "note": "weekly shop",
        }
        assert data["cats"]["food"]["subs"][1] == {"id": "food-s1", "name": "Dining Out 🍽"}
        assert data["settings"]["pinHash"] == "NDMyMQ=="
        assert data["settings"]["bio"] is True

    def test_round_trip(self):
        """Test a document survives serialization field for field."""
        original = _sample_document()

        restored = Document.from_dict(original.to_dict())

        assert restored == original

    def test_amount_wire_form(self):
        """Test amounts are JSON numbers unless a number would lose digits."""
        def wire(amount):
            return Transaction(
                id="1", type="expense", amount=Decimal(amount), date=date(2024, 3, 5)
            ).to_dict()["amount"]

        assert wire("250") == 250
        assert wire("12.50") == 12.5
        assert wire("1234567.123456789012") == "1234567.123456789012"

    def test_missing_fields_default(self):
        """Test an empty object yields an empty document."""
        doc = Document.from_dict({})

        assert doc.transactions == []
        assert doc.categories == {}
        assert doc.settings == Settings()

    def test_bad_field_does_not_discard_others(self):
        """Test one malformed top-level field falls back alone."""
        data = _sample_document().to_dict()
        data["cats"] = "garbage"

        doc = Document.from_dict(data)

        assert doc.categories == {}
        assert len(doc.transactions) == 2
        assert doc.settings.pin_hash == "NDMyMQ=="

    def test_non_numeric_amount_becomes_zero(self):
        """Test a transaction with a bad amount is kept with amount zero."""
        doc = Document.from_dict(
            {"tx": [{"id": "1", "type": "expense", "amount": "abc", "date": "2024-03-05"}]}
        )

        assert len(doc.transactions) == 1
        assert doc.transactions[0].amount == Decimal("0")

    def test_unknown_type_becomes_expense(self):
        doc = Document.from_dict(
            {"tx": [{"id": "1", "type": "transfer", "amount": 5, "date": "2024-03-05"}]}
        )

        assert doc.transactions[0].type == "expense"

    def test_transaction_without_date_is_dropped(self):
        """Test records without a usable date are skipped, others kept."""
        doc = Document.from_dict(
            {
                "tx": [
                    {"id": "1", "type": "expense", "amount": 5, "date": "not a date"},
                    {"id": "2", "type": "expense", "amount": 5, "date": "2024-03-05"},
                ]
            }
        )

        assert [t.id for t in doc.transactions] == ["2"]

    def test_foreign_subcategory_is_cleared(self):
        """Test a subId not belonging to the category is treated as absent."""
        data = _sample_document().to_dict()
        data["tx"][0]["subId"] = "shop-s0"

        doc = Document.from_dict(data)

        assert doc.transactions[0].category_id == "food"
        assert doc.transactions[0].subcategory_id is None

    def test_category_without_name_is_dropped(self):
        doc = Document.from_dict(
            {"cats": {"x": {"id": "x", "name": ""}, "y": {"id": "y", "name": "Pets"}}}
        )

        assert list(doc.categories) == ["y"]
        assert doc.categories["y"].emoji == "💸"

    @pytest.mark.parametrize("emoji", [5, None, ["🐶"], "  "])
    def test_non_string_emoji_uses_default(self, emoji):
        doc = Document.from_dict({"cats": {"p": {"id": "p", "name": "Pets", "emoji": emoji}}})

        assert doc.categories["p"].emoji == "💸"

    def test_missing_settings_uses_given_settings(self):
        """Test the settings fallback can be supplied by the caller."""
        current = Settings(pin_hash="abc")

        doc = Document.from_dict({"tx": []}, settings=current)

        assert doc.settings is current

    def test_replace_with_keeps_identity(self):
        doc = _sample_document()
        other = Document()

        doc.replace_with(other)

        assert doc.transactions == []
        assert doc.categories == {}
