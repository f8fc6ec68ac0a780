from datetime import date

import pytest

from errors import ValidationError
from models.category import Subcategory


class TestCategoryService:
    """Tests for CategoryService."""

    def test_defaults_are_seeded(self, services):
        names = [c.name for c in services.categories.find_all()]

        assert names == ["Food & Drinks", "Shopping", "Transport", "Health"]

    def test_create_category(self, services):
        category = services.categories.create(
            "Pets", "🐶", ["Food", " ", "Vet"]
        )

        assert category.id.startswith("c")
        assert category.name == "Pets"
        assert category.emoji == "🐶"
        assert [(s.id, s.name) for s in category.subcategories] == [
            (f"{category.id}-s0", "Food"),
            (f"{category.id}-s1", "Vet"),
        ]
        assert services.categories.find(category.id) is category

    def test_create_category_default_emoji(self, services):
        category = services.categories.create("Utilities")

        assert category.emoji == "💸"
        assert category.subcategories == []

    def test_create_category_requires_name(self, services):
        count = len(services.categories.find_all())

        with pytest.raises(ValidationError, match="Category name required"):
            services.categories.create("   ")

        assert len(services.categories.find_all()) == count

    def test_delete_category_clears_references(self, services):
        """Test deleting "shop" while two transactions use it."""
        t1 = services.transactions.add("expense", 10, date(2024, 3, 5), "shop", "shop-s0")
        t2 = services.transactions.add("expense", 20, date(2024, 3, 6), "shop")
        other = services.transactions.add("expense", 30, date(2024, 3, 7), "food", "food-s1")
        count = len(services.categories.find_all())

        cleared = services.categories.delete_category("shop")

        assert cleared == 2
        assert services.categories.find("shop") is None
        assert len(services.categories.find_all()) == count - 1
        for transaction in (t1, t2):
            assert transaction.category_id is None
            assert transaction.subcategory_id is None
        assert other.category_id == "food"
        assert other.subcategory_id == "food-s1"
        assert len(services.transactions.find_all()) == 3

    def test_delete_nonexistent_category(self, services):
        with pytest.raises(ValidationError, match="Category with ID nope not found"):
            services.categories.delete_category("nope")

    def test_usage_count(self, services):
        services.transactions.add("expense", 10, date(2024, 3, 5), "trans")
        services.transactions.add("income", 10, date(2024, 3, 5), "trans")

        assert services.categories.usage_count("trans") == 2
        assert services.categories.usage_count("health") == 0

    def test_edit_category_fields(self, services):
        category = services.categories.edit_category(
            "health", "Healthcare", "", [Subcategory("health-s0", "Doctor")]
        )

        assert category.name == "Healthcare"
        assert category.emoji == "💸"
        assert [s.id for s in category.subcategories] == ["health-s0"]

    def test_edit_category_removed_subcategory_clears_transactions(self, services):
        """Test removing a subcategory clears it but keeps the category."""
        on_removed = services.transactions.add(
            "expense", 10, date(2024, 3, 5), "food", "food-s1"
        )
        on_kept = services.transactions.add(
            "expense", 10, date(2024, 3, 5), "food", "food-s0"
        )

        services.categories.edit_category(
            "food", "Food", "🍕", [Subcategory("food-s0", "Groceries")]
        )

        assert on_removed.category_id == "food"
        assert on_removed.subcategory_id is None
        assert on_kept.subcategory_id == "food-s0"

    def test_edit_category_requires_name(self, services):
        with pytest.raises(ValidationError):
            services.categories.edit_category("food", "", None, [])

        assert services.categories.find("food").name == "Food & Drinks"
        assert len(services.categories.find("food").subcategories) == 2

    def test_edit_category_rejects_duplicate_subcategory_ids(self, services):
        with pytest.raises(ValidationError, match="unique"):
            services.categories.edit_category(
                "food",
                "Food",
                None,
                [Subcategory("food-s0", "A"), Subcategory("food-s0", "B")],
            )

    def test_edit_nonexistent_category(self, services):
        with pytest.raises(ValidationError, match="not found"):
            services.categories.edit_category("nope", "Name", None, [])

    def test_subcategories_from_names_keeps_existing_ids(self, services):
        food = services.categories.find("food")

        subs = services.categories.subcategories_from_names(
            food, ["Dining Out 🍽", "Snacks", "Groceries 🛒", "Coffee"]
        )

        assert [(s.id, s.name) for s in subs] == [
            ("food-s1", "Dining Out 🍽"),
            ("food-s2", "Snacks"),
            ("food-s0", "Groceries 🛒"),
            ("food-s3", "Coffee"),
        ]

    def test_subcategories_from_names_never_reuses_removed_ids(self, services):
        """Test a renamed subcategory gets a fresh id, so old references are cleared."""
        food = services.categories.find("food")
        transaction = services.transactions.add(
            "expense", 10, date(2024, 3, 5), "food", "food-s0"
        )

        subs = services.categories.subcategories_from_names(food, ["Supermarket"])
        services.categories.edit_category("food", food.name, food.emoji, subs)

        assert [s.id for s in subs] == ["food-s2"]
        assert transaction.subcategory_id is None
