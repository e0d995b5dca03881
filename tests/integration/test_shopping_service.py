"""
Integration tests for shopping.py: stored plan -> shopping list -> receipt.
"""

import pytest

from bargain_bites.data.models import GroceryListItem, MealPlanRecord
from bargain_bites.grocery import CATEGORY_ORDER
from bargain_bites.shopping import RECEIPT_WIDTH, ShoppingListService


@pytest.fixture
def service(db):
    return ShoppingListService(db)


class TestBuildShoppingList:

    def test_from_saved_plan(self, service, saved_plan):
        result = service.build_shopping_list(user_id=1, week="2024-03-13")

        assert result["success"] is True
        assert result["week_of"] == "2024-03-10"
        assert result["week_range"] == "March 10 - March 16, 2024"
        assert result["meal_plan_id"] == saved_plan.id
        assert result["store"] == "Zehrs"
        assert result["meals"]["monday"] == "Chicken Stir Fry"
        assert result["estimated_total"] == "45.21"
        assert result["sale_count"] == 2
        assert result["stores"] == ["Zehrs"]

    def test_categories_in_order(self, service, saved_plan):
        result = service.build_shopping_list(week="2024-03-10")

        assert list(result["categories"]) == list(CATEGORY_ORDER)
        assert [item["name"] for item in result["categories"]["Meat"]] == ["Chicken breast", "Salmon"]
        assert [item["name"] for item in result["categories"]["Bakery"]] == ["Bread"]
        assert len(result["items"]) == 9

    def test_week_without_plan(self, service, saved_plan):
        result = service.build_shopping_list(week="2024-03-20")

        assert result["meal_plan_id"] is None
        assert result["items"] == []
        assert result["estimated_total"] == "0.00"
        assert all(items == [] for items in result["categories"].values())

    def test_other_user_sees_nothing(self, service, saved_plan):
        assert service.build_shopping_list(user_id=2, week="2024-03-10")["items"] == []

    def test_user_items_are_categorized(self, service, db, saved_plan):
        db.add_grocery_item(GroceryListItem(name="Bananas", week_start="2024-03-10"))
        db.add_grocery_item(GroceryListItem(name="Paper towels", category=" produce "))
        db.add_grocery_item(GroceryListItem(name="Dish soap", category="Cleaning"))
        db.add_grocery_item(GroceryListItem(name="Yogurt", week_start="2024-03-17"))

        result = service.build_shopping_list(week="2024-03-10")
        categories = {item["name"]: item["category"] for item in result["user_items"]}

        assert categories == {"Bananas": "Produce", "Paper towels": "Produce", "Dish soap": "Pantry"}
        assert all(item["is_user_added"] for item in result["user_items"])
        assert result["estimated_total"] == "45.21"


class TestFormatReceipt:

    def test_receipt_sections(self, service, db, saved_plan):
        db.add_grocery_item(GroceryListItem(name="Paper towels", quantity="2 rolls"))
        shopping_list = service.build_shopping_list(week="2024-03-10")

        receipt = service.format_receipt(shopping_list)
        lines = receipt.splitlines()

        assert "BARGAIN BITES" in lines[0]
        assert "GROCERY RECEIPT - Zehrs" in lines[1]
        assert "March 10 - March 16, 2024" in lines[2]
        assert "PRODUCE" in lines
        assert "BAKERY" in lines
        assert "YOUR ADDITIONS" in lines
        assert lines[-2].startswith("TOTAL ESTIMATED")
        assert lines[-2].endswith("$45.21")
        assert lines[-1] == "*Prices are estimates and may vary by store"

    def test_item_lines(self, service, saved_plan):
        receipt = service.format_receipt(service.build_shopping_list(week="2024-03-10"))
        lines = receipt.splitlines()

        chicken = next(line for line in lines if line.startswith("Chicken breast"))
        assert "[SALE Zehrs]" in chicken
        assert chicken.endswith("$8.99")
        assert len(chicken) == RECEIPT_WIDTH

    def test_reused_items_show_reused(self, service):
        shopping_list = {
            "week_range": "March 10 - March 16, 2024",
            "categories": {"Pantry": [{"name": "Rice", "price": "$3.49", "is_reused": True}]},
            "estimated_total": "0.00",
        }

        receipt = service.format_receipt(shopping_list)

        assert any(line.startswith("Rice") and line.endswith("REUSED") for line in receipt.splitlines())
        assert "GROCERY RECEIPT" in receipt

    def test_empty_categories_are_skipped(self, service):
        shopping_list = service.build_shopping_list(week="2024-03-20")

        receipt = service.format_receipt(shopping_list)

        assert "PRODUCE" not in receipt
        assert "YOUR ADDITIONS" not in receipt
        assert "$0.00" in receipt


class TestMalformedStoredPlans:
    """Plans saved with odd day values still produce a list."""

    def test_non_object_days_are_skipped(self, service, db):
        record = MealPlanRecord.from_generated(
            {
                "monday": "leftovers",
                "tuesday": {"meal": "Tacos", "ingredients": ["Onion - $2.49"]},
                "wednesday": ["Eggs"],
                "thursday": {"lunch": "sandwich", "dinner": "soup"},
            },
            week_start="2024-03-14",
            store="Zehrs",
        )
        db.save_meal_plan(record)

        result = service.build_shopping_list(week="2024-03-14")

        assert result["meals"] == {"tuesday": "Tacos"}
        assert [item["name"] for item in result["items"]] == ["Onion"]
        assert result["estimated_total"] == "2.49"
        assert "Onion" in service.format_receipt(result)
