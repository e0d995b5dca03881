"""
Shopping list service.

Joins the stored meal plan for a week with the grocery pipeline and the
user's own additions to produce the receipt-style shopping list.
"""

import logging
from typing import Any, Dict, List

from .data.database import DatabaseInterface
from .data.models import GroceryListItem
from .grocery import aggregate_ingredients
from .grocery.categories import classify_ingredient, normalize_category
from .week import WeekValue, format_week_range, week_key_str, week_start

logger = logging.getLogger(__name__)

RECEIPT_WIDTH = 48


class ShoppingListService:
    """Builds weekly shopping lists from stored meal plans."""

    def __init__(self, db: DatabaseInterface):
        """
        Initialize Shopping List Service.

        Args:
            db: Database interface instance
        """
        self.db = db

    def _user_item_dict(self, item: GroceryListItem) -> Dict[str, Any]:
        data = item.to_dict()
        data["category"] = normalize_category(item.category) if item.category else classify_ingredient(item.name)
        return data

    def build_shopping_list(self, user_id: int = 1, week: WeekValue = None) -> Dict[str, Any]:
        """
        Build the shopping list for a week.

        Args:
            user_id: Owner of the meal plan and added items
            week: Any date in the week (defaults to the current week)

        Returns:
            Dictionary with the week, ingredients grouped by category,
            the user's additions and the estimated total
        """
        week_key = week_start(week)
        plan = self.db.get_meal_plan_for_week(user_id, week_key)

        if plan:
            ingredients = aggregate_ingredients(plan.meal_plan, week_key)
            logger.info(f"Built shopping list with {len(ingredients)} items for week {week_key_str(week_key)}")
        else:
            ingredients = aggregate_ingredients({}, week_key)
            logger.info(f"No meal plan for week {week_key_str(week_key)}")

        user_items = self.db.get_grocery_items(user_id=user_id, week=week_key)

        return {
            "success": True,
            "week_of": week_key_str(week_key),
            "week_range": format_week_range(week_key),
            "meal_plan_id": plan.id if plan else None,
            "store": plan.store if plan else None,
            "meals": plan.get_meal_names() if plan else {},
            "categories": {
                category: [item.to_dict() for item in items]
                for category, items in ingredients.by_category().items()
            },
            "items": [item.to_dict() for item in ingredients],
            "user_items": [self._user_item_dict(item) for item in user_items],
            "estimated_total": f"{ingredients.estimated_total():.2f}",
            "sale_count": len(ingredients.sale_items()),
            "stores": ingredients.stores(),
        }

    def format_receipt(self, shopping_list: Dict[str, Any]) -> str:
        """
        Format a shopping list as a plain-text receipt.

        Args:
            shopping_list: Output of build_shopping_list

        Returns:
            Receipt string
        """
        def line(left: str, right: str) -> str:
            gap = max(1, RECEIPT_WIDTH - len(left) - len(right))
            return f"{left}{'.' * gap}{right}"

        header = "GROCERY RECEIPT"
        if shopping_list.get("store"):
            header += f" - {shopping_list['store']}"

        lines: List[str] = [
            "BARGAIN BITES".center(RECEIPT_WIDTH),
            header.center(RECEIPT_WIDTH),
            shopping_list.get("week_range", "").center(RECEIPT_WIDTH),
            "=" * RECEIPT_WIDTH,
        ]

        for category, items in shopping_list.get("categories", {}).items():
            if not items:
                continue
            lines.append("")
            lines.append(category.upper())
            lines.append("-" * RECEIPT_WIDTH)
            for item in items:
                name = item["name"]
                if item.get("is_on_sale"):
                    name += f" [SALE {item['store']}]"
                price = "REUSED" if item.get("is_reused") else item["price"]
                lines.append(line(name, price))

        user_items = shopping_list.get("user_items", [])
        if user_items:
            lines.append("")
            lines.append("YOUR ADDITIONS")
            lines.append("-" * RECEIPT_WIDTH)
            for item in user_items:
                name = f"* {item['name']}"
                if item.get("quantity"):
                    name += f" ({item['quantity']})"
                lines.append(line(name, "$--.--"))

        lines.append("=" * RECEIPT_WIDTH)
        lines.append(line("TOTAL ESTIMATED", f"${shopping_list.get('estimated_total', '0.00')}"))
        lines.append("*Prices are estimates and may vary by store")

        return "\n".join(lines)
