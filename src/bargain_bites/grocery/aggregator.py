"""
Weekly ingredient aggregation.

Walks a generated meal plan (seven weekday keys, each a meal with an
``ingredients`` list or a lunch/dinner pair) and produces one priced,
categorized and deduplicated shopping list for the week.

Malformed plan data is skipped, never raised: a day that is not a mapping
contributes nothing, and neither does an ingredient that is not a string or
has no name left after cleaning.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from .categories import CATEGORY_ORDER, DEFAULT_CATEGORY, classify_ingredient
from .ingredient_parser import ParsedIngredient, parse_ingredient
from .pricing import estimate_price
from ..week import WeekValue, week_start

logger = logging.getLogger(__name__)

DAYS_OF_WEEK = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class CategorizedIngredient(ParsedIngredient):
    """A parsed ingredient placed in a store category."""

    category: str = DEFAULT_CATEGORY
    day: str = ""  # Weekday the ingredient was first seen on

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["category"] = self.category
        data["day"] = self.day
        return data


class WeeklyIngredientList:
    """
    Shopping list for one week, ordered by CATEGORY_ORDER.

    Behaves like a read-only list of CategorizedIngredient.
    """

    def __init__(self, items: Sequence[CategorizedIngredient], week_of: Optional[datetime] = None):
        self._items = list(items)
        self.week_of = week_of

    def __iter__(self) -> Iterator[CategorizedIngredient]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, WeeklyIngredientList):
            return self._items == other._items and self.week_of == other.week_of
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"WeeklyIngredientList(week_of={self.week_of!r}, items={len(self._items)})"

    @property
    def items(self) -> List[CategorizedIngredient]:
        return list(self._items)

    def by_category(self) -> "OrderedDict[str, List[CategorizedIngredient]]":
        """All five categories in display order, empty ones included."""
        sections: "OrderedDict[str, List[CategorizedIngredient]]" = OrderedDict(
            (category, []) for category in CATEGORY_ORDER
        )
        for item in self._items:
            sections[item.category].append(item)
        return sections

    def estimated_total(self) -> Decimal:
        """Sum of prices; reused ingredients were paid for earlier and add nothing."""
        return sum((item.amount for item in self._items if not item.is_reused), Decimal("0.00"))

    def sale_items(self) -> List[CategorizedIngredient]:
        return [item for item in self._items if item.is_on_sale]

    def stores(self) -> List[str]:
        """Distinct sale stores in first-seen order."""
        seen: List[str] = []
        for item in self._items:
            if item.is_on_sale and item.store not in seen:
                seen.append(item.store)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "week_of": self.week_of.date().isoformat() if self.week_of else None,
            "items": [item.to_dict() for item in self._items],
            "estimated_total": f"{self.estimated_total():.2f}",
        }


def _ingredient_list(meal: Any) -> Optional[List[Any]]:
    if isinstance(meal, Mapping) and isinstance(meal.get("ingredients"), list):
        return meal["ingredients"]
    return None


def day_ingredient_lines(day: Any) -> List[Any]:
    """
    Ingredient lines for one day of a meal plan.

    A day with both lunch and dinner ingredient lists uses lunch followed by
    dinner; otherwise its own ``ingredients`` list; otherwise nothing.
    """
    if not isinstance(day, Mapping):
        return []

    lunch = _ingredient_list(day.get("lunch"))
    dinner = _ingredient_list(day.get("dinner"))
    if lunch is not None and dinner is not None:
        return lunch + dinner

    flat = _ingredient_list(day)
    return flat if flat is not None else []


def _priced(parsed: ParsedIngredient) -> ParsedIngredient:
    if parsed.has_price:
        return parsed
    return parsed.with_price(estimate_price(parsed.name.lower()))


def aggregate_ingredients(meal_plan: Any, week_key: WeekValue = None) -> WeeklyIngredientList:
    """
    Build the week's shopping list from a meal plan.

    Args:
        meal_plan: Mapping of lowercase weekday name -> day object
        week_key: Any date in the week the plan belongs to; resolved to its
            Sunday key and carried on the result

    Returns:
        WeeklyIngredientList grouped in CATEGORY_ORDER. Within a category
        an ingredient name appears once, attributed to the first day it was
        seen on.
    """
    week_of = week_start(week_key) if week_key is not None else None
    buckets: Dict[str, List[CategorizedIngredient]] = {category: [] for category in CATEGORY_ORDER}
    seen: Dict[str, set] = {category: set() for category in CATEGORY_ORDER}

    if not isinstance(meal_plan, Mapping):
        logger.debug(f"Meal plan is not a mapping ({type(meal_plan).__name__}), nothing to aggregate")
        return WeeklyIngredientList([], week_of=week_of)

    for day_name in DAYS_OF_WEEK:
        day = meal_plan.get(day_name)
        if day is None:
            continue
        if not isinstance(day, Mapping):
            logger.debug(f"Skipping {day_name}: not a meal object")
            continue

        for raw in day_ingredient_lines(day):
            if not isinstance(raw, str):
                logger.debug(f"Skipping non-string ingredient on {day_name}: {raw!r}")
                continue

            parsed = parse_ingredient(raw)
            if not parsed.name:
                logger.debug(f"Dropping ingredient with no name on {day_name}: {raw!r}")
                continue

            parsed = _priced(parsed)
            category = classify_ingredient(parsed.name.lower())

            if parsed.name in seen[category]:
                continue
            seen[category].add(parsed.name)

            buckets[category].append(CategorizedIngredient(
                name=parsed.name,
                price=parsed.price,
                is_on_sale=parsed.is_on_sale,
                store=parsed.store,
                is_reused=parsed.is_reused,
                category=category,
                day=day_name,
            ))

    items = [item for category in CATEGORY_ORDER for item in buckets[category]]
    logger.debug(f"Aggregated {len(items)} ingredients for week {week_of}")
    return WeeklyIngredientList(items, week_of=week_of)


def recipe_ingredients(raw_lines: Any) -> List[ParsedIngredient]:
    """
    Ingredients of a single recipe, for the recipe detail view.

    Every usable line is kept (no deduplication) and priced; reused
    ingredients keep their flag so the view can mark them.
    """
    if not isinstance(raw_lines, list):
        return []

    ingredients = []
    for raw in raw_lines:
        parsed = parse_ingredient(raw)
        if parsed.name:
            ingredients.append(_priced(parsed))
    return ingredients


def recipe_cost(raw_lines: Any) -> Decimal:
    """Cost of one recipe, excluding reused ingredients."""
    return sum(
        (item.amount for item in recipe_ingredients(raw_lines) if not item.is_reused),
        Decimal("0.00"),
    )
