"""
Grocery ingredient pipeline.

Turns the loosely-structured ingredient strings of a generated meal plan
into a priced, categorized and deduplicated shopping list.
"""

from .aggregator import (
    DAYS_OF_WEEK,
    CategorizedIngredient,
    WeeklyIngredientList,
    aggregate_ingredients,
    day_ingredient_lines,
    recipe_cost,
    recipe_ingredients,
)
from .categories import CATEGORY_ORDER, DEFAULT_CATEGORY, classify_ingredient
from .ingredient_parser import ParsedIngredient, clean_ingredient_name, format_price, parse_ingredient, price_amount
from .pricing import DEFAULT_PRICE, estimate_price

__all__ = [
    "CategorizedIngredient",
    "DAYS_OF_WEEK",
    "ParsedIngredient",
    "CATEGORY_ORDER",
    "DEFAULT_CATEGORY",
    "DEFAULT_PRICE",
    "WeeklyIngredientList",
    "aggregate_ingredients",
    "classify_ingredient",
    "clean_ingredient_name",
    "day_ingredient_lines",
    "estimate_price",
    "format_price",
    "parse_ingredient",
    "price_amount",
    "recipe_cost",
    "recipe_ingredients",
]
