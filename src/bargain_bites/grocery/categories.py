"""
Grocery store categories.

Five fixed sections are used to group the shopping list. Classification is a
keyword lookup over the cleaned, lowercased ingredient name.
"""

from typing import List, Tuple

from .keywords import KeywordRule, first_match

# =============================================================================
# CATEGORIES
# =============================================================================
PRODUCE = "Produce"
DAIRY = "Dairy"
MEAT = "Meat"
PANTRY = "Pantry"
BAKERY = "Bakery"

# Display order of the shopping list sections
CATEGORY_ORDER: Tuple[str, ...] = (PRODUCE, DAIRY, MEAT, PANTRY, BAKERY)

DEFAULT_CATEGORY = PANTRY

# Checked top to bottom, first match wins.
CATEGORY_RULES: List[KeywordRule] = [
    KeywordRule(PRODUCE, PRODUCE, any_of=(
        "lettuce", "tomato", "onion", "carrot", "spinach", "potato",
        "banana", "apple", "orange", "cucumber", "bell pepper", "mushroom",
    )),
    KeywordRule(DAIRY, DAIRY, any_of=("milk", "cheese", "yogurt", "butter", "cream", "egg")),
    KeywordRule(MEAT, MEAT, any_of=("chicken", "beef", "pork", "fish", "turkey", "salmon", "ground", "steak")),
    KeywordRule(BAKERY, BAKERY, any_of=("bread", "bun", "bagel", "croissant", "muffin")),
]


def classify_ingredient(name: str) -> str:
    """
    Assign a store category to an ingredient.

    Args:
        name: Cleaned ingredient name (case-insensitive)

    Returns:
        One of CATEGORY_ORDER; DEFAULT_CATEGORY when nothing matches
    """
    return first_match(CATEGORY_RULES, name.lower(), DEFAULT_CATEGORY)


def normalize_category(value: str) -> str:
    """
    Map a user-supplied category label onto the fixed set.

    "produce", " DAIRY " and "Meat" are accepted; anything else becomes
    DEFAULT_CATEGORY.
    """
    if not value:
        return DEFAULT_CATEGORY
    lowered = value.strip().lower()
    for category in CATEGORY_ORDER:
        if category.lower() == lowered:
            return category
    return DEFAULT_CATEGORY
