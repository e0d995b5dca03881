"""
Heuristic grocery prices.

Used when a generated ingredient line carries no price. The bands reflect
typical Canadian grocery shelf prices and are deliberately coarse.
"""

import logging
from typing import List

from .keywords import KeywordRule, matching_rule

logger = logging.getLogger(__name__)

DEFAULT_PRICE = "$3.99"

# =============================================================================
# PRICE RULES (checked top to bottom, first match wins)
# =============================================================================
# "mac and cheese" must be seen before the generic cheese rule, and peanut
# butter before plain butter.
PRICE_RULES: List[KeywordRule] = [
    KeywordRule("mac and cheese", "$2.00", all_of=("mac", "cheese")),
    KeywordRule("peanut butter", "$5.99", any_of=("peanut butter",)),
    KeywordRule("fruit", "$3.99", any_of=("apple", "banana", "orange")),
    KeywordRule("leafy greens", "$2.99", any_of=("lettuce", "spinach", "salad", "kale", "greens", "arugula")),
    KeywordRule("produce", "$2.49", any_of=("tomato", "cucumber", "onion")),
    KeywordRule("cheese", "$4.99", any_of=("cheese",), none_of=("mac",)),
    KeywordRule("milk and yogurt", "$4.29", any_of=("milk", "yogurt")),
    KeywordRule("eggs", "$3.99", any_of=("egg",)),
    KeywordRule("meat", "$8.99", any_of=("chicken", "beef", "pork")),
    KeywordRule("fish", "$12.99", any_of=("fish", "salmon")),
    KeywordRule("bread and pasta", "$2.99", any_of=("bread", "pasta")),
    KeywordRule("grains", "$3.49", any_of=("rice", "quinoa")),
    KeywordRule("oil", "$5.99", any_of=("oil", "olive")),
    KeywordRule("butter", "$4.49", any_of=("butter", "margarine")),
    KeywordRule("potato", "$3.99", any_of=("potato",)),
]


def estimate_price(name: str) -> str:
    """
    Estimate a shelf price for an ingredient with no listed price.

    Args:
        name: Ingredient name (lowercased by the caller; lowered again here)

    Returns:
        Price string formatted as "$X.XX", never empty
    """
    lowered = name.lower()
    rule = matching_rule(PRICE_RULES, lowered)
    if rule is None:
        logger.debug(f"No price rule for '{lowered}', using default {DEFAULT_PRICE}")
        return DEFAULT_PRICE
    return rule.value

