"""
Weekly meal plan generation.

Builds a prompt from the user's preferences and the selected store's flyer,
asks the LLM for a seven-day plan and pulls the JSON plan out of the reply.
Ingredient lines in the plan use the grammar the grocery pipeline parses:

    "ingredient name [SALE:Store] - $X.XX"
    "ingredient name - $X.XX"
    "ingredient name [REUSED]"
"""

import copy
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import settings
from ..data.models import SaleItem, UserPreferences, sale_items_from_flyer
from ..llm_provider import LLMProvider, get_llm_provider

logger = logging.getLogger(__name__)

MAX_PROMPT_SALE_ITEMS = 50
DEFAULT_CUISINES = ["american"]
DEFAULT_COOKING_EXPERIENCE = "beginner"

# Store ID -> flyer data file
STORE_FLYER_FILES: Dict[str, str] = {
    "zehrs-conestoga": "zehrs.json",
    "zehrs": "zehrs.json",
    "walmart-farmers-market": "walmart.json",
    "walmart": "walmart.json",
    "sobeys": "sobeys.json",
    "belfiores-independent": "independent.json",
    "independent": "independent.json",
    "tnt-supermarket": "t&t.json",
    "t&t": "t&t.json",
    "real-canadian-superstore": "zehrs.json",  # no flyer of its own yet
}

# Store ID -> name used in [SALE:<store>] markers
STORE_DISPLAY_NAMES: Dict[str, str] = {
    "zehrs-conestoga": "Zehrs",
    "zehrs": "Zehrs",
    "walmart-farmers-market": "Walmart",
    "walmart": "Walmart",
    "sobeys": "Sobeys",
    "belfiores-independent": "Independent",
    "independent": "Independent",
    "tnt-supermarket": "T&T",
    "t&t": "T&T",
    "real-canadian-superstore": "Real Canadian Superstore",
}

# Served when no model is available
FALLBACK_MEAL_PLAN: Dict[str, Any] = {
    "monday": {
        "meal": "Pasta with Marinara Sauce",
        "ingredients": ["Pasta", "Marinara sauce", "Parmesan cheese", "Garlic", "Olive oil"],
        "totalCost": 8.50,
        "cookingInstructions": "Boil pasta according to package directions. Heat marinara sauce in a pan. Mix together and serve with parmesan.",
    },
    "tuesday": {
        "meal": "Grilled Chicken with Rice",
        "ingredients": ["Chicken breast", "Rice", "Mixed vegetables", "Soy sauce", "Garlic"],
        "totalCost": 12.00,
        "cookingInstructions": "Season chicken and grill. Cook rice. Steam vegetables. Serve together with soy sauce.",
    },
    "wednesday": {
        "meal": "Vegetable Stir Fry",
        "ingredients": ["Mixed vegetables", "Tofu", "Soy sauce", "Ginger", "Rice"],
        "totalCost": 9.75,
        "cookingInstructions": "Cut vegetables and tofu. Stir fry in a hot pan with oil. Add soy sauce and ginger. Serve over rice.",
    },
    "thursday": {
        "meal": "Fish and Potatoes",
        "ingredients": ["White fish fillet", "Potatoes", "Lemon", "Herbs", "Butter"],
        "totalCost": 14.25,
        "cookingInstructions": "Season fish with herbs and lemon. Bake fish and roast potatoes in oven. Serve with lemon butter.",
    },
    "friday": {
        "meal": "Tacos",
        "ingredients": ["Ground beef", "Taco shells", "Lettuce", "Tomatoes", "Cheese", "Sour cream"],
        "totalCost": 11.50,
        "cookingInstructions": "Cook ground beef with taco seasoning. Warm taco shells. Assemble with toppings.",
    },
    "saturday": {
        "meal": "Pizza Night",
        "ingredients": ["Pizza dough", "Tomato sauce", "Mozzarella cheese", "Pepperoni", "Vegetables"],
        "totalCost": 13.00,
        "cookingInstructions": "Roll out dough. Add sauce, cheese, and toppings. Bake at 450°F for 12-15 minutes.",
    },
    "sunday": {
        "meal": "Roast Dinner",
        "ingredients": ["Chicken", "Potatoes", "Carrots", "Onions", "Herbs", "Gravy"],
        "totalCost": 16.75,
        "cookingInstructions": "Season chicken with herbs. Roast with vegetables at 375°F for 1.5 hours. Make gravy from drippings.",
    },
    "totalWeeklyCost": 85.75,
    "savings": 15.25,
}

JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class MealPlanRequestError(ValueError):
    """The plan request is missing or has invalid fields."""


class MealPlanParseError(ValueError):
    """The model reply did not contain a usable JSON plan."""


@dataclass
class MealPlanRequest:
    """What the user asked for."""

    store: str
    budget: float
    household_size: int
    cuisine_preferences: List[str] = field(default_factory=list)
    dietary_restrictions: List[str] = field(default_factory=list)
    cooking_experience: Optional[str] = None

    def apply_preferences(self, prefs: Optional[UserPreferences]) -> "MealPlanRequest":
        """
        Fill fields the request left empty from saved preferences.

        Values given in the request always win. Preferences never saved
        (or None) leave the request untouched.
        """
        if prefs is None or not prefs.preferences_set:
            return self
        if not self.budget or self.budget <= 0:
            self.budget = prefs.weekly_budget
        if not self.household_size or self.household_size <= 0:
            self.household_size = prefs.household_size
        if not self.dietary_restrictions:
            self.dietary_restrictions = list(prefs.dietary_restrictions)
        if not self.cooking_experience:
            self.cooking_experience = prefs.cooking_experience
        return self

    def validate(self) -> "MealPlanRequest":
        """
        Check required fields and fill defaults.

        Raises:
            MealPlanRequestError: on a missing store or non-positive
                budget/household size
        """
        if not self.store:
            raise MealPlanRequestError("Store is required")
        if not self.budget or self.budget <= 0:
            raise MealPlanRequestError("Valid budget is required")
        if not self.household_size or self.household_size <= 0:
            raise MealPlanRequestError("Valid household size is required")
        if not self.cuisine_preferences:
            self.cuisine_preferences = list(DEFAULT_CUISINES)
        if not self.cooking_experience:
            self.cooking_experience = DEFAULT_COOKING_EXPERIENCE
        return self

    @property
    def store_display_name(self) -> str:
        return STORE_DISPLAY_NAMES.get(self.store.lower(), self.store)


def load_sale_items(store: str, flyer_dir: Optional[str] = None) -> List[SaleItem]:
    """
    Load the discounted items from a store's flyer file.

    Args:
        store: Store ID (case-insensitive), e.g. "zehrs"
        flyer_dir: Directory of flyer JSON files (defaults to settings)

    Returns:
        SaleItems with a positive savings percentage

    Raises:
        MealPlanRequestError: for an unknown store
        OSError / json.JSONDecodeError: if the flyer file cannot be read
    """
    file_name = STORE_FLYER_FILES.get(store.lower())
    if not file_name:
        raise MealPlanRequestError("Invalid store selected")

    path = Path(flyer_dir or settings.FLYER_DIR) / file_name
    with open(path, encoding="utf-8") as f:
        entries = json.load(f)

    items = sale_items_from_flyer(entries if isinstance(entries, list) else [])
    logger.info(f"Loaded {len(items)} sale items for {store} from {path}")
    return items


def build_prompt(request: MealPlanRequest, sale_items: List[SaleItem]) -> str:
    """Render the generation prompt."""
    cuisines = ", ".join(request.cuisine_preferences)
    restrictions = ", ".join(request.dietary_restrictions) or "None"
    size = request.household_size
    experience = request.cooking_experience
    store_name = request.store_display_name
    sale_lines = "\n".join(item.describe() for item in sale_items[:MAX_PROMPT_SALE_ITEMS])

    return f"""
You are a meal planning expert. Create a weekly meal plan (Monday to Sunday) based on the following:

STORE: {request.store}
CUISINE PREFERENCES: {cuisines}
DIETARY RESTRICTIONS: {restrictions}
BUDGET: ${request.budget:g} per week
HOUSEHOLD SIZE: {size} people
COOKING EXPERIENCE: {experience}

AVAILABLE SALE ITEMS:
{sale_lines}

IMPORTANT: When creating meals, prioritize using these sale items and consider ingredient reuse across the week:
1. If it's from the sale items above, format as: "ingredient name [SALE:{store_name}] - $X.XX"
2. If it's not on sale, format as: "ingredient name - $X.XX" (use reasonable market prices)
3. Always include the actual price for each ingredient
4. Use the exact prices from the sale items when available
5. For non-sale items, estimate realistic grocery store prices
6. CONSIDER INGREDIENT REUSE: Plan meals that share common ingredients
7. PORTION SIZING: When an ingredient is used in multiple meals, only show the price for the first meal, then mark subsequent uses with "[REUSED]" marker
8. REALISTIC QUANTITIES: Consider that a family of {size} might not finish a whole package of an ingredient in one meal

REQUIREMENTS:
1. Create 7 different meals (one for each day)
2. Use items from the sale list when possible to maximize savings
3. Consider the cooking experience level ({experience})
4. Ensure meals fit the cuisine preferences: {cuisines}
5. Respect dietary restrictions: {restrictions}
6. Stay within the ${request.budget:g} weekly budget, try to aim for 5% below the budget
7. Scale portions for {size} people
8. Include variety in the week (different proteins, vegetables, etc.)

Format the response as a JSON object with this structure:
{{
  "monday": {{
    "meal": "Meal Name",
    "ingredients": ["ingredient 1 [SALE:Store] - $X.XX", "ingredient 2 - $X.XX", ...],
    "totalCost": 15.50,
    "cookingInstructions": "Brief instructions"
  }},
  "tuesday": {{
    "meal": "Another Meal",
    "ingredients": ["ingredient 1 [REUSED]", "new ingredient - $X.XX", ...],
    "totalCost": 8.25,
    "cookingInstructions": "Brief instructions"
  }},
  "wednesday": {{ ... }},
  "thursday": {{ ... }},
  "friday": {{ ... }},
  "saturday": {{ ... }},
  "sunday": {{ ... }},
  "totalWeeklyCost": 95.75,
  "savings": 25.30
}}
"""


def extract_meal_plan(text: str) -> Dict[str, Any]:
    """
    Pull the JSON plan out of a model reply.

    The reply may wrap the object in prose or code fences; everything from
    the first "{" to the last "}" is parsed.

    Raises:
        MealPlanParseError: if no JSON object can be parsed
    """
    match = JSON_OBJECT.search(text or "")
    if not match:
        raise MealPlanParseError("No JSON found in response")
    try:
        plan = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MealPlanParseError(f"Invalid JSON in response: {e}") from e
    if not isinstance(plan, dict):
        raise MealPlanParseError("Meal plan is not a JSON object")
    return plan


class MealPlanGenerator:
    """Generates weekly meal plans with an LLM."""

    def __init__(self, provider: Optional[LLMProvider] = None):
        """
        Initialize the generator.

        Args:
            provider: LLM provider (defaults to get_llm_provider())
        """
        self.provider = provider or get_llm_provider()

    def generate(self, request: MealPlanRequest, sale_items: Optional[List[SaleItem]] = None) -> Dict[str, Any]:
        """
        Generate a seven-day plan.

        Args:
            request: User preferences
            sale_items: Flyer items to build around

        Returns:
            Plan dict keyed by weekday plus totalWeeklyCost and savings

        Raises:
            MealPlanRequestError: invalid request
            MealPlanParseError: the model reply held no usable plan
        """
        request.validate()

        if self.provider.is_null:
            logger.info("No LLM configured, using fallback meal plan")
            return copy.deepcopy(FALLBACK_MEAL_PLAN)

        prompt = build_prompt(request, sale_items or [])
        logger.info(f"Generating meal plan for store={request.store} household={request.household_size}")

        text = self.provider.complete(prompt)
        try:
            return extract_meal_plan(text)
        except MealPlanParseError:
            logger.error(f"Error parsing meal plan response: {text[:500]!r}")
            raise
