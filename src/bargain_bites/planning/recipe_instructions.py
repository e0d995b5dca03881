"""
Cooking instructions for a single planned meal.

The model is asked for numbered steps that use only the meal's listed
ingredients; chatty lead-ins and sign-offs are stripped from the reply.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..grocery import recipe_ingredients
from ..llm_provider import LLMProvider, get_llm_provider

logger = logging.getLogger(__name__)

INSTRUCTIONS_MAX_TOKENS = 1000

# Lines opening with conversational filler
FILLER_LINE = re.compile(
    r"^(Certainly!|Here is|Let me|I'll|I can|Let me know|This recipe|This should|This honors|"
    r"Absolutely!|Of course!|I'd be happy to|I'm happy to|I can help|Here's|Here are|Let's|I'll help).*",
    re.IGNORECASE | re.MULTILINE,
)
# Sign-offs; everything after them goes
SIGN_OFFS = [
    re.compile(r"Let me know if[\s\S]*$", re.IGNORECASE),
    re.compile(r"I hope this helps[\s\S]*$", re.IGNORECASE),
    re.compile(r"Enjoy your meal[\s\S]*$", re.IGNORECASE),
    re.compile(r"Happy cooking[\s\S]*$", re.IGNORECASE),
]
MARKDOWN_HEADER = re.compile(r"^#+.*$", re.MULTILINE)
BLANK_RUN = re.compile(r"\n\s*\n\s*\n")
LINE_EDGES = re.compile(r"^[ \t]+|[ \t]+$", re.MULTILINE)


class RecipeRequestError(ValueError):
    """The instructions request is missing fields."""


@dataclass
class RecipeRequest:
    meal_name: str
    ingredients: List[str] = field(default_factory=list)  # raw plan lines, markers allowed
    serving_size: int = 1
    cooking_experience: str = "beginner"

    def validate(self) -> "RecipeRequest":
        if not self.meal_name or not self.meal_name.strip():
            raise RecipeRequestError("Meal name is required")
        if not self.ingredient_names():
            raise RecipeRequestError("Ingredients are required")
        if not self.serving_size or self.serving_size <= 0:
            raise RecipeRequestError("Valid serving size is required")
        return self

    def ingredient_names(self) -> List[str]:
        """Clean names with sale/reuse markers and prices removed."""
        return [item.name for item in recipe_ingredients(list(self.ingredients))]


def build_instructions_prompt(request: RecipeRequest) -> str:
    return f"""Cooking instructions for {request.meal_name.strip()}:

Available ingredients: {', '.join(request.ingredient_names())}
Serving size: {request.serving_size} people
Cooking level: {request.cooking_experience}

STRICT RULE: You can ONLY use the ingredients listed above. Do not add any other ingredients not in the list.

Provide only numbered cooking steps. Use ONLY the provided ingredients. No additional ingredients allowed."""


def clean_instructions(text: str) -> str:
    """Strip filler lines, sign-offs, markdown headers and extra blank lines."""
    text = FILLER_LINE.sub("", text or "")
    for pattern in SIGN_OFFS:
        text = pattern.sub("", text)
    text = MARKDOWN_HEADER.sub("", text)
    text = LINE_EDGES.sub("", text)
    text = BLANK_RUN.sub("\n\n", text)
    return text.strip()


class RecipeInstructionGenerator:
    """Asks the LLM for step-by-step instructions for one meal."""

    def __init__(self, provider: Optional[LLMProvider] = None):
        self.provider = provider or get_llm_provider()

    def generate(self, request: RecipeRequest) -> str:
        """
        Generate cooking instructions.

        Raises:
            RecipeRequestError: invalid request
        """
        request.validate()
        prompt = build_instructions_prompt(request)
        logger.info(f"Generating instructions for {request.meal_name!r} ({len(prompt)} prompt chars)")

        text = self.provider.complete(prompt, max_tokens=INSTRUCTIONS_MAX_TOKENS)
        return clean_instructions(text)
