"""
Shared FastAPI dependencies.

Identity is handled upstream; requests carry the user id in ``X-User-Id``.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException

from ..config import settings
from ..data.database import DatabaseInterface
from ..planning.meal_plan_generator import MealPlanGenerator
from ..planning.recipe_instructions import RecipeInstructionGenerator


@lru_cache
def get_db() -> DatabaseInterface:
    """Process-wide database interface."""
    return DatabaseInterface(db_dir=settings.DB_DIR)


def get_generator() -> MealPlanGenerator:
    return MealPlanGenerator()


def get_instruction_generator() -> RecipeInstructionGenerator:
    return RecipeInstructionGenerator()


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> int:
    """User id from the X-User-Id header (1 when absent)."""
    if x_user_id is None or x_user_id == "":
        return 1
    try:
        return int(x_user_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-User-Id header")
