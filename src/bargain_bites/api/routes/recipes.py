"""
Recipe routes for the FastAPI application.

Provides step-by-step cooking instructions for a planned meal.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...data.database import DatabaseInterface
from ...planning.recipe_instructions import RecipeInstructionGenerator, RecipeRequest, RecipeRequestError
from ..dependencies import get_db, get_instruction_generator, get_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


class GenerateInstructionsRequest(BaseModel):
    """Request body for cooking instructions."""
    meal_name: str = ""
    ingredients: List[str] = Field(default_factory=list)
    serving_size: Optional[int] = None
    cooking_experience: Optional[str] = None


@router.post("/recipe/generate")
def generate_instructions(
    body: GenerateInstructionsRequest,
    generator: RecipeInstructionGenerator = Depends(get_instruction_generator),
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """
    Generate cooking instructions for one meal.

    Serving size and cooking experience default to the user's saved
    preferences.
    """
    prefs = db.get_user_preferences(user_id)
    request = RecipeRequest(
        meal_name=body.meal_name,
        ingredients=body.ingredients,
        serving_size=body.serving_size or (prefs.household_size if prefs else 1),
        cooking_experience=body.cooking_experience or (prefs.cooking_experience if prefs else "beginner"),
    )

    try:
        instructions = generator.generate(request)
    except RecipeRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Error generating cooking instructions: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate cooking instructions")

    return {"success": True, "cooking_instructions": instructions}
