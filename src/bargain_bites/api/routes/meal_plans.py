"""
Meal plan routes for the FastAPI application.

Provides endpoints for:
- Generating a meal plan
- Saving, listing and deleting weekly meal plans
"""
import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ...data.database import DatabaseInterface
from ...data.models import MealPlanRecord
from ...planning.meal_plan_generator import (
    MealPlanGenerator,
    MealPlanParseError,
    MealPlanRequest,
    MealPlanRequestError,
    load_sale_items,
)
from ..dependencies import get_db, get_generator, get_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


# Request models
class GenerateMealPlanRequest(BaseModel):
    """Request body for generating a meal plan."""
    store: str = ""
    budget: float = 0
    household_size: int = 0
    cuisine_preferences: List[str] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list)
    cooking_experience: Optional[str] = None


class SaveMealPlanRequest(BaseModel):
    """Request body for saving a meal plan."""
    week_start_date: str = ""
    store: str = ""
    meal_plan: Dict[str, Any] = Field(default_factory=dict)
    total_weekly_cost: Optional[float] = None
    savings: Optional[float] = None
    lunch_preference: Optional[str] = None


@router.post("/meal-plan")
def generate_meal_plan(
    body: GenerateMealPlanRequest,
    generator: MealPlanGenerator = Depends(get_generator),
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """
    Generate a weekly meal plan for the selected store.

    Budget, household size, dietary restrictions and cooking experience
    fall back to the user's saved preferences when omitted.

    Returns:
        {"success": True, "meal_plan": {...}}
    """
    request = MealPlanRequest(
        store=body.store,
        budget=body.budget,
        household_size=body.household_size,
        cuisine_preferences=body.cuisine_preferences,
        dietary_restrictions=body.dietary_restrictions,
        cooking_experience=body.cooking_experience,
    )

    try:
        request.apply_preferences(db.get_user_preferences(user_id)).validate()
        sale_items = [] if generator.provider.is_null else load_sale_items(request.store)
        plan = generator.generate(request, sale_items)
    except MealPlanRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MealPlanParseError:
        raise HTTPException(status_code=500, detail="Failed to parse meal plan response")
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading flyer data: {e}")
        raise HTTPException(status_code=500, detail="Failed to load store data")

    return {"success": True, "meal_plan": plan}


@router.get("/meal-plans")
def list_meal_plans(
    week: Optional[str] = Query(default=None),
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """List the user's meal plans, optionally only the week containing ``week``."""
    try:
        plans = db.get_meal_plans(user_id=user_id, week=week)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "meal_plans": [plan.to_dict() for plan in plans]}


@router.post("/meal-plans")
def save_meal_plan(
    body: SaveMealPlanRequest,
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """Save (or replace) the user's plan for the week of ``week_start_date``."""
    if not body.week_start_date or not body.store or not body.meal_plan:
        raise HTTPException(status_code=400, detail="Missing required fields")

    payload = dict(body.meal_plan)
    if body.total_weekly_cost is not None:
        payload["totalWeeklyCost"] = body.total_weekly_cost
    if body.savings is not None:
        payload["savings"] = body.savings

    try:
        record = MealPlanRecord.from_generated(
            payload,
            week_start=body.week_start_date,
            store=body.store,
            user_id=user_id,
            lunch_preference=body.lunch_preference,
        )
        db.save_meal_plan(record)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "meal_plan": record.to_dict()}


@router.delete("/meal-plans")
def delete_meal_plan(
    id: str = Query(default=""),
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """Delete one of the user's meal plans."""
    if not id:
        raise HTTPException(status_code=400, detail="Meal plan ID is required")
    if not db.delete_meal_plan(id, user_id=user_id):
        raise HTTPException(status_code=404, detail="Meal plan not found or access denied")
    return {"success": True, "message": "Meal plan deleted successfully"}
