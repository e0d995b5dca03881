"""
User preference routes for the FastAPI application.

Saved preferences fill in whatever a meal plan request leaves out.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ...data.database import DatabaseInterface
from ...data.models import UserPreferences
from ..dependencies import get_db, get_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


class SavePreferencesRequest(BaseModel):
    """Every field is required; they are optional here so a missing one maps to 400."""
    household_size: Optional[int] = None
    cooking_experience: Optional[str] = None
    weekly_budget: Optional[float] = None
    pantry_staples: Optional[List[str]] = None
    equipment: Optional[List[str]] = None
    dietary_restrictions: Optional[List[str]] = None


@router.get("/user/preferences")
def get_preferences(
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """The user's preferences; defaults with preferences_set=False if never saved."""
    prefs = db.get_user_preferences(user_id) or UserPreferences(user_id=user_id)
    return {"success": True, "preferences": prefs.to_dict()}


@router.post("/user/preferences")
def save_preferences(
    body: SavePreferencesRequest,
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """Save (replace) the user's preferences."""
    if any(value is None for value in body.model_dump().values()):
        raise HTTPException(status_code=400, detail="Missing required fields")

    prefs = UserPreferences(
        user_id=user_id,
        household_size=body.household_size,
        cooking_experience=body.cooking_experience,
        weekly_budget=body.weekly_budget,
        pantry_staples=body.pantry_staples,
        equipment=body.equipment,
        dietary_restrictions=body.dietary_restrictions,
    )
    try:
        prefs = db.save_user_preferences(prefs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "message": "Preferences saved successfully", "preferences": prefs.to_dict()}
