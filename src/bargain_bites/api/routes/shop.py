"""
Shop routes for the FastAPI application.

Provides endpoints for:
- The weekly shopping list (meal plan ingredients + user additions)
- A plain-text receipt of the same list
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from ...data.database import DatabaseInterface
from ...shopping import ShoppingListService
from ..dependencies import get_db, get_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


def _build(db: DatabaseInterface, user_id: int, week: Optional[str]):
    try:
        return ShoppingListService(db).build_shopping_list(user_id=user_id, week=week)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/shopping-list")
def get_shopping_list(
    week: Optional[str] = Query(default=None),
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """
    Get the shopping list for the week containing ``week`` (default: this week).

    Returns:
        Shopping list with items organized by category
    """
    return _build(db, user_id, week)


@router.get("/shopping-list/receipt", response_class=PlainTextResponse)
def get_receipt(
    week: Optional[str] = Query(default=None),
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """Plain-text receipt for the week."""
    shopping_list = _build(db, user_id, week)
    return ShoppingListService(db).format_receipt(shopping_list)
