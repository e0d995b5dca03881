"""
Grocery list routes for the FastAPI application.

CRUD for the items users add to their list by hand.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ...data.database import DatabaseInterface
from ...data.models import GroceryListItem
from ..dependencies import get_db, get_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateItemRequest(BaseModel):
    """Request body for adding an item."""
    name: str = ""
    quantity: Optional[str] = None
    notes: Optional[str] = None
    category: Optional[str] = None
    week: Optional[str] = None


class UpdateItemRequest(BaseModel):
    """Request body for updating an item; omitted fields are left alone."""
    name: Optional[str] = None
    quantity: Optional[str] = None
    notes: Optional[str] = None
    category: Optional[str] = None
    completed: Optional[bool] = None


@router.get("/grocery-list")
def list_items(
    week: Optional[str] = Query(default=None),
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """All of the user's added items, newest first."""
    try:
        items = db.get_grocery_items(user_id=user_id, week=week)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"items": [item.to_dict() for item in items]}


@router.post("/grocery-list", status_code=201)
def create_item(
    body: CreateItemRequest,
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """Add an item to the user's list."""
    item = GroceryListItem(
        name=body.name,
        user_id=user_id,
        quantity=body.quantity,
        notes=body.notes,
        category=body.category,
        week_start=body.week,
    )
    try:
        item = db.add_grocery_item(item)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"item": item.to_dict()}


@router.put("/grocery-list/{item_id}")
def update_item(
    item_id: str,
    body: UpdateItemRequest,
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """Update fields of one of the user's items."""
    updates = body.model_dump(exclude_unset=True)
    try:
        item = db.update_grocery_item(item_id, user_id, updates)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return {"item": item.to_dict()}


@router.delete("/grocery-list/{item_id}")
def delete_item(
    item_id: str,
    user_id: int = Depends(get_user_id),
    db: DatabaseInterface = Depends(get_db),
):
    """Delete one of the user's items."""
    if not db.delete_grocery_item(item_id, user_id=user_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return {"success": True}
