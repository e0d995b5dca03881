"""
Database interface for Bargain Bites.

Manages one SQLite database (user_data.db) holding:
- meal_plans: one generated plan per (user, week)
- grocery_list_items: items users add to their list by hand
- user_preferences: one row of planning preferences per user
"""

import json
import logging
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..week import WeekValue, week_key_str
from .models import GroceryListItem, MealPlanRecord, UserPreferences

logger = logging.getLogger(__name__)

# Fields a client may change on an existing grocery item
UPDATABLE_ITEM_FIELDS = ("name", "quantity", "notes", "category", "completed")


def _clean_optional(value: Optional[str]) -> Optional[str]:
    """Trim free text; blank becomes None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class DatabaseInterface:
    """Interface for interacting with the SQLite database."""

    def __init__(self, db_dir: str = "data"):
        """
        Initialize database interface.

        Args:
            db_dir: Directory containing database files
        """
        self.db_dir = Path(db_dir)
        self.db_dir.mkdir(parents=True, exist_ok=True)

        self.user_db = self.db_dir / "user_data.db"

        self._init_user_database()

    def _init_user_database(self):
        """Initialize user data database schema."""
        with sqlite3.connect(self.user_db) as conn:
            cursor = conn.cursor()

            # Meal plans table (one per user per week)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS meal_plans (
                    id TEXT PRIMARY KEY,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    week_start TEXT NOT NULL,
                    store TEXT NOT NULL,
                    total_weekly_cost REAL DEFAULT 0,
                    savings REAL DEFAULT 0,
                    lunch_preference TEXT,
                    days_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE (user_id, week_start)
                )
            """)

            # User-added grocery items
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS grocery_list_items (
                    id TEXT PRIMARY KEY,
                    user_id INTEGER NOT NULL DEFAULT 1,
                    name TEXT NOT NULL,
                    quantity TEXT,
                    notes TEXT,
                    category TEXT,
                    completed BOOLEAN DEFAULT 0,
                    week_start TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_grocery_items_user
                ON grocery_list_items(user_id, week_start)
            """)

            # Planning preferences (one row per user)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS user_preferences (
                    user_id INTEGER PRIMARY KEY,
                    household_size INTEGER NOT NULL,
                    cooking_experience TEXT NOT NULL,
                    weekly_budget REAL NOT NULL,
                    pantry_staples_json TEXT NOT NULL,
                    equipment_json TEXT NOT NULL,
                    dietary_restrictions_json TEXT NOT NULL,
                    preferences_set BOOLEAN DEFAULT 1,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.commit()

    # ==================== Meal Plan Operations ====================

    def save_meal_plan(self, record: MealPlanRecord) -> str:
        """
        Save a meal plan, replacing any plan the user has for that week.

        Args:
            record: MealPlanRecord (week_start is already snapped to Sunday)

        Returns:
            ID of the stored meal plan (the existing one on update)
        """
        if not record.store:
            raise ValueError("Store is required")

        existing = self.get_meal_plan_for_week(record.user_id, record.week_start)
        now = datetime.now()

        if existing:
            record.id = existing.id
            record.created_at = existing.created_at
        elif not record.id:
            record.id = f"mp_{record.week_start}_{uuid.uuid4().hex[:12]}"
        record.updated_at = now

        with sqlite3.connect(self.user_db) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO meal_plans
                (id, user_id, week_start, store, total_weekly_cost, savings,
                 lunch_preference, days_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, week_start) DO UPDATE SET
                    store = excluded.store,
                    total_weekly_cost = excluded.total_weekly_cost,
                    savings = excluded.savings,
                    lunch_preference = excluded.lunch_preference,
                    days_json = excluded.days_json,
                    updated_at = excluded.updated_at
                """,
                (
                    record.id,
                    record.user_id,
                    record.week_start,
                    record.store,
                    record.total_weekly_cost or 0,
                    record.savings or 0,
                    record.lunch_preference,
                    json.dumps(record.days),
                    record.created_at.isoformat(),
                    record.updated_at.isoformat(),
                ),
            )
            conn.commit()

        logger.info(f"Saved meal plan {record.id} for week {record.week_start}")
        return record.id

    def _row_to_meal_plan(self, row: sqlite3.Row) -> MealPlanRecord:
        return MealPlanRecord(
            id=row["id"],
            user_id=row["user_id"],
            week_start=row["week_start"],
            store=row["store"],
            total_weekly_cost=row["total_weekly_cost"] or 0.0,
            savings=row["savings"] or 0.0,
            lunch_preference=row["lunch_preference"],
            days=json.loads(row["days_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def get_meal_plans(self, user_id: int = 1, week: WeekValue = None) -> List[MealPlanRecord]:
        """
        Get a user's meal plans, newest week first.

        Args:
            user_id: Owner
            week: Optional date in the week to filter on

        Returns:
            List of MealPlanRecord (at most one when filtering by week)
        """
        with sqlite3.connect(self.user_db) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()

            if week is not None:
                cursor.execute(
                    "SELECT * FROM meal_plans WHERE user_id = ? AND week_start = ? ORDER BY week_start DESC",
                    (user_id, week_key_str(week)),
                )
            else:
                cursor.execute(
                    "SELECT * FROM meal_plans WHERE user_id = ? ORDER BY week_start DESC",
                    (user_id,),
                )
            return [self._row_to_meal_plan(row) for row in cursor.fetchall()]

    def get_meal_plan_for_week(self, user_id: int, week: WeekValue) -> Optional[MealPlanRecord]:
        """Get the user's plan for the week containing ``week``, or None."""
        plans = self.get_meal_plans(user_id=user_id, week=week)
        return plans[0] if plans else None

    def get_meal_plan(self, plan_id: str, user_id: int = None) -> Optional[MealPlanRecord]:
        """
        Get a meal plan by ID.

        Args:
            plan_id: Meal plan ID
            user_id: Optional user ID filter (for security)

        Returns:
            MealPlanRecord or None
        """
        with sqlite3.connect(self.user_db) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()

            if user_id is not None:
                cursor.execute("SELECT * FROM meal_plans WHERE id = ? AND user_id = ?", (plan_id, user_id))
            else:
                cursor.execute("SELECT * FROM meal_plans WHERE id = ?", (plan_id,))
            row = cursor.fetchone()

            return self._row_to_meal_plan(row) if row else None

    def delete_meal_plan(self, plan_id: str, user_id: int = 1) -> bool:
        """Delete a meal plan owned by ``user_id``. Returns False if none matched."""
        with sqlite3.connect(self.user_db) as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM meal_plans WHERE id = ? AND user_id = ?", (plan_id, user_id))
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted meal plan {plan_id}")
        return deleted

    # ==================== Grocery Item Operations ====================

    def add_grocery_item(self, item: GroceryListItem) -> GroceryListItem:
        """
        Add a user grocery item.

        Raises:
            ValueError: if the item has no name
        """
        name = _clean_optional(item.name)
        if not name:
            raise ValueError("Item name is required")

        item.name = name
        item.quantity = _clean_optional(item.quantity)
        item.notes = _clean_optional(item.notes)
        item.category = _clean_optional(item.category)
        if item.week_start:
            item.week_start = week_key_str(item.week_start)

        with sqlite3.connect(self.user_db) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO grocery_list_items
                (id, user_id, name, quantity, notes, category, completed, week_start, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.id,
                    item.user_id,
                    item.name,
                    item.quantity,
                    item.notes,
                    item.category,
                    item.completed,
                    item.week_start,
                    item.created_at.isoformat(),
                    item.updated_at.isoformat(),
                ),
            )
            conn.commit()

        logger.info(f"Added grocery item {item.name} for user {item.user_id}")
        return item

    def _row_to_item(self, row: sqlite3.Row) -> GroceryListItem:
        return GroceryListItem(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            quantity=row["quantity"],
            notes=row["notes"],
            category=row["category"],
            completed=bool(row["completed"]),
            week_start=row["week_start"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def get_grocery_item(self, item_id: str, user_id: int = 1) -> Optional[GroceryListItem]:
        with sqlite3.connect(self.user_db) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM grocery_list_items WHERE id = ? AND user_id = ?",
                (item_id, user_id),
            )
            row = cursor.fetchone()
            return self._row_to_item(row) if row else None

    def get_grocery_items(self, user_id: int = 1, week: WeekValue = None) -> List[GroceryListItem]:
        """
        Get a user's grocery items, newest first.

        Args:
            user_id: Owner
            week: When given, only items for that week plus items not tied
                to any week

        Returns:
            List of GroceryListItem
        """
        with sqlite3.connect(self.user_db) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()

            if week is not None:
                cursor.execute(
                    """
                    SELECT * FROM grocery_list_items
                    WHERE user_id = ? AND (week_start = ? OR week_start IS NULL)
                    ORDER BY created_at DESC
                    """,
                    (user_id, week_key_str(week)),
                )
            else:
                cursor.execute(
                    "SELECT * FROM grocery_list_items WHERE user_id = ? ORDER BY created_at DESC",
                    (user_id,),
                )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def update_grocery_item(
        self, item_id: str, user_id: int, updates: Dict[str, Any]
    ) -> Optional[GroceryListItem]:
        """
        Update fields of a user's grocery item.

        Args:
            item_id: Item ID
            user_id: Owner (items of other users are not found)
            updates: Subset of name/quantity/notes/category/completed;
                other keys are ignored

        Returns:
            Updated item, or None if the user has no such item

        Raises:
            ValueError: if the update blanks the name
        """
        item = self.get_grocery_item(item_id, user_id)
        if not item:
            return None

        for key in UPDATABLE_ITEM_FIELDS:
            if key not in updates:
                continue
            value = updates[key]
            if key == "name":
                value = _clean_optional(value)
                if not value:
                    raise ValueError("Item name is required")
            elif key == "completed":
                value = bool(value)
            else:
                value = _clean_optional(value)
            setattr(item, key, value)

        item.updated_at = datetime.now()

        with sqlite3.connect(self.user_db) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE grocery_list_items
                SET name = ?, quantity = ?, notes = ?, category = ?, completed = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    item.name,
                    item.quantity,
                    item.notes,
                    item.category,
                    item.completed,
                    item.updated_at.isoformat(),
                    item_id,
                    user_id,
                ),
            )
            conn.commit()

        return item

    def delete_grocery_item(self, item_id: str, user_id: int = 1) -> bool:
        """Delete a user's grocery item. Returns False if none matched."""
        with sqlite3.connect(self.user_db) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM grocery_list_items WHERE id = ? AND user_id = ?",
                (item_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    # ==================== Preference Operations ====================

    def get_user_preferences(self, user_id: int = 1) -> Optional[UserPreferences]:
        """Get the user's saved preferences, or None if never saved."""
        with sqlite3.connect(self.user_db) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM user_preferences WHERE user_id = ?", (user_id,))
            row = cursor.fetchone()

            if not row:
                return None

            return UserPreferences(
                user_id=row["user_id"],
                household_size=row["household_size"],
                cooking_experience=row["cooking_experience"],
                weekly_budget=row["weekly_budget"],
                pantry_staples=json.loads(row["pantry_staples_json"]),
                equipment=json.loads(row["equipment_json"]),
                dietary_restrictions=json.loads(row["dietary_restrictions_json"]),
                preferences_set=bool(row["preferences_set"]),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )

    def save_user_preferences(self, prefs: UserPreferences) -> UserPreferences:
        """
        Save (replace) a user's preferences and mark them as set.

        Raises:
            ValueError: on a household size below 1 or a negative budget
        """
        if prefs.household_size < 1:
            raise ValueError("Valid household size is required")
        if prefs.weekly_budget < 0:
            raise ValueError("Valid budget is required")

        prefs.preferences_set = True
        prefs.updated_at = datetime.now()

        with sqlite3.connect(self.user_db) as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO user_preferences
                (user_id, household_size, cooking_experience, weekly_budget,
                 pantry_staples_json, equipment_json, dietary_restrictions_json,
                 preferences_set, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    prefs.user_id,
                    prefs.household_size,
                    prefs.cooking_experience,
                    prefs.weekly_budget,
                    json.dumps(prefs.pantry_staples),
                    json.dumps(prefs.equipment),
                    json.dumps(prefs.dietary_restrictions),
                    prefs.preferences_set,
                    prefs.updated_at.isoformat(),
                ),
            )
            conn.commit()

        logger.info(f"Saved preferences for user {prefs.user_id}")
        return prefs
