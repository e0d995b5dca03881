"""
Data models for Bargain Bites.

These models define the persisted entities:
- MealPlanRecord: A generated weekly meal plan, one per user per week
- GroceryListItem: Items the user adds to their list by hand
- UserPreferences: Household and budget settings used to fill plan requests
- SaleItem: One entry from a store flyer
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..week import week_key_str

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class MealPlanRecord:
    """A stored weekly meal plan."""

    week_start: str  # ISO date of the week's Sunday: "2024-03-10"
    store: str
    days: Dict[str, Dict[str, Any]] = field(default_factory=dict)  # weekday -> meal JSON
    user_id: int = 1
    total_weekly_cost: float = 0.0
    savings: float = 0.0
    lunch_preference: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    id: Optional[str] = None

    def __post_init__(self):
        """Snap week_start onto its Sunday key."""
        self.week_start = week_key_str(self.week_start)

    @property
    def meal_plan(self) -> Dict[str, Dict[str, Any]]:
        """The seven day objects keyed by weekday (missing days are empty)."""
        return {day: self.days.get(day) or {} for day in WEEKDAYS}

    def get_meal_names(self) -> Dict[str, str]:
        """Meal name per day, for summaries."""
        names = {}
        for day, meal in self.meal_plan.items():
            if not isinstance(meal, Mapping):
                continue
            if meal.get("meal"):
                names[day] = meal["meal"]
            elif isinstance(meal.get("dinner"), Mapping) and meal["dinner"].get("meal"):
                names[day] = meal["dinner"]["meal"]
        return names

    @classmethod
    def from_generated(
        cls,
        plan: Dict[str, Any],
        week_start: Any,
        store: str,
        user_id: int = 1,
        lunch_preference: Optional[str] = None,
    ) -> "MealPlanRecord":
        """
        Build a record from a generated plan payload.

        Args:
            plan: Generator output (weekday keys plus totalWeeklyCost/savings)
            week_start: Any date in the target week
            store: Store the plan was generated for
            user_id: Owner
            lunch_preference: e.g. "cook-lunch"

        Returns:
            Unsaved MealPlanRecord
        """
        return cls(
            week_start=week_start,
            store=store,
            user_id=user_id,
            days={day: plan.get(day) or {} for day in WEEKDAYS},
            total_weekly_cost=float(plan.get("totalWeeklyCost") or 0),
            savings=float(plan.get("savings") or 0),
            lunch_preference=lunch_preference,
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "week_start": self.week_start,
            "store": self.store,
            "total_weekly_cost": self.total_weekly_cost,
            "savings": self.savings,
            "lunch_preference": self.lunch_preference,
            "days": self.days,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "MealPlanRecord":
        """Create MealPlanRecord from dictionary."""
        return cls(
            id=data.get("id"),
            user_id=data.get("user_id", 1),
            week_start=data["week_start"],
            store=data["store"],
            total_weekly_cost=data.get("total_weekly_cost") or 0.0,
            savings=data.get("savings") or 0.0,
            lunch_preference=data.get("lunch_preference"),
            days=data.get("days", {}),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.now(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else datetime.now(),
        )


@dataclass
class GroceryListItem:
    """An item the user added to their grocery list."""

    name: str
    user_id: int = 1
    quantity: Optional[str] = None  # Free text: "2 lbs", "1 dozen"
    notes: Optional[str] = None
    category: Optional[str] = None  # Auto-detected when not given
    completed: bool = False
    week_start: Optional[str] = None  # Week key, None = every week
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "quantity": self.quantity,
            "notes": self.notes,
            "category": self.category,
            "completed": self.completed,
            "week_start": self.week_start,
            "is_user_added": True,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "GroceryListItem":
        """Create GroceryListItem from dictionary."""
        return cls(
            id=data.get("id") or _new_id(),
            user_id=data.get("user_id", 1),
            name=data["name"],
            quantity=data.get("quantity"),
            notes=data.get("notes"),
            category=data.get("category"),
            completed=bool(data.get("completed", False)),
            week_start=data.get("week_start"),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.now(),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else datetime.now(),
        )


@dataclass
class UserPreferences:
    """A user's saved planning preferences."""

    user_id: int = 1
    household_size: int = 1
    cooking_experience: str = "beginner"
    weekly_budget: float = 0.0
    pantry_staples: List[str] = field(default_factory=list)
    equipment: List[str] = field(default_factory=list)
    dietary_restrictions: List[str] = field(default_factory=list)
    preferences_set: bool = False  # True once the user has saved them
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "user_id": self.user_id,
            "household_size": self.household_size,
            "cooking_experience": self.cooking_experience,
            "weekly_budget": self.weekly_budget,
            "pantry_staples": self.pantry_staples,
            "equipment": self.equipment,
            "dietary_restrictions": self.dietary_restrictions,
            "preferences_set": self.preferences_set,
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "UserPreferences":
        """Create UserPreferences from dictionary."""
        return cls(
            user_id=data.get("user_id", 1),
            household_size=int(data.get("household_size") or 1),
            cooking_experience=data.get("cooking_experience") or "beginner",
            weekly_budget=float(data.get("weekly_budget") or 0.0),
            pantry_staples=list(data.get("pantry_staples") or []),
            equipment=list(data.get("equipment") or []),
            dietary_restrictions=list(data.get("dietary_restrictions") or []),
            preferences_set=bool(data.get("preferences_set", False)),
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else datetime.now(),
        )


@dataclass
class SaleItem:
    """One product from a store flyer."""

    name: str
    price: float
    measure: Optional[float] = None
    measure_unit: str = ""
    unit_type: str = ""
    savings_percentage: Optional[float] = None

    @property
    def is_on_sale(self) -> bool:
        return bool(self.savings_percentage) and self.savings_percentage > 0

    def describe(self) -> str:
        """Prompt line: "- Eggs: $3.99 (12ea) - 20% off - Unit: each"."""
        measure = f"{self.measure:g}" if isinstance(self.measure, (int, float)) else ""
        savings = f"{self.savings_percentage:g}" if self.savings_percentage else "0"
        return (
            f"- {self.name}: ${self.price} ({measure}{self.measure_unit}) - "
            f"{savings}% off - Unit: {self.unit_type}"
        )

    @classmethod
    def from_dict(cls, data: Dict) -> "SaleItem":
        """Create SaleItem from a flyer JSON entry (extra keys ignored)."""
        return cls(
            name=data["name"],
            price=data.get("price") or 0.0,
            measure=data.get("measure"),
            measure_unit=data.get("measure_unit") or "",
            unit_type=data.get("unit_type") or "",
            savings_percentage=data.get("savings_percentage"),
        )


def sale_items_from_flyer(entries: List[Dict]) -> List[SaleItem]:
    """Flyer entries that are actually discounted."""
    items = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        item = SaleItem.from_dict(entry)
        if item.is_on_sale:
            items.append(item)
    return items
