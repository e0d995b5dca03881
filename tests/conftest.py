"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import shutil
import sys
import tempfile
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bargain_bites.data.database import DatabaseInterface
from bargain_bites.data.models import MealPlanRecord


@pytest.fixture
def temp_db_dir():
    """
    Create a temporary database directory for testing.

    This fixture is automatically cleaned up after each test.
    """
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def db(temp_db_dir):
    """
    Create a fresh DatabaseInterface for each test.

    Usage in tests:
        def test_something(db):
            db.save_meal_plan(...)
    """
    return DatabaseInterface(db_dir=temp_db_dir)


@pytest.fixture
def sample_meal_plan():
    """Generated plan in the shape the meal plan generator returns."""
    return {
        "monday": {
            "meal": "Chicken Stir Fry",
            "ingredients": [
                "Chicken breast [SALE:Zehrs] - $8.99",
                "Rice - $3.49",
                "Onion - $2.49",
                "Soy sauce - $2.79",
            ],
            "totalCost": 17.76,
        },
        "tuesday": {
            "meal": "Chicken Fried Rice",
            "ingredients": [
                "Chicken breast [REUSED]",
                "Rice [REUSED]",
                "Eggs - $3.99",
                "Onion - $2.49",
            ],
            "totalCost": 3.99,
        },
        "wednesday": {
            "lunch": {"meal": "Grilled Cheese", "ingredients": ["Bread - $2.99", "Cheddar cheese [SALE:Zehrs] - $4.49"]},
            "dinner": {"meal": "Salmon Dinner", "ingredients": ["Salmon - $12.99", "Spinach"]},
        },
        "thursday": {
            "meal": "Leftovers",
            "ingredients": [],
        },
        "totalWeeklyCost": 47.21,
        "savings": 6.40,
    }


@pytest.fixture
def saved_plan(db, sample_meal_plan):
    """sample_meal_plan stored for the week of 2024-03-10 (user 1)."""
    record = MealPlanRecord.from_generated(sample_meal_plan, week_start="2024-03-14", store="Zehrs")
    db.save_meal_plan(record)
    return record
