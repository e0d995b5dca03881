"""
Unit tests for planning/meal_plan_generator.py

The model is never called; tests use NullLLMProvider or a Mock provider.
"""

import json
from unittest.mock import Mock

import pytest

from bargain_bites.data.models import SaleItem, UserPreferences
from bargain_bites.grocery import aggregate_ingredients
from bargain_bites.llm_provider import NullLLMProvider
from bargain_bites.planning.meal_plan_generator import (
    FALLBACK_MEAL_PLAN,
    MAX_PROMPT_SALE_ITEMS,
    MealPlanGenerator,
    MealPlanParseError,
    MealPlanRequest,
    MealPlanRequestError,
    build_prompt,
    extract_meal_plan,
    load_sale_items,
)


@pytest.fixture
def request_():
    return MealPlanRequest(store="zehrs", budget=120, household_size=4)


@pytest.fixture
def model_provider():
    """A provider that looks like a real model and answers with a plan."""
    provider = Mock()
    provider.is_null = False
    provider.complete.return_value = (
        "Here is your plan:\n```json\n"
        + json.dumps({
            "monday": {"meal": "Tacos", "ingredients": ["Ground beef [SALE:Zehrs] - $5.99"]},
            "totalWeeklyCost": 90.5,
            "savings": 12,
        })
        + "\n```\nEnjoy!"
    )
    return provider


class TestMealPlanRequest:

    def test_defaults_cuisine(self, request_):
        request_.validate()

        assert request_.cuisine_preferences == ["american"]

    def test_keeps_given_cuisines(self):
        request = MealPlanRequest(store="zehrs", budget=80, household_size=2,
                                  cuisine_preferences=["thai"]).validate()

        assert request.cuisine_preferences == ["thai"]

    @pytest.mark.parametrize("kwargs, message", [
        ({"store": "", "budget": 100, "household_size": 2}, "Store is required"),
        ({"store": "zehrs", "budget": 0, "household_size": 2}, "Valid budget is required"),
        ({"store": "zehrs", "budget": -5, "household_size": 2}, "Valid budget is required"),
        ({"store": "zehrs", "budget": 100, "household_size": 0}, "Valid household size is required"),
    ])
    def test_invalid_requests(self, kwargs, message):
        with pytest.raises(MealPlanRequestError, match=message):
            MealPlanRequest(**kwargs).validate()

    def test_store_display_name(self):
        assert MealPlanRequest(store="TNT-Supermarket", budget=1, household_size=1).store_display_name == "T&T"
        assert MealPlanRequest(store="Corner Shop", budget=1, household_size=1).store_display_name == "Corner Shop"


class TestApplyPreferences:
    """Saved preferences fill only what the request left empty."""

    @pytest.fixture
    def prefs(self):
        return UserPreferences(
            household_size=3,
            cooking_experience="advanced",
            weekly_budget=150.0,
            dietary_restrictions=["vegetarian"],
            preferences_set=True,
        )

    def test_fills_missing_fields(self, prefs):
        request = MealPlanRequest(store="zehrs", budget=0, household_size=0).apply_preferences(prefs).validate()

        assert request.budget == 150.0
        assert request.household_size == 3
        assert request.dietary_restrictions == ["vegetarian"]
        assert request.cooking_experience == "advanced"

    def test_request_values_win(self, prefs):
        request = MealPlanRequest(
            store="zehrs", budget=90, household_size=2,
            dietary_restrictions=["halal"], cooking_experience="beginner",
        ).apply_preferences(prefs)

        assert (request.budget, request.household_size) == (90, 2)
        assert request.dietary_restrictions == ["halal"]
        assert request.cooking_experience == "beginner"

    def test_unsaved_preferences_are_ignored(self, prefs):
        prefs.preferences_set = False
        request = MealPlanRequest(store="zehrs", budget=0, household_size=0).apply_preferences(prefs)

        with pytest.raises(MealPlanRequestError, match="Valid budget is required"):
            request.validate()

    def test_no_preferences(self):
        request = MealPlanRequest(store="zehrs", budget=50, household_size=1).apply_preferences(None).validate()

        assert request.cooking_experience == "beginner"


class TestLoadSaleItems:

    def test_reads_discounted_items(self, tmp_path):
        (tmp_path / "zehrs.json").write_text(json.dumps([
            {"name": "Eggs", "price": 3.99, "savings_percentage": 20},
            {"name": "Milk", "price": 4.29, "savings_percentage": 0},
        ]), encoding="utf-8")

        items = load_sale_items("Zehrs-Conestoga", flyer_dir=str(tmp_path))

        assert [item.name for item in items] == ["Eggs"]

    def test_unknown_store(self, tmp_path):
        with pytest.raises(MealPlanRequestError, match="Invalid store selected"):
            load_sale_items("nowhere", flyer_dir=str(tmp_path))

    def test_missing_flyer_file(self, tmp_path):
        with pytest.raises(OSError):
            load_sale_items("sobeys", flyer_dir=str(tmp_path))


class TestBuildPrompt:

    def test_includes_preferences_and_sale_store(self, request_):
        request_.dietary_restrictions = ["nut-free"]
        request_.validate()
        items = [SaleItem(name="Eggs", price=3.99, measure=12, measure_unit="ea",
                          unit_type="each", savings_percentage=20)]

        prompt = build_prompt(request_, items)

        assert "STORE: zehrs" in prompt
        assert "BUDGET: $120 per week" in prompt
        assert "HOUSEHOLD SIZE: 4 people" in prompt
        assert "DIETARY RESTRICTIONS: nut-free" in prompt
        assert "- Eggs: $3.99 (12ea) - 20% off - Unit: each" in prompt
        assert "[SALE:Zehrs]" in prompt

    def test_caps_sale_items(self, request_):
        items = [SaleItem(name=f"Item {i}", price=1.0, savings_percentage=10) for i in range(80)]

        prompt = build_prompt(request_.validate(), items)

        assert f"Item {MAX_PROMPT_SALE_ITEMS - 1}:" in prompt
        assert f"Item {MAX_PROMPT_SALE_ITEMS}:" not in prompt

    def test_no_restrictions(self, request_):
        assert "DIETARY RESTRICTIONS: None" in build_prompt(request_.validate(), [])


class TestExtractMealPlan:

    def test_plain_json(self):
        assert extract_meal_plan('{"monday": {"meal": "Soup"}}') == {"monday": {"meal": "Soup"}}

    def test_json_wrapped_in_prose(self, model_provider):
        plan = extract_meal_plan(model_provider.complete.return_value)

        assert plan["monday"]["meal"] == "Tacos"
        assert plan["totalWeeklyCost"] == 90.5

    @pytest.mark.parametrize("text", ["", None, "Sorry, I can't help with that."])
    def test_no_json(self, text):
        with pytest.raises(MealPlanParseError, match="No JSON found"):
            extract_meal_plan(text)

    def test_invalid_json(self):
        with pytest.raises(MealPlanParseError, match="Invalid JSON"):
            extract_meal_plan("{monday: Soup}")


class TestMealPlanGenerator:

    def test_null_provider_returns_fallback(self, request_):
        plan = MealPlanGenerator(provider=NullLLMProvider()).generate(request_)

        assert plan == FALLBACK_MEAL_PLAN
        assert plan["totalWeeklyCost"] == 85.75

    def test_fallback_is_a_copy(self, request_):
        plan = MealPlanGenerator(provider=NullLLMProvider()).generate(request_)
        plan["monday"]["ingredients"].append("Caviar")

        assert "Caviar" not in FALLBACK_MEAL_PLAN["monday"]["ingredients"]

    def test_fallback_plan_aggregates(self, request_):
        plan = MealPlanGenerator(provider=NullLLMProvider()).generate(request_)

        result = aggregate_ingredients(plan)

        assert len(result) > 0
        assert all(item.price for item in result)

    def test_model_plan(self, request_, model_provider):
        plan = MealPlanGenerator(provider=model_provider).generate(request_)

        assert plan["monday"]["ingredients"] == ["Ground beef [SALE:Zehrs] - $5.99"]
        prompt = model_provider.complete.call_args.args[0]
        assert "HOUSEHOLD SIZE: 4 people" in prompt

    def test_unparseable_reply(self, request_, model_provider):
        model_provider.complete.return_value = "no plan today"

        with pytest.raises(MealPlanParseError):
            MealPlanGenerator(provider=model_provider).generate(request_)

    def test_invalid_request_skips_model(self, model_provider):
        request = MealPlanRequest(store="zehrs", budget=0, household_size=2)

        with pytest.raises(MealPlanRequestError):
            MealPlanGenerator(provider=model_provider).generate(request)

        model_provider.complete.assert_not_called()
