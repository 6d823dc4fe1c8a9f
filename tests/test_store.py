"""Tests for the state store reducer."""

from dataclasses import replace
from datetime import date

import pytest

from freshplan.domain.recipes import MealPlan, NutritionFacts, Recipe
from freshplan.domain.seed import SEED_RECIPES
from freshplan.domain.shopping import ShoppingItem
from freshplan.domain.state import (
    AddIngredient,
    AddMealPlan,
    AddRecipe,
    AddShoppingItem,
    AppState,
    DeleteIngredient,
    DeleteMealPlan,
    DeleteShoppingItem,
    ReplaceIngredients,
    ReplaceMealPlans,
    ReplaceRecipes,
    ReplaceShoppingList,
    SetError,
    SetLoading,
    SetSyncHandle,
    ToggleShoppingItem,
    UpdateIngredient,
)
from freshplan.services.store import StateStore, reduce
from tests.conftest import make_ingredient


def _user_recipe(recipe_id: str) -> Recipe:
    return Recipe(
        id=recipe_id,
        name="Lentil soup",
        ingredients=(),
        instructions=("Simmer",),
        prep_time=5,
        cook_time=30,
        servings=2,
        nutrition=NutritionFacts(300, 18, 40, 5, 12),
        is_user_created=True,
    )


def test_initial_state_holds_seed_recipes() -> None:
    state = AppState()

    assert state.recipes == SEED_RECIPES
    assert state.ingredients == ()
    assert not state.loading
    assert state.error is None


def test_replace_recipes_prepends_seed_and_is_idempotent() -> None:
    user = _user_recipe("r-1")
    action = ReplaceRecipes([user, SEED_RECIPES[0]])

    once = reduce(AppState(), action)
    twice = reduce(once, action)

    assert once.recipes == (*SEED_RECIPES, user)
    assert twice.recipes == once.recipes


def test_replace_recipes_with_empty_list_keeps_seed() -> None:
    state = reduce(AppState(), ReplaceRecipes([_user_recipe("r-1")]))

    assert reduce(state, ReplaceRecipes([])).recipes == SEED_RECIPES


def test_add_then_delete_ingredient_restores_collection() -> None:
    milk = make_ingredient()
    state = reduce(AppState(), AddIngredient(milk))

    assert state.ingredients == (milk,)
    assert reduce(state, DeleteIngredient(milk.id)).ingredients == ()


def test_update_after_delete_is_noop() -> None:
    milk = make_ingredient()
    bread = make_ingredient(id="ing-2", name="Bread")
    state = reduce(AppState(), ReplaceIngredients([milk, bread]))
    state = reduce(state, DeleteIngredient(milk.id))

    updated = reduce(state, UpdateIngredient(replace(milk, quantity=3)))

    assert updated.ingredients == (bread,)


def test_update_replaces_matching_ingredient_in_place() -> None:
    milk = make_ingredient()
    bread = make_ingredient(id="ing-2", name="Bread")
    state = reduce(AppState(), ReplaceIngredients([milk, bread]))

    updated = reduce(state, UpdateIngredient(replace(milk, quantity=2)))

    assert [item.quantity for item in updated.ingredients] == [2, 1.0]


def test_toggle_twice_restores_item() -> None:
    item = ShoppingItem(id="s-1", name="Eggs", quantity=12, unit="pcs", category="")
    state = reduce(AppState(), AddShoppingItem(item))

    toggled = reduce(state, ToggleShoppingItem("s-1"))
    restored = reduce(toggled, ToggleShoppingItem("s-1"))

    assert toggled.shopping_list[0].completed
    assert restored.shopping_list == (item,)


def test_unknown_action_returns_state_unchanged() -> None:
    state = AppState()

    assert reduce(state, object()) is state  # type: ignore[arg-type]


def test_dispatch_increments_version() -> None:
    store = StateStore()

    store.dispatch(SetLoading(True))
    state = store.dispatch(SetError("boom"))

    assert state.version == 2
    assert state.loading
    assert state.error == "boom"
    assert store.state is state


def _eggs(item_id: str = "s-1") -> ShoppingItem:
    return ShoppingItem(id=item_id, name="Eggs", quantity=12, unit="pcs", category="")


def _plan(plan_id: str, day: date) -> MealPlan:
    return MealPlan(id=plan_id, date=day, recipe=SEED_RECIPES[0], servings=2)


def test_set_sync_handle_attaches_and_detaches() -> None:
    handle = object()

    attached = reduce(AppState(), SetSyncHandle(handle))

    assert attached.sync_handle is handle
    assert reduce(attached, SetSyncHandle(None)).sync_handle is None


def test_replace_meal_plans_keeps_given_order() -> None:
    plans = [_plan("mp-2", date(2024, 5, 12)), _plan("mp-1", date(2024, 5, 11))]
    state = reduce(AppState(), AddMealPlan(_plan("old", date(2024, 5, 1))))

    replaced = reduce(state, ReplaceMealPlans(plans))

    assert replaced.meal_plans == tuple(plans)


def test_replace_shopping_list() -> None:
    state = reduce(AppState(), AddShoppingItem(_eggs("old")))

    replaced = reduce(state, ReplaceShoppingList([_eggs("s-1"), _eggs("s-2")]))

    assert [item.id for item in replaced.shopping_list] == ["s-1", "s-2"]
    assert reduce(replaced, ReplaceShoppingList([])).shopping_list == ()


def test_add_recipe_appends_after_seed() -> None:
    user = _user_recipe("r-1")

    state = reduce(AppState(), AddRecipe(user))

    assert state.recipes == (*SEED_RECIPES, user)


def test_add_recipe_after_replace_keeps_one_copy_of_each_seed() -> None:
    state = reduce(AppState(), ReplaceRecipes([*SEED_RECIPES, _user_recipe("r-1")]))

    state = reduce(state, AddRecipe(_user_recipe("r-2")))

    ids = [recipe.id for recipe in state.recipes]
    assert ids == [*(recipe.id for recipe in SEED_RECIPES), "r-1", "r-2"]
    assert len(ids) == len(set(ids))


def test_add_then_delete_meal_plan() -> None:
    plan = _plan("mp-1", date(2024, 5, 11))
    state = reduce(AppState(), AddMealPlan(plan))

    assert state.meal_plans == (plan,)
    assert reduce(state, DeleteMealPlan("mp-1")).meal_plans == ()


def test_delete_shopping_item() -> None:
    state = reduce(AppState(), ReplaceShoppingList([_eggs("s-1"), _eggs("s-2")]))

    remaining = reduce(state, DeleteShoppingItem("s-1"))

    assert [item.id for item in remaining.shopping_list] == ["s-2"]


@pytest.mark.parametrize(
    "action",
    [
        DeleteIngredient("missing"),
        DeleteMealPlan("missing"),
        DeleteShoppingItem("missing"),
        ToggleShoppingItem("missing"),
    ],
)
def test_actions_on_absent_ids_leave_state_equal(action) -> None:
    state = reduce(AppState(), ReplaceShoppingList([_eggs()]))
    state = reduce(state, ReplaceIngredients([make_ingredient()]))
    state = reduce(state, ReplaceMealPlans([_plan("mp-1", date(2024, 5, 11))]))

    assert reduce(state, action) == state


def test_store_keeps_version_for_delete_then_update() -> None:
    milk = make_ingredient()
    store = StateStore()
    store.dispatch(ReplaceIngredients([milk]))
    before = store.dispatch(DeleteIngredient(milk.id))

    after = store.dispatch(UpdateIngredient(milk))

    assert after is before
    assert after.version == 2
    assert after.ingredients == ()


def test_store_keeps_version_for_noop_actions() -> None:
    store = StateStore()
    before = store.dispatch(ReplaceShoppingList([_eggs()]))

    store.dispatch(ToggleShoppingItem("missing"))
    store.dispatch(DeleteShoppingItem("missing"))
    store.dispatch(SetLoading(False))
    after = store.dispatch(object())  # type: ignore[arg-type]

    assert after is before
    assert after.version == 1
