"""Reducer-style state store for the household inventory."""

import logging
import threading
from dataclasses import dataclass, field, replace

from freshplan.domain.seed import SEED_RECIPE_IDS, SEED_RECIPES
from freshplan.domain.state import (
    Action,
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

_logger = logging.getLogger(__name__)


def reduce(state: AppState, action: Action) -> AppState:  # noqa: PLR0911, PLR0912
    """Return the state that results from applying an action.

    Every transition is total: input is accepted verbatim and an unknown
    action leaves the state unchanged.
    """
    if isinstance(action, SetLoading):
        return replace(state, loading=action.loading)
    if isinstance(action, SetError):
        return replace(state, error=action.error)
    if isinstance(action, SetSyncHandle):
        return replace(state, sync_handle=action.handle)

    if isinstance(action, ReplaceIngredients):
        return replace(state, ingredients=tuple(action.ingredients))
    if isinstance(action, ReplaceRecipes):
        user_recipes = tuple(
            recipe for recipe in action.recipes if recipe.id not in SEED_RECIPE_IDS
        )
        return replace(state, recipes=SEED_RECIPES + user_recipes)
    if isinstance(action, ReplaceMealPlans):
        return replace(state, meal_plans=tuple(action.meal_plans))
    if isinstance(action, ReplaceShoppingList):
        return replace(state, shopping_list=tuple(action.items))

    if isinstance(action, AddIngredient):
        return replace(state, ingredients=(*state.ingredients, action.ingredient))
    if isinstance(action, UpdateIngredient):
        updated = action.ingredient
        return replace(
            state,
            ingredients=tuple(
                updated if ingredient.id == updated.id else ingredient
                for ingredient in state.ingredients
            ),
        )
    if isinstance(action, DeleteIngredient):
        return replace(
            state,
            ingredients=tuple(
                ingredient
                for ingredient in state.ingredients
                if ingredient.id != action.ingredient_id
            ),
        )

    if isinstance(action, AddRecipe):
        return replace(state, recipes=(*state.recipes, action.recipe))

    if isinstance(action, AddMealPlan):
        return replace(state, meal_plans=(*state.meal_plans, action.meal_plan))
    if isinstance(action, DeleteMealPlan):
        return replace(
            state,
            meal_plans=tuple(
                plan for plan in state.meal_plans if plan.id != action.meal_plan_id
            ),
        )

    if isinstance(action, AddShoppingItem):
        return replace(state, shopping_list=(*state.shopping_list, action.item))
    if isinstance(action, ToggleShoppingItem):
        return replace(
            state,
            shopping_list=tuple(
                replace(item, completed=not item.completed)
                if item.id == action.item_id
                else item
                for item in state.shopping_list
            ),
        )
    if isinstance(action, DeleteShoppingItem):
        return replace(
            state,
            shopping_list=tuple(
                item for item in state.shopping_list if item.id != action.item_id
            ),
        )

    return state


@dataclass
class StateStore:
    """Single-writer holder of the current inventory snapshot.

    Readers get immutable snapshots; all writes go through ``dispatch``.
    """

    _state: AppState = field(default_factory=AppState)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def state(self) -> AppState:
        """Return the current snapshot."""
        return self._state

    def dispatch(self, action: Action) -> AppState:
        """Apply an action and return the new snapshot.

        Actions that leave the state unchanged do not bump ``version``.
        """
        with self._lock:
            next_state = reduce(self._state, action)
            if next_state == self._state:
                return self._state
            self._state = replace(next_state, version=self._state.version + 1)
            _logger.debug(
                "Applied %s (version=%s)", type(action).__name__, self._state.version
            )
            return self._state
