"""Inventory state snapshot and the actions that transition it."""

from dataclasses import dataclass

from freshplan.domain.ingredients import Ingredient
from freshplan.domain.recipes import MealPlan, Recipe
from freshplan.domain.seed import SEED_RECIPES
from freshplan.domain.shopping import ShoppingItem


@dataclass(frozen=True)
class AppState:
    """Immutable snapshot of everything a signed-in household sees."""

    ingredients: tuple[Ingredient, ...] = ()
    recipes: tuple[Recipe, ...] = SEED_RECIPES
    meal_plans: tuple[MealPlan, ...] = ()
    shopping_list: tuple[ShoppingItem, ...] = ()
    loading: bool = False
    error: str | None = None
    sync_handle: object | None = None
    version: int = 0


@dataclass(frozen=True)
class SetLoading:
    loading: bool


@dataclass(frozen=True)
class SetError:
    error: str | None


@dataclass(frozen=True)
class SetSyncHandle:
    handle: object | None


@dataclass(frozen=True)
class ReplaceIngredients:
    ingredients: list[Ingredient]


@dataclass(frozen=True)
class ReplaceRecipes:
    """Replace user recipes; the seed set is always prepended."""

    recipes: list[Recipe]


@dataclass(frozen=True)
class ReplaceMealPlans:
    meal_plans: list[MealPlan]


@dataclass(frozen=True)
class ReplaceShoppingList:
    items: list[ShoppingItem]


@dataclass(frozen=True)
class AddIngredient:
    ingredient: Ingredient


@dataclass(frozen=True)
class UpdateIngredient:
    ingredient: Ingredient


@dataclass(frozen=True)
class DeleteIngredient:
    ingredient_id: str


@dataclass(frozen=True)
class AddRecipe:
    recipe: Recipe


@dataclass(frozen=True)
class AddMealPlan:
    meal_plan: MealPlan


@dataclass(frozen=True)
class DeleteMealPlan:
    meal_plan_id: str


@dataclass(frozen=True)
class AddShoppingItem:
    item: ShoppingItem


@dataclass(frozen=True)
class ToggleShoppingItem:
    item_id: str


@dataclass(frozen=True)
class DeleteShoppingItem:
    item_id: str


Action = (
    SetLoading
    | SetError
    | SetSyncHandle
    | ReplaceIngredients
    | ReplaceRecipes
    | ReplaceMealPlans
    | ReplaceShoppingList
    | AddIngredient
    | UpdateIngredient
    | DeleteIngredient
    | AddRecipe
    | AddMealPlan
    | DeleteMealPlan
    | AddShoppingItem
    | ToggleShoppingItem
    | DeleteShoppingItem
)
