"""Domain models for recipes and meal plans."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class RecipeIngredient:
    """Free-text ingredient line of a recipe."""

    name: str
    quantity: float
    unit: str


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrition facts per serving."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float


@dataclass(frozen=True)
class Recipe:
    """A built-in or user-created recipe."""

    id: str
    name: str
    ingredients: tuple[RecipeIngredient, ...]
    instructions: tuple[str, ...]
    prep_time: int
    cook_time: int
    servings: int
    nutrition: NutritionFacts
    tags: tuple[str, ...] = ()
    image: str | None = None
    is_user_created: bool = False


@dataclass(frozen=True)
class MealPlan:
    """A recipe scheduled for a date.

    The recipe is an embedded copy, so editing or deleting the source recipe
    does not change plans already made.
    """

    id: str
    date: date
    recipe: Recipe
    servings: int
