"""Pydantic models for API request payloads."""

import datetime as dt

from pydantic import BaseModel, Field

from freshplan.domain.ingredients import (
    Category,
    Ingredient,
    IngredientDraft,
    StorageLocation,
    Unit,
)
from freshplan.domain.recipes import NutritionFacts, Recipe, RecipeIngredient
from freshplan.domain.shopping import ShoppingItem
from freshplan.services.sessions import PlannedMeal
from freshplan.services.tags import split_tags


class IngredientForm(BaseModel):
    """Ingredient add/edit form."""

    name: str = Field(min_length=1)
    category: Category = Category.VEGETABLES
    quantity: float = Field(default=1, ge=0)
    unit: Unit = Unit.PIECE
    expiry_date: dt.date
    storage_location: StorageLocation = StorageLocation.FRIDGE
    additional_tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_ingredient(cls, ingredient: Ingredient) -> "IngredientForm":
        """Prefill the edit form from a stored ingredient."""
        location, extras = split_tags(ingredient.tags)
        return cls(
            name=ingredient.name,
            category=ingredient.category,
            quantity=ingredient.quantity,
            unit=ingredient.unit,
            expiry_date=ingredient.expiry_date,
            storage_location=location,
            additional_tags=extras,
        )

    def to_draft(self) -> IngredientDraft:
        return IngredientDraft(
            name=self.name,
            category=self.category,
            quantity=self.quantity,
            unit=self.unit,
            expiry_date=self.expiry_date,
            storage_location=self.storage_location,
            additional_tags=list(self.additional_tags),
        )


class RecipeIngredientPayload(BaseModel):
    """Ingredient line of a recipe."""

    name: str
    quantity: float = Field(ge=0)
    unit: str


class NutritionPayload(BaseModel):
    """Nutrition facts per serving."""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0


class RecipeForm(BaseModel):
    """User recipe form."""

    name: str = Field(min_length=1)
    ingredients: list[RecipeIngredientPayload] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    prep_time: int = Field(default=0, ge=0)
    cook_time: int = Field(default=0, ge=0)
    servings: int = Field(default=1, gt=0)
    nutrition: NutritionPayload = Field(default_factory=NutritionPayload)
    tags: list[str] = Field(default_factory=list)
    image: str | None = None

    def to_recipe(self) -> Recipe:
        return Recipe(
            id="",
            name=self.name,
            ingredients=tuple(
                RecipeIngredient(item.name, item.quantity, item.unit)
                for item in self.ingredients
            ),
            instructions=tuple(self.instructions),
            prep_time=self.prep_time,
            cook_time=self.cook_time,
            servings=self.servings,
            nutrition=NutritionFacts(**self.nutrition.model_dump()),
            tags=tuple(self.tags),
            image=self.image,
            is_user_created=True,
        )


class RecipeUpdate(BaseModel):
    """Partial update of a user recipe."""

    name: str | None = Field(default=None, min_length=1)
    ingredients: list[RecipeIngredientPayload] | None = None
    instructions: list[str] | None = None
    prep_time: int | None = Field(default=None, ge=0)
    cook_time: int | None = Field(default=None, ge=0)
    servings: int | None = Field(default=None, gt=0)
    nutrition: NutritionPayload | None = None
    tags: list[str] | None = None
    image: str | None = None

    def to_changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class MealPlanForm(BaseModel):
    """Schedule a recipe on a date."""

    date: dt.date
    recipe_id: str
    servings: int | None = Field(default=None, gt=0)

    def to_planned(self) -> PlannedMeal:
        return PlannedMeal(
            date=self.date, recipe_id=self.recipe_id, servings=self.servings
        )


class GenerateMealPlansRequest(BaseModel):
    """Replace the meal plans on the dates given."""

    plans: list[MealPlanForm]


class ShoppingItemForm(BaseModel):
    """Shopping list line."""

    name: str = Field(min_length=1)
    quantity: float = Field(default=1, ge=0)
    unit: str = Unit.PIECE.value
    category: str = ""
    completed: bool = False

    def to_item(self) -> ShoppingItem:
        return ShoppingItem(
            id="",
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            category=self.category,
            completed=self.completed,
        )


class GenerateShoppingListRequest(BaseModel):
    """Replace the whole shopping list."""

    items: list[ShoppingItemForm]
