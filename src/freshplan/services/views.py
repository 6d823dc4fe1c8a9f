"""Read-side inventory views derived on demand."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from freshplan.domain.ingredients import ALL_CATEGORIES, Ingredient
from freshplan.services.expiry import ExpiryStatus, classify
from freshplan.services.filters import filter_ingredients
from freshplan.services.tags import displayable_tags, storage_icon


@dataclass(frozen=True)
class IngredientView:
    """Ingredient with its derived freshness and display tags."""

    ingredient: Ingredient
    status: ExpiryStatus
    storage_icon: str
    display_tags: tuple[str, ...]


def build_view(ingredient: Ingredient, now: date | datetime) -> IngredientView:
    """Derive the display data for one ingredient."""
    return IngredientView(
        ingredient=ingredient,
        status=classify(ingredient.expiry_date, now),
        storage_icon=storage_icon(ingredient.tags),
        display_tags=displayable_tags(ingredient.tags),
    )


def build_inventory_view(
    ingredients: Iterable[Ingredient],
    now: date | datetime,
    search: str = "",
    category: str = ALL_CATEGORIES,
) -> list[IngredientView]:
    """Filter ingredients and derive their views, keeping delivery order."""
    return [
        build_view(ingredient, now)
        for ingredient in filter_ingredients(ingredients, search, category)
    ]


def expiring_soon(
    ingredients: Iterable[Ingredient], now: date | datetime
) -> list[IngredientView]:
    """Return expired and expiring ingredients, soonest first."""
    views = [build_view(ingredient, now) for ingredient in ingredients]
    return sorted(
        (view for view in views if view.status.needs_attention),
        key=lambda view: view.status.days_remaining,
    )
