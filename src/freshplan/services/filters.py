"""Search and category filtering for inventory views."""

from collections.abc import Iterable

from freshplan.domain.ingredients import ALL_CATEGORIES, Ingredient


def matches_filter(
    ingredient: Ingredient, search: str = "", category: str = ALL_CATEGORIES
) -> bool:
    """Return True when an ingredient should appear in a filtered view.

    The search term matches the name only. A category matches either the
    primary category or any tag, so "Frozen" also finds frozen chicken.
    """
    if search.lower() not in ingredient.name.lower():
        return False
    if category == ALL_CATEGORIES or ingredient.category == category:
        return True
    wanted = category.lower()
    return any(tag.lower() == wanted for tag in ingredient.tags)


def filter_ingredients(
    ingredients: Iterable[Ingredient],
    search: str = "",
    category: str = ALL_CATEGORIES,
) -> list[Ingredient]:
    """Return matching ingredients in their original order."""
    return [
        ingredient
        for ingredient in ingredients
        if matches_filter(ingredient, search, category)
    ]
