"""Domain models for the shopping list."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ShoppingItem:
    """Represents a line on the shopping list."""

    id: str
    name: str
    quantity: float
    unit: str
    category: str
    completed: bool = False
