"""Domain models for the ingredient inventory."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum


class Category(StrEnum):
    """Primary category chosen when an ingredient is created."""

    PROTEIN = "Protein"
    VEGETABLES = "Vegetables"
    FRUITS = "Fruits"
    DAIRY = "Dairy"
    GRAINS = "Grains"
    PANTRY = "Pantry"
    HERBS_AND_SPICES = "Herbs & Spices"
    FROZEN = "Frozen"


ALL_CATEGORIES = "All"


class StorageLocation(StrEnum):
    """Where an ingredient is kept. Exactly one tags every ingredient."""

    FRIDGE = "fridge"
    FREEZER = "freezer"
    PANTRY = "pantry"
    COUNTER = "counter"


class Unit(StrEnum):
    """Units offered for inventory quantities."""

    PIECE = "piece"
    KG = "kg"
    G = "g"
    LBS = "lbs"
    OZ = "oz"
    CUP = "cup"
    ML = "ml"
    L = "l"
    BUNCH = "bunch"
    PACKAGE = "package"
    JAR = "jar"
    BOTTLE = "bottle"


@dataclass(frozen=True)
class Ingredient:
    """An ingredient in the household inventory.

    ``id`` is assigned by the persistence layer and is empty before the first
    save. ``tags`` keeps insertion order and holds no duplicates.
    """

    id: str
    name: str
    category: str
    quantity: float
    unit: str
    expiry_date: date
    added_date: date
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class IngredientDraft:
    """User-entered ingredient fields before tags are derived."""

    name: str
    category: Category
    quantity: float
    unit: Unit
    expiry_date: date
    storage_location: StorageLocation = StorageLocation.FRIDGE
    additional_tags: list[str] = field(default_factory=list)
