"""Tag derivation and classification for inventory ingredients."""

from collections.abc import Iterable

from freshplan.domain.ingredients import Category, StorageLocation

FROZEN_TAG = "frozen"
STORAGE_TAGS = frozenset(location.value for location in StorageLocation)
_HIDDEN_TAGS = STORAGE_TAGS | {FROZEN_TAG}
DISPLAY_TAG_LIMIT = 3

SUGGESTED_TAGS: dict[Category, tuple[str, ...]] = {
    Category.PROTEIN: ("lean", "high-protein", "meat", "fish", "poultry"),
    Category.VEGETABLES: ("organic", "fresh", "leafy", "root", "cruciferous"),
    Category.FRUITS: ("seasonal", "citrus", "berry", "tropical", "stone-fruit"),
    Category.DAIRY: ("low-fat", "whole", "aged", "fresh"),
    Category.GRAINS: ("whole-grain", "refined", "gluten-free"),
    Category.PANTRY: ("canned", "dried", "jarred", "bottled"),
    Category.HERBS_AND_SPICES: ("dried", "fresh", "ground", "whole"),
    Category.FROZEN: ("frozen",),
}

_STORAGE_ICONS = (
    (FROZEN_TAG, "❄️"),
    (StorageLocation.FRIDGE.value, "🧊"),
    (StorageLocation.PANTRY.value, "🏠"),
)
_DEFAULT_ICON = "📦"


def derive_tags(
    storage_location: StorageLocation | str, extra_tags: Iterable[str] = ()
) -> tuple[str, ...]:
    """Build the canonical tag set persisted with an ingredient.

    The result holds exactly one storage location, followed by the extra tags
    in the order given, plus ``frozen`` when the location is the freezer.
    Raises ValueError for an unknown storage location.
    """
    location = StorageLocation(str(storage_location).strip().lower())
    tags = [location.value]
    for raw in extra_tags:
        tag = raw.strip().lower()
        if tag and tag not in _HIDDEN_TAGS:
            tags.append(tag)
    if location is StorageLocation.FREEZER:
        tags.append(FROZEN_TAG)
    return tuple(dict.fromkeys(tags))


def split_tags(tags: Iterable[str]) -> tuple[StorageLocation, list[str]]:
    """Recover the storage location and user tags from a persisted tag set."""
    tag_list = list(tags)
    location = next(
        (StorageLocation(tag) for tag in tag_list if tag in STORAGE_TAGS),
        StorageLocation.FRIDGE,
    )
    extras = [tag for tag in tag_list if tag not in _HIDDEN_TAGS]
    return location, extras


def storage_icon(tags: Iterable[str]) -> str:
    """Return the glyph for where an ingredient is stored."""
    present = set(tags)
    for tag, icon in _STORAGE_ICONS:
        if tag in present:
            return icon
    return _DEFAULT_ICON


def suggested_tags(category: Category | str) -> tuple[str, ...]:
    """Return the curated quick-add tags for a primary category."""
    try:
        return SUGGESTED_TAGS[Category(category)]
    except ValueError:
        return ()


def displayable_tags(
    tags: Iterable[str], limit: int = DISPLAY_TAG_LIMIT
) -> tuple[str, ...]:
    """Return user tags for display, hiding storage and frozen markers."""
    visible = [tag for tag in tags if tag not in _HIDDEN_TAGS]
    return tuple(visible[:limit])
