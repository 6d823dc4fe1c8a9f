"""Interface to the persistence layer that syncs household data."""

from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import Any, Protocol


class CollectionKind(StrEnum):
    """The four collections kept in sync for a household."""

    INGREDIENTS = "ingredients"
    RECIPES = "recipes"
    MEAL_PLANS = "meal_plans"
    SHOPPING_LIST = "shopping_list"


SnapshotCallback = Callable[[list[Any]], None]


class Subscription(Protocol):
    """Handle for one live snapshot feed."""

    def cancel(self) -> None:
        """Stop the feed. No callback fires after this returns."""


class SyncAdapter(Protocol):
    """Persistence interface for one signed-in household.

    Writes are fire-and-forget from the store's point of view: their effect
    arrives later as a full snapshot on the matching feed.
    """

    def create(self, kind: CollectionKind, record: Any) -> str:
        """Persist a new record (its id is ignored) and return the new id."""

    def update(
        self, kind: CollectionKind, record_id: str, changes: dict[str, object]
    ) -> None:
        """Replace some fields of a record."""

    def delete(self, kind: CollectionKind, record_id: str) -> None:
        """Delete a record."""

    def batch_replace(self, kind: CollectionKind, records: Sequence[Any]) -> None:
        """Clear the replacement scope then create all records."""

    def fetch(self, kind: CollectionKind) -> list[Any]:
        """Return the current ordered snapshot of a collection."""

    def subscribe(
        self, kind: CollectionKind, callback: SnapshotCallback
    ) -> Subscription:
        """Deliver the current snapshot now and every later one until cancelled."""
