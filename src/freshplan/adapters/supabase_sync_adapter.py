"""Supabase implementation of the household sync adapter."""

import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import UTC, date, datetime
from typing import Any

from supabase import Client

from freshplan.domain.ingredients import Ingredient
from freshplan.domain.recipes import MealPlan, NutritionFacts, Recipe, RecipeIngredient
from freshplan.domain.shopping import ShoppingItem
from freshplan.services.sync import (
    CollectionKind,
    SnapshotCallback,
    Subscription,
    SyncAdapter,
)

_TABLES = {
    CollectionKind.INGREDIENTS: "ingredients",
    CollectionKind.RECIPES: "recipes",
    CollectionKind.MEAL_PLANS: "meal_plans",
    CollectionKind.SHOPPING_LIST: "shopping_items",
}

# (column, descending) per collection; the store trusts this order verbatim.
_ORDERING = {
    CollectionKind.INGREDIENTS: ("created_at", True),
    CollectionKind.RECIPES: ("created_at", True),
    CollectionKind.MEAL_PLANS: ("date", False),
    CollectionKind.SHOPPING_LIST: ("created_at", True),
}


@dataclass(eq=False)
class _Feed(Subscription):
    """A live snapshot feed registered on the adapter."""

    adapter: "SupabaseSyncAdapter" = field(repr=False)
    kind: CollectionKind
    callback: SnapshotCallback
    active: bool = True

    def cancel(self) -> None:
        """Stop the feed. Waits for an in-flight delivery to finish."""
        self.adapter._remove_feed(self)


@dataclass
class SupabaseSyncAdapter(SyncAdapter):
    """Supabase-backed sync adapter scoped to one user.

    Each write re-reads the affected table and pushes the snapshot to live
    feeds; ``refresh`` does the same for changes made by other clients.
    """

    client: Client
    user_id: str
    _feeds: list[_Feed] = field(default_factory=list, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False)

    def create(self, kind: CollectionKind, record: Any) -> str:
        """Insert a record and return its generated id."""
        response = (
            self.client.table(_TABLES[kind])
            .insert({"user_id": self.user_id, **_record_row(record)})
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to create {kind} record")
        record_id = str(response.data[0]["id"])
        self._publish(kind)
        return record_id

    def update(
        self, kind: CollectionKind, record_id: str, changes: dict[str, object]
    ) -> None:
        """Update some columns of a record."""
        payload = _encode(changes)
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        self.client.table(_TABLES[kind]).update(payload).eq("id", record_id).eq(
            "user_id", self.user_id
        ).execute()
        self._publish(kind)

    def delete(self, kind: CollectionKind, record_id: str) -> None:
        """Delete a record."""
        self.client.table(_TABLES[kind]).delete().eq("id", record_id).eq(
            "user_id", self.user_id
        ).execute()
        self._publish(kind)

    def batch_replace(self, kind: CollectionKind, records: Sequence[Any]) -> None:
        """Clear the replacement scope, then insert all records."""
        table = _TABLES[kind]
        if kind is CollectionKind.MEAL_PLANS:
            dates = sorted({plan.date.isoformat() for plan in records})
            if dates:
                self.client.table(table).delete().eq("user_id", self.user_id).in_(
                    "date", dates
                ).execute()
        elif kind is CollectionKind.SHOPPING_LIST:
            self.client.table(table).delete().eq("user_id", self.user_id).execute()
        else:
            raise ValueError(f"Batch replace is not supported for {kind}")

        if records:
            self.client.table(table).insert(
                [{"user_id": self.user_id, **_record_row(record)} for record in records]
            ).execute()
        self._publish(kind)

    def fetch(self, kind: CollectionKind) -> list[Any]:
        """Return the ordered snapshot of a collection."""
        column, descending = _ORDERING[kind]
        response = (
            self.client.table(_TABLES[kind])
            .select("*")
            .eq("user_id", self.user_id)
            .order(column, desc=descending)
            .execute()
        )
        parse = _PARSERS[kind]
        return [parse(row) for row in response.data or []]

    def subscribe(
        self, kind: CollectionKind, callback: SnapshotCallback
    ) -> Subscription:
        """Register a feed and deliver the current snapshot to it."""
        feed = _Feed(adapter=self, kind=kind, callback=callback)
        with self._lock:
            snapshot = self.fetch(kind)
            self._feeds.append(feed)
            feed.callback(snapshot)
        return feed

    def refresh(self, kind: CollectionKind | None = None) -> None:
        """Push fresh snapshots to live feeds."""
        kinds = [kind] if kind is not None else list(CollectionKind)
        for item in kinds:
            self._publish(item)

    def _publish(self, kind: CollectionKind) -> None:
        # Fetch and delivery share one critical section so snapshots reach
        # feeds in the order they were read.
        with self._lock:
            feeds = [feed for feed in self._feeds if feed.kind is kind]
            if not feeds:
                return
            snapshot = self.fetch(kind)
            for feed in feeds:
                if feed.active:
                    feed.callback(list(snapshot))

    def _remove_feed(self, feed: _Feed) -> None:
        with self._lock:
            feed.active = False
            if feed in self._feeds:
                self._feeds.remove(feed)


def _encode(value: Any) -> Any:
    """Convert domain values into JSON-compatible column values."""
    if isinstance(value, date):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: _encode(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_encode(item) for item in value]
    return value


def _record_row(record: Any) -> dict[str, object]:
    row = _encode(record)
    row.pop("id", None)
    return row


def _parse_date(value: object) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _parse_ingredient(row: dict[str, Any]) -> Ingredient:
    """Parse an ingredient row into a domain model."""
    return Ingredient(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        category=str(row.get("category", "")),
        quantity=float(row.get("quantity", 0.0)),
        unit=str(row.get("unit", "")),
        expiry_date=_parse_date(row["expiry_date"]),
        added_date=_parse_date(row.get("added_date") or row.get("created_at")),
        tags=tuple(row.get("tags") or ()),
    )


def _parse_recipe(row: dict[str, Any]) -> Recipe:
    """Parse a recipe row, or an embedded recipe snapshot."""
    nutrition = row.get("nutrition") or {}
    return Recipe(
        id=str(row.get("id", "")),
        name=str(row.get("name", "")),
        ingredients=tuple(
            RecipeIngredient(
                name=str(item.get("name", "")),
                quantity=float(item.get("quantity", 0.0)),
                unit=str(item.get("unit", "")),
            )
            for item in row.get("ingredients") or []
        ),
        instructions=tuple(str(step) for step in row.get("instructions") or []),
        prep_time=int(row.get("prep_time", 0)),
        cook_time=int(row.get("cook_time", 0)),
        servings=int(row.get("servings", 1)),
        nutrition=NutritionFacts(
            calories=float(nutrition.get("calories", 0.0)),
            protein=float(nutrition.get("protein", 0.0)),
            carbs=float(nutrition.get("carbs", 0.0)),
            fat=float(nutrition.get("fat", 0.0)),
            fiber=float(nutrition.get("fiber", 0.0)),
        ),
        tags=tuple(row.get("tags") or ()),
        image=row.get("image"),
        is_user_created=bool(row.get("is_user_created", False)),
    )


def _parse_meal_plan(row: dict[str, Any]) -> MealPlan:
    recipe = _parse_recipe(row.get("recipe") or {})
    return MealPlan(
        id=str(row["id"]),
        date=_parse_date(row["date"]),
        recipe=recipe,
        servings=int(row.get("servings") or recipe.servings),
    )


def _parse_shopping_item(row: dict[str, Any]) -> ShoppingItem:
    return ShoppingItem(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        quantity=float(row.get("quantity", 0.0)),
        unit=str(row.get("unit", "")),
        category=str(row.get("category", "")),
        completed=bool(row.get("completed", False)),
    )


_PARSERS: dict[CollectionKind, Callable[[dict[str, Any]], Any]] = {
    CollectionKind.INGREDIENTS: _parse_ingredient,
    CollectionKind.RECIPES: _parse_recipe,
    CollectionKind.MEAL_PLANS: _parse_meal_plan,
    CollectionKind.SHOPPING_LIST: _parse_shopping_item,
}
