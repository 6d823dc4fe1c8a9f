"""Signed-in household sessions wired to the sync layer."""

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, fields, replace
from datetime import date
from functools import partial
from typing import Any, cast

from freshplan.domain.ingredients import Ingredient, IngredientDraft
from freshplan.domain.recipes import MealPlan, Recipe
from freshplan.domain.seed import is_seed_recipe
from freshplan.domain.shopping import ShoppingItem
from freshplan.domain.state import (
    AppState,
    ReplaceIngredients,
    ReplaceMealPlans,
    ReplaceRecipes,
    ReplaceShoppingList,
    SetError,
    SetLoading,
    SetSyncHandle,
)
from freshplan.services.store import StateStore
from freshplan.services.sync import CollectionKind, Subscription, SyncAdapter
from freshplan.services.tags import derive_tags

_logger = logging.getLogger(__name__)

AdapterFactory = Callable[[str], SyncAdapter]

_REPLACE_ACTIONS = {
    CollectionKind.INGREDIENTS: ReplaceIngredients,
    CollectionKind.RECIPES: ReplaceRecipes,
    CollectionKind.MEAL_PLANS: ReplaceMealPlans,
    CollectionKind.SHOPPING_LIST: ReplaceShoppingList,
}


@dataclass(frozen=True)
class SessionContext:
    """Identity of one sign-in. Feeds are bound to the context they began in."""

    user_id: str
    epoch: int


@dataclass(frozen=True)
class PlannedMeal:
    """Request to schedule a recipe on a date."""

    date: date
    recipe_id: str
    servings: int | None = None


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a write sent to the sync layer."""

    ok: bool
    record_id: str | None = None


@dataclass
class InventorySession:
    """Binds one signed-in user to a state store and a sync adapter."""

    store: StateStore
    adapter_factory: AdapterFactory
    today: Callable[[], date] = date.today
    _context: SessionContext | None = field(default=None, init=False)
    _epoch: int = field(default=0, init=False)
    _subscriptions: list[Subscription] = field(default_factory=list, init=False)
    _pending: set[CollectionKind] = field(default_factory=set, init=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False)
    _pending_lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    @property
    def state(self) -> AppState:
        """Return the current store snapshot."""
        return self.store.state

    @property
    def context(self) -> SessionContext | None:
        """Return the active session context, if signed in."""
        return self._context

    @property
    def adapter(self) -> SyncAdapter | None:
        """Return the attached sync adapter, if any."""
        return cast("SyncAdapter | None", self.store.state.sync_handle)

    def sign_in(self, user_id: str) -> None:
        """Attach a sync adapter for the user and start the four feeds."""
        with self._lock:
            if self._context is not None:
                if self._context.user_id == user_id:
                    return
                self.sign_out()

            try:
                adapter = self.adapter_factory(user_id)
            except Exception as exc:
                _logger.exception("Failed to create sync adapter for user=%s", user_id)
                self.store.dispatch(SetError(str(exc)))
                return

            self._epoch += 1
            context = SessionContext(user_id=user_id, epoch=self._epoch)
            with self._pending_lock:
                self._pending = set(CollectionKind)
            self._context = context
            self.store.dispatch(SetLoading(True))
            self.store.dispatch(SetSyncHandle(adapter))
            _logger.info("Signed in user=%s epoch=%s", user_id, context.epoch)

            try:
                for kind in CollectionKind:
                    subscription = adapter.subscribe(
                        kind, partial(self._on_snapshot, context, kind)
                    )
                    self._subscriptions.append(subscription)
            except Exception as exc:
                _logger.exception("Failed to subscribe feeds for user=%s", user_id)
                # Detach fully so the next sign-in retries from scratch.
                self._detach()
                self.store.dispatch(SetError(str(exc)))

    def sign_out(self) -> None:
        """Stop all feeds, then detach the adapter and clear the collections."""
        with self._lock:
            context = self._detach()
            if context is not None:
                _logger.info(
                    "Signed out user=%s epoch=%s", context.user_id, context.epoch
                )

    def _detach(self) -> SessionContext | None:
        with self._lock:
            context = self._context
            if context is None:
                return None
            self._context = None
            subscriptions, self._subscriptions = self._subscriptions, []
            for subscription in subscriptions:
                subscription.cancel()

            self.store.dispatch(SetSyncHandle(None))
            self.store.dispatch(ReplaceIngredients([]))
            self.store.dispatch(ReplaceRecipes([]))
            self.store.dispatch(ReplaceMealPlans([]))
            self.store.dispatch(ReplaceShoppingList([]))
            self.store.dispatch(SetLoading(False))
            return context

    def _on_snapshot(
        self, context: SessionContext, kind: CollectionKind, records: list[Any]
    ) -> None:
        if context is not self._context:
            _logger.debug(
                "Dropping %s snapshot from stale epoch=%s", kind, context.epoch
            )
            return
        self.store.dispatch(_REPLACE_ACTIONS[kind](list(records)))
        with self._pending_lock:
            was_pending = kind in self._pending
            self._pending.discard(kind)
            finished = was_pending and not self._pending
        if finished:
            self.store.dispatch(SetLoading(False))

    def clear_error(self) -> None:
        """Forget the last reported error."""
        self.store.dispatch(SetError(None))

    def add_ingredient(self, draft: IngredientDraft) -> WriteResult:
        """Create an ingredient with tags derived from the draft."""
        ingredient = _ingredient_from_draft(draft, added_date=self.today())
        return self._perform(
            "add ingredient",
            lambda adapter: adapter.create(CollectionKind.INGREDIENTS, ingredient),
        )

    def update_ingredient(
        self, ingredient_id: str, draft: IngredientDraft
    ) -> WriteResult:
        """Replace an ingredient's fields, recomputing its tags wholesale."""
        existing = _find(self.state.ingredients, ingredient_id)
        added_date = existing.added_date if existing else self.today()
        ingredient = _ingredient_from_draft(draft, added_date=added_date)
        return self._perform(
            "update ingredient",
            lambda adapter: adapter.update(
                CollectionKind.INGREDIENTS, ingredient_id, _record_fields(ingredient)
            ),
        )

    def delete_ingredient(self, ingredient_id: str) -> WriteResult:
        """Delete an ingredient."""
        return self._perform(
            "delete ingredient",
            lambda adapter: adapter.delete(CollectionKind.INGREDIENTS, ingredient_id),
        )

    def add_recipe(self, recipe: Recipe) -> WriteResult:
        """Save a user-created recipe."""
        user_recipe = replace(recipe, id="", is_user_created=True)
        return self._perform(
            "add recipe",
            lambda adapter: adapter.create(CollectionKind.RECIPES, user_recipe),
        )

    def update_recipe(self, recipe_id: str, changes: dict[str, object]) -> WriteResult:
        """Update fields of a user recipe. Built-in recipes are read-only."""
        if is_seed_recipe(recipe_id):
            return self._reject(f"Built-in recipe {recipe_id} cannot be modified")
        return self._perform(
            "update recipe",
            lambda adapter: adapter.update(CollectionKind.RECIPES, recipe_id, changes),
        )

    def delete_recipe(self, recipe_id: str) -> WriteResult:
        """Delete a user recipe. Built-in recipes are read-only."""
        if is_seed_recipe(recipe_id):
            return self._reject(f"Built-in recipe {recipe_id} cannot be deleted")
        return self._perform(
            "delete recipe",
            lambda adapter: adapter.delete(CollectionKind.RECIPES, recipe_id),
        )

    def add_meal_plan(self, planned: PlannedMeal) -> WriteResult:
        """Schedule a copy of a recipe on a date."""
        plan = self._build_meal_plan(planned)
        if plan is None:
            return self._reject(f"Unknown recipe {planned.recipe_id}")
        return self._perform(
            "add meal plan",
            lambda adapter: adapter.create(CollectionKind.MEAL_PLANS, plan),
        )

    def delete_meal_plan(self, meal_plan_id: str) -> WriteResult:
        """Delete a meal plan."""
        return self._perform(
            "delete meal plan",
            lambda adapter: adapter.delete(CollectionKind.MEAL_PLANS, meal_plan_id),
        )

    def generate_meal_plans(self, planned: Sequence[PlannedMeal]) -> WriteResult:
        """Replace the plans on the given dates with new ones."""
        plans = []
        for item in planned:
            plan = self._build_meal_plan(item)
            if plan is None:
                return self._reject(f"Unknown recipe {item.recipe_id}")
            plans.append(plan)
        return self._perform(
            "generate meal plans",
            lambda adapter: adapter.batch_replace(CollectionKind.MEAL_PLANS, plans),
        )

    def add_shopping_item(self, item: ShoppingItem) -> WriteResult:
        """Add a line to the shopping list."""
        new_item = replace(item, id="")
        return self._perform(
            "add shopping item",
            lambda adapter: adapter.create(CollectionKind.SHOPPING_LIST, new_item),
        )

    def toggle_shopping_item(self, item_id: str) -> WriteResult:
        """Flip the completed flag of a shopping item."""
        item = _find(self.state.shopping_list, item_id)
        if item is None:
            _logger.debug("Toggle ignored for missing shopping item=%s", item_id)
            return WriteResult(ok=True)
        return self._perform(
            "toggle shopping item",
            lambda adapter: adapter.update(
                CollectionKind.SHOPPING_LIST,
                item_id,
                {"completed": not item.completed},
            ),
        )

    def delete_shopping_item(self, item_id: str) -> WriteResult:
        """Delete a shopping item."""
        return self._perform(
            "delete shopping item",
            lambda adapter: adapter.delete(CollectionKind.SHOPPING_LIST, item_id),
        )

    def generate_shopping_list(self, items: Sequence[ShoppingItem]) -> WriteResult:
        """Replace the whole shopping list."""
        new_items = [replace(item, id="") for item in items]
        return self._perform(
            "generate shopping list",
            lambda adapter: adapter.batch_replace(
                CollectionKind.SHOPPING_LIST, new_items
            ),
        )

    def _build_meal_plan(self, planned: PlannedMeal) -> MealPlan | None:
        recipe = _find(self.state.recipes, planned.recipe_id)
        if recipe is None:
            return None
        return MealPlan(
            id="",
            date=planned.date,
            recipe=recipe,
            servings=planned.servings or recipe.servings,
        )

    def _perform(
        self, action: str, operation: Callable[[SyncAdapter], str | None]
    ) -> WriteResult:
        adapter = self.adapter
        if adapter is None:
            return self._reject(f"Cannot {action}: not signed in")
        try:
            record_id = operation(adapter)
        except Exception as exc:
            _logger.exception("Failed to %s", action)
            self.store.dispatch(SetError(str(exc)))
            return WriteResult(ok=False)
        return WriteResult(ok=True, record_id=record_id)

    def _reject(self, message: str) -> WriteResult:
        _logger.warning(message)
        self.store.dispatch(SetError(message))
        return WriteResult(ok=False)


@dataclass
class SessionRegistry:
    """Keeps one inventory session per signed-in user."""

    adapter_factory: AdapterFactory
    today: Callable[[], date] = date.today
    _sessions: dict[str, InventorySession] = field(default_factory=dict, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def get(self, user_id: str) -> InventorySession:
        """Return the user's session, signing in on first use."""
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                session = InventorySession(
                    store=StateStore(),
                    adapter_factory=self.adapter_factory,
                    today=self.today,
                )
                self._sessions[user_id] = session
        session.sign_in(user_id)
        return session

    def sign_out(self, user_id: str) -> None:
        """End the user's session, if any."""
        with self._lock:
            session = self._sessions.pop(user_id, None)
        if session is not None:
            session.sign_out()

    def close_all(self) -> None:
        """Sign out every session."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.sign_out()


def _ingredient_from_draft(draft: IngredientDraft, added_date: date) -> Ingredient:
    return Ingredient(
        id="",
        name=draft.name,
        category=str(draft.category),
        quantity=draft.quantity,
        unit=str(draft.unit),
        expiry_date=draft.expiry_date,
        added_date=added_date,
        tags=derive_tags(draft.storage_location, draft.additional_tags),
    )


def _record_fields(record: Any) -> dict[str, object]:
    return {
        item.name: getattr(record, item.name)
        for item in fields(record)
        if item.name != "id"
    }


def _find(records: Sequence[Any], record_id: str) -> Any | None:
    return next((record for record in records if record.id == record_id), None)
