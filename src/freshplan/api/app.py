"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status

from freshplan.api.models import (
    GenerateMealPlansRequest,
    GenerateShoppingListRequest,
    IngredientForm,
    MealPlanForm,
    RecipeForm,
    RecipeUpdate,
    ShoppingItemForm,
)
from freshplan.app_logging import configure_logging
from freshplan.config import current_time
from freshplan.containers import AppContainer
from freshplan.domain.ingredients import (
    ALL_CATEGORIES,
    Category,
    StorageLocation,
    Unit,
)
from freshplan.domain.seed import is_seed_recipe
from freshplan.services.sessions import InventorySession, WriteResult
from freshplan.services.tags import suggested_tags
from freshplan.services.views import (
    IngredientView,
    build_inventory_view,
    expiring_soon,
)


async def require_user(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller's user id as asserted by the auth layer in front."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id


def get_session(
    request: Request, user_id: str = Depends(require_user)
) -> InventorySession:
    """Return the caller's inventory session, signing in on first use."""
    container: AppContainer = request.app.state.container
    return container.session_registry.get(user_id)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close sessions")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/state")
    def session_state(
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Return session status and collection sizes."""
        state = session.state
        return {
            "loading": state.loading,
            "error": state.error,
            "version": state.version,
            "counts": {
                "ingredients": len(state.ingredients),
                "recipes": len(state.recipes),
                "meal_plans": len(state.meal_plans),
                "shopping_list": len(state.shopping_list),
            },
        }

    @app.delete("/session")
    def sign_out(request: Request, user_id: str = Depends(require_user)) -> dict:
        """End the caller's session."""
        request.app.state.container.session_registry.sign_out(user_id)
        return {"status": "ok"}

    @app.delete("/error")
    def clear_error(session: InventorySession = Depends(get_session)) -> dict:
        """Forget the last reported error."""
        session.clear_error()
        return {"status": "ok"}

    @app.get("/categories")
    async def categories() -> dict[str, list[str]]:
        """Return the form vocabularies."""
        return {
            "categories": [category.value for category in Category],
            "storage_locations": [location.value for location in StorageLocation],
            "units": [unit.value for unit in Unit],
        }

    @app.get("/categories/{category}/tags")
    async def category_tags(category: str) -> dict[str, object]:
        """Return quick-add tags for a primary category."""
        return {"category": category, "tags": list(suggested_tags(category))}

    @app.get("/ingredients")
    def list_ingredients(
        search: str = "",
        category: str = ALL_CATEGORIES,
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Return the filtered inventory with freshness details."""
        now = current_time(container.settings.timezone)
        views = build_inventory_view(session.state.ingredients, now, search, category)
        return {"ingredients": [_view_payload(view) for view in views]}

    @app.get("/ingredients/expiring")
    def list_expiring(
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Return expired and expiring ingredients, soonest first."""
        now = current_time(container.settings.timezone)
        views = expiring_soon(session.state.ingredients, now)
        return {"ingredients": [_view_payload(view) for view in views]}

    @app.get("/ingredients/{ingredient_id}/form")
    def ingredient_form(
        ingredient_id: str, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Return the edit form prefilled from a stored ingredient."""
        ingredient = next(
            (item for item in session.state.ingredients if item.id == ingredient_id),
            None,
        )
        if ingredient is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return IngredientForm.from_ingredient(ingredient).model_dump(mode="json")

    @app.post("/ingredients", status_code=status.HTTP_202_ACCEPTED)
    def add_ingredient(
        form: IngredientForm, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Add an ingredient to the inventory."""
        return _accepted(session, session.add_ingredient(form.to_draft()))

    @app.put("/ingredients/{ingredient_id}", status_code=status.HTTP_202_ACCEPTED)
    def update_ingredient(
        ingredient_id: str,
        form: IngredientForm,
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Replace an ingredient's fields."""
        result = session.update_ingredient(ingredient_id, form.to_draft())
        return _accepted(session, result)

    @app.delete("/ingredients/{ingredient_id}", status_code=status.HTTP_202_ACCEPTED)
    def delete_ingredient(
        ingredient_id: str, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Delete an ingredient."""
        return _accepted(session, session.delete_ingredient(ingredient_id))

    @app.get("/recipes")
    def list_recipes(
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Return built-in and user recipes."""
        return {"recipes": list(session.state.recipes)}

    @app.post("/recipes", status_code=status.HTTP_202_ACCEPTED)
    def add_recipe(
        form: RecipeForm, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Save a user recipe."""
        return _accepted(session, session.add_recipe(form.to_recipe()))

    @app.patch("/recipes/{recipe_id}", status_code=status.HTTP_202_ACCEPTED)
    def update_recipe(
        recipe_id: str,
        form: RecipeUpdate,
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Update a user recipe."""
        _ensure_user_recipe(recipe_id)
        return _accepted(session, session.update_recipe(recipe_id, form.to_changes()))

    @app.delete("/recipes/{recipe_id}", status_code=status.HTTP_202_ACCEPTED)
    def delete_recipe(
        recipe_id: str, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Delete a user recipe."""
        _ensure_user_recipe(recipe_id)
        return _accepted(session, session.delete_recipe(recipe_id))

    @app.get("/meal-plans")
    def list_meal_plans(
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Return meal plans ordered by date."""
        return {"meal_plans": list(session.state.meal_plans)}

    @app.post("/meal-plans", status_code=status.HTTP_202_ACCEPTED)
    def add_meal_plan(
        form: MealPlanForm, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Schedule a recipe on a date."""
        _ensure_recipe_known(session, [form.recipe_id])
        return _accepted(session, session.add_meal_plan(form.to_planned()))

    @app.delete("/meal-plans/{meal_plan_id}", status_code=status.HTTP_202_ACCEPTED)
    def delete_meal_plan(
        meal_plan_id: str, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Delete a meal plan."""
        return _accepted(session, session.delete_meal_plan(meal_plan_id))

    @app.post("/meal-plans/generate", status_code=status.HTTP_202_ACCEPTED)
    def generate_meal_plans(
        payload: GenerateMealPlansRequest,
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Replace the plans on the requested dates."""
        _ensure_recipe_known(session, [plan.recipe_id for plan in payload.plans])
        planned = [plan.to_planned() for plan in payload.plans]
        return _accepted(session, session.generate_meal_plans(planned))

    @app.get("/shopping-list")
    def list_shopping_items(
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Return the shopping list."""
        return {"items": list(session.state.shopping_list)}

    @app.post("/shopping-list", status_code=status.HTTP_202_ACCEPTED)
    def add_shopping_item(
        form: ShoppingItemForm, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Add a shopping list line."""
        return _accepted(session, session.add_shopping_item(form.to_item()))

    @app.post("/shopping-list/{item_id}/toggle", status_code=status.HTTP_202_ACCEPTED)
    def toggle_shopping_item(
        item_id: str, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Flip a shopping item's completed flag."""
        if not any(item.id == item_id for item in session.state.shopping_list):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _accepted(session, session.toggle_shopping_item(item_id))

    @app.delete("/shopping-list/{item_id}", status_code=status.HTTP_202_ACCEPTED)
    def delete_shopping_item(
        item_id: str, session: InventorySession = Depends(get_session)
    ) -> dict[str, object]:
        """Delete a shopping item."""
        return _accepted(session, session.delete_shopping_item(item_id))

    @app.post("/shopping-list/generate", status_code=status.HTTP_202_ACCEPTED)
    def generate_shopping_list(
        payload: GenerateShoppingListRequest,
        session: InventorySession = Depends(get_session),
    ) -> dict[str, object]:
        """Replace the whole shopping list."""
        items = [item.to_item() for item in payload.items]
        return _accepted(session, session.generate_shopping_list(items))

    return app


def _accepted(session: InventorySession, result: WriteResult) -> dict[str, object]:
    """Translate a write result into a response, surfacing the stored error."""
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=session.state.error or "Write failed",
        )
    payload: dict[str, object] = {"status": "accepted"}
    if result.record_id is not None:
        payload["id"] = result.record_id
    return payload


def _ensure_user_recipe(recipe_id: str) -> None:
    if is_seed_recipe(recipe_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Built-in recipes are read-only",
        )


def _ensure_recipe_known(session: InventorySession, recipe_ids: list[str]) -> None:
    known = {recipe.id for recipe in session.state.recipes}
    missing = [recipe_id for recipe_id in recipe_ids if recipe_id not in known]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown recipe: {', '.join(missing)}",
        )


def _view_payload(view: IngredientView) -> dict[str, object]:
    ingredient = view.ingredient
    return {
        "id": ingredient.id,
        "name": ingredient.name,
        "category": ingredient.category,
        "quantity": ingredient.quantity,
        "unit": ingredient.unit,
        "expiry_date": ingredient.expiry_date.isoformat(),
        "added_date": ingredient.added_date.isoformat(),
        "tags": list(ingredient.tags),
        "status": view.status.tier.value,
        "days_remaining": view.status.days_remaining,
        "label": view.status.label,
        "needs_attention": view.status.needs_attention,
        "storage_icon": view.storage_icon,
        "display_tags": list(view.display_tags),
    }
