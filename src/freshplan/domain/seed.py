"""Built-in recipes available to every household."""

from freshplan.domain.recipes import NutritionFacts, Recipe, RecipeIngredient

SEED_RECIPES: tuple[Recipe, ...] = (
    Recipe(
        id="default-1",
        name="Grilled Chicken with Broccoli",
        ingredients=(
            RecipeIngredient("Chicken Breast", 500, "g"),
            RecipeIngredient("Broccoli", 250, "g"),
            RecipeIngredient("Olive Oil", 2, "tbsp"),
        ),
        instructions=(
            "Season chicken breast with salt and pepper.",
            "Heat olive oil in a pan over medium-high heat.",
            "Cook chicken for 6-7 minutes per side until golden.",
            "Steam broccoli for 5 minutes until tender.",
            "Serve chicken with steamed broccoli.",
        ),
        prep_time=10,
        cook_time=20,
        servings=2,
        nutrition=NutritionFacts(
            calories=320, protein=35, carbs=8, fat=15, fiber=4
        ),
        tags=("High Protein", "Low Carb", "Healthy"),
        image="https://images.pexels.com/photos/2338407/pexels-photo-2338407.jpeg",
    ),
    Recipe(
        id="default-2",
        name="Salmon Rice Bowl",
        ingredients=(
            RecipeIngredient("Salmon Fillet", 400, "g"),
            RecipeIngredient("Rice", 200, "g"),
            RecipeIngredient("Bell Peppers", 1, "piece"),
        ),
        instructions=(
            "Cook rice according to package instructions.",
            "Season salmon with herbs and spices.",
            "Pan-sear salmon for 4-5 minutes per side.",
            "Sauté bell peppers until tender.",
            "Assemble bowl with rice, salmon, and peppers.",
        ),
        prep_time=15,
        cook_time=25,
        servings=2,
        nutrition=NutritionFacts(
            calories=450, protein=30, carbs=45, fat=18, fiber=3
        ),
        tags=("Omega-3", "Balanced", "Heart Healthy"),
        image="https://images.pexels.com/photos/725997/pexels-photo-725997.jpeg",
    ),
    Recipe(
        id="default-3",
        name="Beef and Vegetable Stir Fry",
        ingredients=(
            RecipeIngredient("Ground Beef", 400, "g"),
            RecipeIngredient("Bell Peppers", 2, "piece"),
            RecipeIngredient("Frozen Peas", 200, "g"),
            RecipeIngredient("Rice", 150, "g"),
        ),
        instructions=(
            "Cook rice according to package instructions.",
            "Brown ground beef in a large pan.",
            "Add sliced bell peppers and cook for 5 minutes.",
            "Add frozen peas and cook for 3 minutes.",
            "Season with soy sauce and serve over rice.",
        ),
        prep_time=10,
        cook_time=20,
        servings=3,
        nutrition=NutritionFacts(
            calories=380, protein=25, carbs=35, fat=16, fiber=5
        ),
        tags=("Quick", "One Pan", "Family Friendly"),
        image="https://images.pexels.com/photos/1640777/pexels-photo-1640777.jpeg",
    ),
)

SEED_RECIPE_IDS = frozenset(recipe.id for recipe in SEED_RECIPES)


def is_seed_recipe(recipe_id: str) -> bool:
    """Return True when the id belongs to a built-in recipe."""
    return recipe_id in SEED_RECIPE_IDS
