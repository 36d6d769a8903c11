import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from ..deps import get_current_user_id, get_kitchen
from ..schemas import DashboardOut, Recipe, RecipeCreate, RecipeIngredient, RecipePatch
from ..services.kitchen import Kitchen

router = APIRouter()
logger = logging.getLogger("cucina.recipes")


@router.get("/recipes", response_model=list[Recipe])
def list_recipes(
    q: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    """List the user's recipes, optionally filtered by name."""
    return kitchen.list_recipes(user_id, q or "")


@router.post("/recipes", response_model=Recipe, status_code=status.HTTP_201_CREATED)
def create_recipe(
    recipe_in: RecipeCreate,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    return kitchen.create_recipe(
        user_id,
        name=recipe_in.name,
        description=recipe_in.description,
        servings=recipe_in.servings,
        ingredients=[RecipeIngredient(**i.model_dump()) for i in recipe_in.ingredients],
        instructions=recipe_in.instructions,
    )


@router.get("/recipes/dashboard", response_model=DashboardOut)
def dashboard(
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    """Totals plus the five most cooked and most viewed recipes."""
    return kitchen.dashboard(user_id)


@router.get("/recipes/{recipe_id}", response_model=Recipe)
def get_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    return kitchen.get_recipe(recipe_id, user_id)


@router.post("/recipes/{recipe_id}/view", response_model=Recipe)
def view_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    return kitchen.view_recipe(recipe_id, user_id)


@router.patch("/recipes/{recipe_id}", response_model=Recipe)
def update_recipe(
    recipe_id: str,
    patch: RecipePatch,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    # null means "leave unchanged"
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)
    if patch.ingredients is not None:
        changes["ingredients"] = [RecipeIngredient(**i.model_dump()) for i in patch.ingredients]
    return kitchen.update_recipe(recipe_id, user_id, **changes)


@router.delete("/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
    recipe_id: str,
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    """Delete a recipe together with its cooking sessions."""
    kitchen.delete_recipe(recipe_id, user_id)
    logger.info(f"Recipe {recipe_id} deleted by {user_id}")
