"""Recipes CRUD API router.

Endpoints:
- GET /api/recipes - List recipes (optional search/classification filters)
- POST /api/recipes - Create recipe (slug derived from title unless given)
- GET /api/recipes/{slug} - Get recipe
- PUT /api/recipes/{slug} - Partially update recipe
- DELETE /api/recipes/{slug} - Delete recipe and its uploaded images
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from ..deps import get_repository, get_storage
from ..errors import BadRequest, Conflict, Messages, NotFound
from ..models import CookingMethod, Difficulty, DishGroup
from ..schemas import DataEnvelope, RecipeCreate, RecipeListItemOut, RecipeOut, RecipeUpdate
from ..services.recipe_repo import (
    RecipeNotFound,
    RecipeRepository,
    SlugConflict,
    SlugGenerationFailed,
)
from ..services.storage import LocalStorage

router = APIRouter()
logger = logging.getLogger("recepti.recipes")


@router.get(
    "/recipes",
    response_model=DataEnvelope[list[RecipeListItemOut]],
    response_model_exclude_none=True,
)
def list_recipes(
    q: Optional[str] = Query(None, max_length=200),
    difficulty: Optional[Difficulty] = Query(None),
    dish_group: Optional[DishGroup] = Query(None, alias="dishGroup"),
    cooking_method: Optional[CookingMethod] = Query(None, alias="cookingMethod"),
    repo: RecipeRepository = Depends(get_repository),
):
    """List recipes, newest first."""
    recipes = repo.list_recipes(
        q=q,
        difficulty=difficulty,
        dish_group=dish_group,
        cooking_method=cooking_method,
    )
    return {"data": recipes}


@router.post(
    "/recipes",
    response_model=DataEnvelope[RecipeOut],
    response_model_exclude_none=True,
    status_code=201,
)
def create_recipe(
    payload: RecipeCreate,
    repo: RecipeRepository = Depends(get_repository),
):
    """Create a recipe with a unique slug."""
    try:
        created = repo.create(payload)
    except SlugGenerationFailed:
        raise BadRequest(Messages.SLUG_NOT_GENERATED)
    except SlugConflict as e:
        logger.warning(f"Slug conflict on create: {e}")
        raise Conflict(Messages.SLUG_MUST_BE_UNIQUE)

    return {"data": created}


@router.get(
    "/recipes/{slug}",
    response_model=DataEnvelope[RecipeOut],
    response_model_exclude_none=True,
)
def get_recipe(
    slug: str,
    repo: RecipeRepository = Depends(get_repository),
):
    """Get a recipe by slug."""
    recipe = repo.get_by_slug(slug)
    if recipe is None:
        raise NotFound(Messages.RECIPE_NOT_FOUND)
    return {"data": recipe}


@router.put(
    "/recipes/{slug}",
    response_model=DataEnvelope[RecipeOut],
    response_model_exclude_none=True,
)
def update_recipe(
    slug: str,
    payload: RecipeUpdate,
    repo: RecipeRepository = Depends(get_repository),
):
    """Update a recipe. Only the fields present in the body change."""
    try:
        updated = repo.update(slug, payload)
    except RecipeNotFound:
        raise NotFound(Messages.RECIPE_NOT_FOUND)
    return {"data": updated}


@router.delete("/recipes/{slug}", status_code=204)
def delete_recipe(
    slug: str,
    repo: RecipeRepository = Depends(get_repository),
    storage: LocalStorage = Depends(get_storage),
):
    """Delete a recipe, then its uploaded images (best effort)."""
    try:
        repo.delete(slug)
    except RecipeNotFound:
        raise NotFound(Messages.RECIPE_NOT_FOUND)

    # The record is gone either way; leftover files are only orphans.
    storage.delete_recipe_folder(slug)
    return Response(status_code=204)
