"""Recipe API endpoints - CRUD over recipes, ingredients and steps, plus search."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List

from app.db import get_db
from app.auth import get_current_user, AuthUser
from app.models.schemas import (
    AddIngredientsRequest,
    AddStepsRequest,
    IngredientResponse,
    MessageResponse,
    RecipeCreate,
    RecipeResponse,
    RecipeSummary,
    RecipeUpdate,
    StepResponse,
)
from app.services.recipes import recipe_service
from app.services.search import search_service

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.post("", response_model=RecipeResponse, status_code=201)
async def create_recipe(
    data: RecipeCreate,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a recipe owned by the current user.

    Only the recipe row is created; ingredients, steps and photos are added
    with follow-up calls.
    """
    return await recipe_service.create(db, data.title, data.description, owner_id=user.id)


@router.get("", response_model=List[RecipeSummary])
async def get_all_recipes(db: AsyncSession = Depends(get_db)):
    """All recipes with author and like count, most liked first."""
    return await recipe_service.get_all(db)


@router.get("/search", response_model=List[RecipeSummary])
async def search_recipes(
    query: Optional[str] = Query(default=None, description="Text the title must contain"),
    min_rating: Optional[int] = Query(default=None, ge=0, description="Minimum number of likes"),
    ingredient: Optional[str] = Query(default=None, description="Text an ingredient name must contain"),
    db: AsyncSession = Depends(get_db),
):
    """
    Search recipes by title (case-insensitive substring), most liked first.

    Optional filters narrow the results further:
    - min_rating: only recipes with at least this many likes
    - ingredient: only recipes with a matching ingredient
    """
    return await search_service.search_by_title(
        db, query, min_rating=min_rating, ingredient=ingredient
    )


@router.get("/user/{user_id}", response_model=List[RecipeSummary])
async def get_recipes_by_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await recipe_service.get_by_user(db, user_id)


@router.get("/{recipe_id}", response_model=RecipeSummary)
async def get_recipe(recipe_id: int, db: AsyncSession = Depends(get_db)):
    return await recipe_service.get_by_id(db, recipe_id)


@router.put("/{recipe_id}", response_model=MessageResponse)
async def update_recipe(
    recipe_id: int,
    data: RecipeUpdate,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """
    Update title and description and upsert ingredients and steps.

    Ingredients/steps with an `id` are edited in place, others are added.
    Either everything in the request is saved or nothing is.
    """
    await recipe_service.update(
        db,
        recipe_id,
        data.title,
        data.description,
        ingredients=data.ingredients,
        steps=data.steps,
    )
    return MessageResponse(message="Recipe updated successfully")


@router.delete("/{recipe_id}", response_model=MessageResponse)
async def delete_recipe(
    recipe_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """Delete one of your recipes along with its likes, comments, photos, steps and ingredients."""
    await recipe_service.delete(db, recipe_id, caller_id=user.id)
    return MessageResponse(message="Recipe deleted successfully")


# ============================================================
# Ingredients & Steps
# ============================================================

@router.post("/{recipe_id}/ingredients", response_model=List[IngredientResponse], status_code=201)
async def add_ingredients(
    recipe_id: int,
    data: AddIngredientsRequest,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    return await recipe_service.add_ingredients(db, recipe_id, data.ingredients)


@router.get("/{recipe_id}/ingredients", response_model=List[IngredientResponse])
async def get_ingredients(recipe_id: int, db: AsyncSession = Depends(get_db)):
    return await recipe_service.get_ingredients(db, recipe_id)


@router.post("/{recipe_id}/steps", response_model=List[StepResponse], status_code=201)
async def add_steps(
    recipe_id: int,
    data: AddStepsRequest,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    return await recipe_service.add_steps(db, recipe_id, data.steps)


@router.get("/{recipe_id}/steps", response_model=List[StepResponse])
async def get_steps(recipe_id: int, db: AsyncSession = Depends(get_db)):
    """Steps in display order."""
    return await recipe_service.get_steps(db, recipe_id)
