"""Likes and comments on recipes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.db import get_db
from app.auth import get_current_user, AuthUser
from app.models.schemas import (
    CommentCreate,
    CommentResponse,
    LikeCountResponse,
    LikeStatusResponse,
    MessageResponse,
)
from app.services.social import social_service

router = APIRouter(prefix="/api/recipes", tags=["social"])


# ============================================================
# Likes
# ============================================================

@router.post("/{recipe_id}/like", response_model=MessageResponse, status_code=201)
async def add_like(
    recipe_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """Like a recipe. Liking the same recipe twice is a 409."""
    await social_service.add_like(db, recipe_id, user.id)
    return MessageResponse(message="Like added successfully")


@router.delete("/{recipe_id}/like", response_model=MessageResponse)
async def remove_like(
    recipe_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    await social_service.remove_like(db, recipe_id, user.id)
    return MessageResponse(message="Like removed successfully")


@router.get("/{recipe_id}/like-count", response_model=LikeCountResponse)
async def get_like_count(recipe_id: int, db: AsyncSession = Depends(get_db)):
    return LikeCountResponse(likeCount=await social_service.like_count(db, recipe_id))


@router.get("/{recipe_id}/like-status", response_model=LikeStatusResponse)
async def get_like_status(
    recipe_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """Whether the current user likes the recipe."""
    return LikeStatusResponse(isLiked=await social_service.like_status(db, recipe_id, user.id))


# ============================================================
# Comments
# ============================================================

@router.post("/{recipe_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    recipe_id: int,
    data: CommentCreate,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    return await social_service.add_comment(db, recipe_id, user.id, data.text)


@router.get("/{recipe_id}/comments", response_model=List[CommentResponse])
async def get_comments(recipe_id: int, db: AsyncSession = Depends(get_db)):
    """Comments with author names, newest first."""
    return await social_service.list_comments(db, recipe_id)
