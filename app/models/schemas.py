"""Pydantic schemas for API request/response validation.

Field names follow the JSON the web client already speaks: snake_case rows,
with a few camelCase payloads kept for compatibility (`stepNumber` on step
creation, `likeCount`, `isLiked`).
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


# ============================================================
# Users & Auth
# ============================================================

class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserUpdate(BaseModel):
    """Partial account update - omitted fields keep their value."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)."""
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


# ============================================================
# Recipes
# ============================================================

class RecipeCreate(BaseModel):
    title: str
    description: str


class RecipeResponse(BaseModel):
    """A bare recipe row."""
    id: int
    title: str
    description: str
    user_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RecipeSummary(RecipeResponse):
    """Recipe row joined with its author's name and like count."""
    like_count: int = 0
    author: Optional[str] = None


class IngredientIn(BaseModel):
    # Optional here so that missing values surface as a single readable 400
    name: Optional[str] = None
    quantity: Optional[str] = None


class IngredientUpsert(IngredientIn):
    """Ingredient in an update payload: with an id it edits that row, otherwise it is added."""
    id: Optional[int] = None


class IngredientResponse(BaseModel):
    id: int
    name: str
    quantity: str
    recipe_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class StepIn(BaseModel):
    """A step; accepts `stepNumber` or `step_number`."""
    step_number: Optional[int] = Field(default=None, alias="stepNumber")
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class StepUpsert(StepIn):
    id: Optional[int] = None


class StepResponse(BaseModel):
    id: int
    step_number: int
    description: str
    recipe_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class RecipeUpdate(BaseModel):
    """Full recipe edit: title/description plus ingredient and step upserts."""
    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: list[IngredientUpsert] = []
    steps: list[StepUpsert] = []


class AddIngredientsRequest(BaseModel):
    ingredients: list[IngredientIn] = []


class AddStepsRequest(BaseModel):
    steps: list[StepIn] = []


# ============================================================
# Comments, Likes, Photos
# ============================================================

class CommentCreate(BaseModel):
    text: Optional[str] = None


class CommentResponse(BaseModel):
    id: int
    text: str
    author: str
    created_at: Optional[datetime] = None
    recipe_id: Optional[int] = None
    user_id: Optional[int] = None


class LikeCountResponse(BaseModel):
    likeCount: int


class LikeStatusResponse(BaseModel):
    isLiked: bool


class PhotoResponse(BaseModel):
    id: int
    photo_url: str
    recipe_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# Utility Schemas
# ============================================================

class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    environment: str
    database: str = "connected"
    photo_storage: str = "disk"
