"""User endpoints - registration, login and account management."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.db import get_db
from app.auth import get_current_user, AuthUser
from app.models.schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserResponse,
    UserUpdate,
)
from app.services.credentials import credential_service
from app.services.users import user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an account and return a token for it."""
    token, user = await credential_service.register(db, data.name, data.email, data.password)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange email and password for a token."""
    token, user = await credential_service.login(db, data.email, data.password)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def get_me(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """The user the bearer token belongs to."""
    return await user_service.get_user(db, user.id)


@router.get("", response_model=List[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    return await user_service.list_users(db)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    return await user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """Update name, email or password of your own account."""
    return await user_service.update_user(
        db,
        user_id,
        caller_id=user.id,
        name=data.name,
        email=data.email,
        password=data.password,
    )


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """
    Delete your own account and all associated data.

    This permanently deletes:
    - All recipes created by the user (with their ingredients, steps,
      photos, comments and likes)
    - The user's likes and comments on other recipes
    """
    await user_service.delete_user(db, user_id, caller_id=user.id)
    return MessageResponse(message=f"User with id {user_id} deleted")
