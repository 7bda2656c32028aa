"""User account reads, edits and deletion."""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.recipe import Comment, Like, Recipe
from app.models.user import User
from app.services.credentials import hash_password
from app.services.recipes import recipe_service

NOT_FOUND_OR_FORBIDDEN = "User not found or not authorized"


class UserService:

    async def get_user(self, db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(self, db: AsyncSession) -> list[User]:
        result = await db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def update_user(
        self,
        db: AsyncSession,
        user_id: int,
        caller_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        """
        Change name, email and/or password of the caller's own account.

        Fields left as None keep their current value. Another user's account
        is reported exactly like a missing one.
        """
        if user_id != caller_id:
            raise NotFoundError(NOT_FOUND_OR_FORBIDDEN)

        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(NOT_FOUND_OR_FORBIDDEN)

        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be empty")
            user.name = name.strip()
        if email is not None:
            if not email.strip():
                raise ValidationError("Email cannot be empty")
            user.email = email.strip()
        if password:
            user.password = hash_password(password)

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Email already registered")
        await db.refresh(user)
        return user

    async def delete_user(self, db: AsyncSession, user_id: int, caller_id: int) -> int:
        """
        Delete the caller's account and all associated data.

        This permanently deletes, in one transaction:
        - the user's likes and comments on any recipe
        - every recipe the user owns, with its dependent rows
        - the user row

        Returns:
            Number of recipes deleted
        """
        if user_id != caller_id:
            raise NotFoundError(NOT_FOUND_OR_FORBIDDEN)

        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(NOT_FOUND_OR_FORBIDDEN)

            result = await db.execute(select(Recipe.id).where(Recipe.user_id == user_id))
            recipe_ids = list(result.scalars().all())

            await db.execute(delete(Like).where(Like.user_id == user_id))
            await db.execute(delete(Comment).where(Comment.user_id == user_id))

            for recipe_id in recipe_ids:
                await recipe_service.cascade_delete(db, recipe_id)

            await db.execute(delete(User).where(User.id == user_id))
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        print(f"🗑️ Account {user_id} deleted with {len(recipe_ids)} recipe(s)")
        return len(recipe_ids)


# Singleton instance
user_service = UserService()
