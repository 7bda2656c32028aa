"""Likes and comments on recipes."""

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.recipe import Comment, Like
from app.models.schemas import CommentResponse
from app.models.user import User
from app.services.recipes import recipe_service

ANONYMOUS = "Anonymous"


class SocialService:
    """
    Likes are row presence per (recipe, user); the database's unique
    constraint decides a duplicate, not a prior lookup. Comments are
    append-only and get their author's name joined in on read.
    """

    async def add_like(self, db: AsyncSession, recipe_id: int, user_id: int) -> None:
        """
        Raises:
            NotFoundError: the recipe does not exist
            ConflictError: the user already likes the recipe
        """
        await recipe_service.ensure_exists(db, recipe_id)

        db.add(Like(recipe_id=recipe_id, user_id=user_id))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("You have already liked this recipe")

    async def remove_like(self, db: AsyncSession, recipe_id: int, user_id: int) -> None:
        """Raises NotFoundError if the user had not liked the recipe."""
        result = await db.execute(
            delete(Like)
            .where(Like.recipe_id == recipe_id, Like.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise NotFoundError("Like not found")
        await db.commit()

    async def like_count(self, db: AsyncSession, recipe_id: int) -> int:
        result = await db.execute(
            select(func.count(Like.id)).where(Like.recipe_id == recipe_id)
        )
        return result.scalar() or 0

    async def like_status(self, db: AsyncSession, recipe_id: int, user_id: int) -> bool:
        result = await db.execute(
            select(Like.id).where(Like.recipe_id == recipe_id, Like.user_id == user_id)
        )
        return result.first() is not None

    async def add_comment(
        self,
        db: AsyncSession,
        recipe_id: int,
        user_id: int,
        text: str | None,
    ) -> CommentResponse:
        """Store a comment and return it with the author's display name."""
        if text is None or not text.strip():
            raise ValidationError("Comment text is required")

        await recipe_service.ensure_exists(db, recipe_id)

        comment = Comment(recipe_id=recipe_id, user_id=user_id, text=text)
        db.add(comment)
        await db.commit()
        await db.refresh(comment)

        author = await db.execute(select(User.name).where(User.id == user_id))

        return CommentResponse(
            id=comment.id,
            recipe_id=comment.recipe_id,
            user_id=comment.user_id,
            text=comment.text,
            created_at=comment.created_at,
            author=author.scalar_one_or_none() or ANONYMOUS,
        )

    async def list_comments(self, db: AsyncSession, recipe_id: int) -> list[CommentResponse]:
        """Comments on a recipe, newest first."""
        result = await db.execute(
            select(
                Comment.id,
                Comment.recipe_id,
                Comment.user_id,
                Comment.text,
                Comment.created_at,
                func.coalesce(User.name, ANONYMOUS).label("author"),
            )
            .outerjoin(User, Comment.user_id == User.id)
            .where(Comment.recipe_id == recipe_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return [CommentResponse.model_validate(dict(row)) for row in result.mappings().all()]


# Singleton instance
social_service = SocialService()
