"""Recipe listing and search queries."""

from typing import Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ValidationError
from app.models.recipe import Ingredient, Like, Recipe
from app.models.schemas import RecipeSummary
from app.models.user import User


class SearchService:
    """
    Builds the recipe summary query (recipe + author name + like count) that
    every recipe listing goes through, and runs title searches with optional
    filters on top of it.
    """

    def build_recipe_query(
        self,
        title: Optional[str] = None,
        min_rating: Optional[int] = None,
        ingredient: Optional[str] = None,
        user_id: Optional[int] = None,
        recipe_id: Optional[int] = None,
    ) -> Select:
        """
        Return a select of recipe summaries, most liked first.

        Each provided filter adds one AND-joined predicate; a filter left as
        None adds nothing.

        Args:
            title: case-insensitive substring of the title
            min_rating: minimum number of likes
            ingredient: case-insensitive substring of any ingredient name
            user_id: owner of the recipes
            recipe_id: a single recipe
        """
        like_counts = (
            select(Like.recipe_id, func.count(Like.id).label("like_count"))
            .group_by(Like.recipe_id)
            .subquery()
        )
        like_count = func.coalesce(like_counts.c.like_count, 0)

        query = (
            select(
                Recipe.id,
                Recipe.title,
                Recipe.description,
                Recipe.user_id,
                Recipe.created_at,
                like_count.label("like_count"),
                User.name.label("author"),
            )
            .join(User, Recipe.user_id == User.id)
            .outerjoin(like_counts, Recipe.id == like_counts.c.recipe_id)
        )

        if recipe_id is not None:
            query = query.where(Recipe.id == recipe_id)
        if user_id is not None:
            query = query.where(Recipe.user_id == user_id)
        if title is not None:
            query = query.where(Recipe.title.icontains(title, autoescape=True))
        if min_rating is not None:
            query = query.where(like_count >= min_rating)
        if ingredient is not None:
            # Subquery keeps a recipe to one row however many ingredients match
            matching = select(Ingredient.recipe_id).where(
                Ingredient.name.icontains(ingredient, autoescape=True)
            )
            query = query.where(Recipe.id.in_(matching))

        return query.order_by(like_count.desc(), Recipe.created_at.desc(), Recipe.id.desc())

    async def fetch_summaries(self, db: AsyncSession, query: Select) -> list[RecipeSummary]:
        result = await db.execute(query)
        return [RecipeSummary.model_validate(dict(row)) for row in result.mappings().all()]

    async def search_by_title(
        self,
        db: AsyncSession,
        query: Optional[str],
        min_rating: Optional[int] = None,
        ingredient: Optional[str] = None,
    ) -> list[RecipeSummary]:
        """Recipes whose title contains `query`, ignoring case. Raises ValidationError if blank."""
        if query is None or not query.strip():
            raise ValidationError("Search query is required")

        if ingredient is not None and not ingredient.strip():
            ingredient = None

        return await self.fetch_summaries(
            db,
            self.build_recipe_query(
                title=query.strip(),
                min_rating=min_rating,
                ingredient=ingredient.strip() if ingredient else None,
            ),
        )


# Singleton instance
search_service = SearchService()
