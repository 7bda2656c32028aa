"""Recipe aggregate operations: recipes with their ingredients and steps."""

from typing import Optional, Sequence

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, NotFoundError, ValidationError
from app.models.recipe import Comment, Ingredient, Like, Recipe, RecipePhoto, Step
from app.models.schemas import IngredientIn, IngredientUpsert, RecipeSummary, StepIn, StepUpsert
from app.services.search import search_service

# Dependent tables, in the order they are cleared before the recipe row
CASCADE_ORDER = (Like, Comment, RecipePhoto, Step, Ingredient)


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _check_ingredient(ingredient: IngredientIn, new: bool = True) -> None:
    """New ingredients need both fields; edits may omit one but not blank it."""
    fields = (ingredient.name, ingredient.quantity)
    if any(_blank(value) for value in fields if new or value is not None):
        raise ValidationError("Each ingredient must have a name and quantity")


def _check_step(step: StepIn, new: bool = True) -> None:
    missing_number = new and step.step_number is None
    if missing_number or ((new or step.description is not None) and _blank(step.description)):
        raise ValidationError("Each step must contain stepNumber and description")
    if step.step_number is not None and step.step_number < 1:
        raise ValidationError("Step numbers must be positive")


class RecipeService:
    """
    Handles the recipe aggregate.

    Multi-statement operations (update, delete) run in the request's session
    transaction and roll it back on any failure, so a half-applied change is
    never committed.
    """

    async def ensure_exists(self, db: AsyncSession, recipe_id: int) -> None:
        """Raise NotFoundError if the recipe does not exist."""
        result = await db.execute(select(Recipe.id).where(Recipe.id == recipe_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Recipe not found")

    async def create(
        self,
        db: AsyncSession,
        title: str,
        description: str,
        owner_id: int,
    ) -> Recipe:
        if _blank(title) or _blank(description):
            raise ValidationError("Title and description are required")

        recipe = Recipe(title=title, description=description, user_id=owner_id)
        db.add(recipe)
        await db.commit()
        await db.refresh(recipe)
        return recipe

    async def get_all(self, db: AsyncSession) -> list[RecipeSummary]:
        """All recipes with author and like count, most liked first."""
        return await search_service.fetch_summaries(db, search_service.build_recipe_query())

    async def get_by_user(self, db: AsyncSession, user_id: int) -> list[RecipeSummary]:
        return await search_service.fetch_summaries(
            db, search_service.build_recipe_query(user_id=user_id)
        )

    async def get_by_id(self, db: AsyncSession, recipe_id: int) -> RecipeSummary:
        summaries = await search_service.fetch_summaries(
            db, search_service.build_recipe_query(recipe_id=recipe_id)
        )
        if not summaries:
            raise NotFoundError("Recipe not found")
        return summaries[0]

    async def update(
        self,
        db: AsyncSession,
        recipe_id: int,
        title: Optional[str],
        description: Optional[str],
        ingredients: Sequence[IngredientUpsert] = (),
        steps: Sequence[StepUpsert] = (),
    ) -> None:
        """
        Update a recipe and upsert its ingredients and steps in one transaction.

        An ingredient or step carrying an id edits that row (which must belong
        to this recipe); one without an id is inserted. Rows missing from the
        payload are left untouched.

        Raises:
            ValidationError: title or description missing, or an ingredient or
                step malformed (checked before any write)
            NotFoundError: the recipe, or a referenced ingredient/step, does not exist
            ConflictError: a write violated a constraint (e.g. duplicate step number)
        """
        if _blank(title) or _blank(description):
            raise ValidationError("Title and description are required")
        for ingredient in ingredients:
            _check_ingredient(ingredient, new=ingredient.id is None)
        for step in steps:
            _check_step(step, new=step.id is None)

        try:
            await self.ensure_exists(db, recipe_id)

            await db.execute(
                update(Recipe)
                .where(Recipe.id == recipe_id)
                .values(title=title, description=description)
            )

            for ingredient in ingredients:
                if ingredient.id is not None:
                    result = await db.execute(
                        update(Ingredient)
                        .where(Ingredient.id == ingredient.id, Ingredient.recipe_id == recipe_id)
                        .execution_options(synchronize_session=False)
                        .values(
                            name=func.coalesce(ingredient.name, Ingredient.name),
                            quantity=func.coalesce(ingredient.quantity, Ingredient.quantity),
                        )
                    )
                    if result.rowcount == 0:
                        raise NotFoundError(f"Ingredient {ingredient.id} not found")
                else:
                    await db.execute(
                        insert(Ingredient).values(
                            recipe_id=recipe_id,
                            name=ingredient.name.strip(),
                            quantity=ingredient.quantity.strip(),
                        )
                    )

            for step in steps:
                if step.id is not None:
                    result = await db.execute(
                        update(Step)
                        .where(Step.id == step.id, Step.recipe_id == recipe_id)
                        .execution_options(synchronize_session=False)
                        .values(
                            step_number=func.coalesce(step.step_number, Step.step_number),
                            description=func.coalesce(step.description, Step.description),
                        )
                    )
                    if result.rowcount == 0:
                        raise NotFoundError(f"Step {step.id} not found")
                else:
                    await db.execute(
                        insert(Step).values(
                            recipe_id=recipe_id,
                            step_number=step.step_number,
                            description=step.description.strip(),
                        )
                    )

            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Failed to update recipe: conflicting ingredient or step data")
        except Exception:
            await db.rollback()
            raise

    async def cascade_delete(
        self,
        db: AsyncSession,
        recipe_id: int,
        owner_id: Optional[int] = None,
    ) -> bool:
        """
        Remove a recipe's dependent rows, then the recipe itself, without
        committing. With `owner_id`, the recipe row is only deleted if that
        user owns it.

        Returns:
            True if the recipe row was deleted
        """
        for model in CASCADE_ORDER:
            await db.execute(
                delete(model)
                .where(model.recipe_id == recipe_id)
                .execution_options(synchronize_session=False)
            )

        statement = delete(Recipe).where(Recipe.id == recipe_id)
        if owner_id is not None:
            statement = statement.where(Recipe.user_id == owner_id)
        result = await db.execute(statement.execution_options(synchronize_session=False))
        return result.rowcount > 0

    async def delete(self, db: AsyncSession, recipe_id: int, caller_id: int) -> None:
        """
        Delete a recipe and everything that depends on it.

        Raises NotFoundError when no recipe matches both the id and the caller
        as owner; a missing recipe and someone else's recipe look the same.
        """
        try:
            if not await self.cascade_delete(db, recipe_id, owner_id=caller_id):
                raise NotFoundError("Recipe not found or not authorized")

            await db.commit()
        except Exception:
            await db.rollback()
            raise

    # ------------------------------------------------------------
    # Ingredients & steps
    # ------------------------------------------------------------

    async def add_ingredients(
        self,
        db: AsyncSession,
        recipe_id: int,
        ingredients: Sequence[IngredientIn],
    ) -> list[Ingredient]:
        """Insert a batch of ingredients in a single statement."""
        if not ingredients:
            raise ValidationError("Ingredients must be a non-empty array")
        for ingredient in ingredients:
            _check_ingredient(ingredient)

        await self.ensure_exists(db, recipe_id)

        rows = [
            {"recipe_id": recipe_id, "name": i.name.strip(), "quantity": i.quantity.strip()}
            for i in ingredients
        ]
        try:
            result = await db.scalars(insert(Ingredient).values(rows).returning(Ingredient))
            created = list(result.all())
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return created

    async def get_ingredients(self, db: AsyncSession, recipe_id: int) -> list[Ingredient]:
        result = await db.execute(
            select(Ingredient).where(Ingredient.recipe_id == recipe_id).order_by(Ingredient.id)
        )
        return list(result.scalars().all())

    async def add_steps(
        self,
        db: AsyncSession,
        recipe_id: int,
        steps: Sequence[StepIn],
    ) -> list[Step]:
        """Insert a batch of steps in a single statement."""
        if not steps:
            raise ValidationError("Steps are required and should be an array")
        for step in steps:
            _check_step(step)

        await self.ensure_exists(db, recipe_id)

        rows = [
            {"recipe_id": recipe_id, "step_number": s.step_number, "description": s.description.strip()}
            for s in steps
        ]
        try:
            result = await db.scalars(insert(Step).values(rows).returning(Step))
            created = list(result.all())
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("Step numbers must be unique within a recipe")
        except Exception:
            await db.rollback()
            raise
        return created

    async def get_steps(self, db: AsyncSession, recipe_id: int) -> list[Step]:
        result = await db.execute(
            select(Step).where(Step.recipe_id == recipe_id).order_by(Step.step_number)
        )
        return list(result.scalars().all())


# Singleton instance
recipe_service = RecipeService()
