"""SQLAlchemy models for recipes and everything a recipe owns."""

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.database import Base


class Recipe(Base):
    """
    Recipe model - the root of the recipe aggregate.

    A recipe owns its ingredients and steps (edited together through the
    update transaction) as well as its photos, comments and likes. Dependent
    rows are removed explicitly before the recipe itself on delete.
    """
    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="recipes")
    ingredients = relationship("Ingredient", back_populates="recipe")
    steps = relationship("Step", back_populates="recipe", order_by="Step.step_number")

    def __repr__(self):
        return f"<Recipe {self.id}: {self.title}>"


class Ingredient(Base):
    """Ingredient line of a recipe. Quantity is free text ("1 tsp", "a pinch")."""
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    quantity = Column(String(100), nullable=False, default="")

    recipe = relationship("Recipe", back_populates="ingredients")

    def __repr__(self):
        return f"<Ingredient {self.id}: {self.quantity} {self.name}>"


class Step(Base):
    """
    Step model - one instruction of a recipe.

    step_number defines display order and is unique within a recipe.
    """
    __tablename__ = "steps"
    __table_args__ = (
        UniqueConstraint("recipe_id", "step_number", name="uq_steps_recipe_step_number"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    step_number = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)

    recipe = relationship("Recipe", back_populates="steps")

    def __repr__(self):
        return f"<Step recipe={self.recipe_id} #{self.step_number}>"


class RecipePhoto(Base):
    """Photo attached to a recipe. photo_url is the public URL of the stored file."""
    __tablename__ = "recipe_photos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    photo_url = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<RecipePhoto {self.id}: {self.photo_url}>"


class Comment(Base):
    """
    Comment model - append-only remarks on a recipe.

    The author's display name is not stored; it is joined from users when
    comments are read.
    """
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Comment {self.id} recipe={self.recipe_id}>"


class Like(Base):
    """
    Like model - presence of a row means the user likes the recipe.

    At most one row per (recipe_id, user_id); the unique constraint is what
    rejects a duplicate like.
    """
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("recipe_id", "user_id", name="uq_likes_recipe_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Like user={self.user_id} recipe={self.recipe_id}>"
