from .user import User
from .recipe import Recipe, Ingredient, Step, RecipePhoto, Comment, Like

__all__ = [
    "User",
    "Recipe",
    "Ingredient",
    "Step",
    "RecipePhoto",
    "Comment",
    "Like",
]
