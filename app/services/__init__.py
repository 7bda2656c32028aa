"""Services module for the recipe sharing API."""

from .credentials import credential_service, CredentialService
from .search import search_service, SearchService
from .recipes import recipe_service, RecipeService
from .social import social_service, SocialService
from .storage import storage_service, StorageService
from .photos import photo_service, PhotoService, PhotoUpload
from .users import user_service, UserService

__all__ = [
    "credential_service",
    "CredentialService",
    "search_service",
    "SearchService",
    "recipe_service",
    "RecipeService",
    "social_service",
    "SocialService",
    "storage_service",
    "StorageService",
    "photo_service",
    "PhotoService",
    "PhotoUpload",
    "user_service",
    "UserService",
]
