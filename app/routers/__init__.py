from .recipes import router as recipes_router
from .health import router as health_router
from .users import router as users_router
from .social import router as social_router
from .photos import router as photos_router

__all__ = ["recipes_router", "health_router", "users_router", "social_router", "photos_router"]
