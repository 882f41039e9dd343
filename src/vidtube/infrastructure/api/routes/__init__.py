"""API route modules."""

from vidtube.infrastructure.api.routes.auth_router import router as auth_router
from vidtube.infrastructure.api.routes.health_router import router as health_router
from vidtube.infrastructure.api.routes.users_router import router as users_router

__all__ = ["auth_router", "health_router", "users_router"]
