"""
Route handlers: JSON API routers and server-rendered pages.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .moderation import router as moderation_router
from .favorites import router as favorites_router
from .agents import router as agents_router
from .complexes import router as complexes_router
from .uploads import router as uploads_router
from .pages import router as pages_router

__all__ = [
    "auth_router",
    "properties_router",
    "moderation_router",
    "favorites_router",
    "agents_router",
    "complexes_router",
    "uploads_router",
    "pages_router",
]
