"""
Recipe App API
==============

Routers mounted under the API prefix by main.py.
"""

from .ai_routes import router as ai_router
from .search_routes import router as search_router
from .user_routes import router as user_router

__all__ = ["ai_router", "search_router", "user_router"]
