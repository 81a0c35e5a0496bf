"""API route handlers."""

from movie_catalog.api.router import api_router

__all__ = ["api_router"]
