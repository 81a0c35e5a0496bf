"""Main API router aggregation."""

from fastapi import APIRouter

from movie_catalog.api.catalog import router as catalog_router
from movie_catalog.api.movies import router as movies_router
from movie_catalog.api.users import router as users_router
from movie_catalog.api.wish_list import router as wish_list_router

api_router = APIRouter(prefix="/api")

api_router.include_router(users_router)
api_router.include_router(movies_router)
api_router.include_router(catalog_router)
api_router.include_router(wish_list_router)
