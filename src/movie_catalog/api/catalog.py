"""Catalog API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.database import get_db
from movie_catalog.schemas.collection import (
    AddToCatalog,
    CatalogAddResponse,
    CatalogItem,
    CatalogResponse,
    CopiesUpdate,
)
from movie_catalog.schemas.common import ActionResponse
from movie_catalog.schemas.movie import CachedMovie, MovieReference
from movie_catalog.services.collection import CollectionService, CollectionState
from movie_catalog.services.result import Err, failure_message
from movie_catalog.utils.security import CurrentUser

router = APIRouter(prefix="/catalog", tags=["catalog"])


async def _catalog_response(db: AsyncSession, user_id: int) -> CatalogResponse:
    result = await CollectionService(db).catalog_for(user_id)
    if isinstance(result, Err):
        return CatalogResponse(success=False, message=failure_message(result))

    return CatalogResponse(
        success=True,
        message="Catalog successfully retrieved.",
        user_id=user_id,
        catalog=[CatalogItem.model_validate(entry) for entry in result.value],
    )


@router.get("", response_model=CatalogResponse)
async def get_catalog(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> CatalogResponse:
    """Get the logged-in user's catalog."""
    return await _catalog_response(db, current_user.user_id)


@router.get("/users/{user_id}", response_model=CatalogResponse)
async def visit_catalog(
    user_id: int,
    db: AsyncSession = Depends(get_db),
) -> CatalogResponse:
    """Get any user's catalog. Does not require authentication."""
    return await _catalog_response(db, user_id)


@router.post("", response_model=CatalogAddResponse)
async def add_to_catalog(
    current_user: CurrentUser,
    payload: AddToCatalog,
    db: AsyncSession = Depends(get_db),
) -> CatalogAddResponse:
    """Add a movie to the logged-in user's catalog.

    A movie on the user's wish list is moved from there into the catalog.
    """
    ref = MovieReference.model_validate(payload.model_dump(exclude={"copies"}))
    result = await CollectionService(db).add_to_catalog(current_user, ref, payload.copies)
    if isinstance(result, Err):
        return CatalogAddResponse(success=False, message=failure_message(result))

    addition = result.value
    if addition.previous_state is CollectionState.IN_WISH_LIST:
        message = "Movie moved from the user's wish list to their catalog."
    else:
        message = "Movie added to the user's catalog."
    return CatalogAddResponse(
        success=True,
        message=message,
        movie=CachedMovie.model_validate(addition.movie),
        copies=addition.copies,
        previous_state=addition.previous_state.value,
    )


@router.delete("/{tmdb_id}", response_model=ActionResponse)
async def remove_from_catalog(
    tmdb_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ActionResponse:
    """Remove a movie from the logged-in user's catalog."""
    result = await CollectionService(db).remove_from_catalog(current_user, tmdb_id)
    if isinstance(result, Err):
        return ActionResponse(success=False, message=failure_message(result))
    return ActionResponse(success=True, message="Movie removed from user's catalog.")


@router.put("/{tmdb_id}/copies", response_model=ActionResponse)
async def update_copies(
    tmdb_id: int,
    current_user: CurrentUser,
    payload: CopiesUpdate,
    db: AsyncSession = Depends(get_db),
) -> ActionResponse:
    """Change how many copies of a cataloged movie the user owns."""
    result = await CollectionService(db).update_copy_count(current_user, tmdb_id, payload.copies)
    if isinstance(result, Err):
        return ActionResponse(success=False, message=failure_message(result))
    return ActionResponse(success=True, message=f"Copies updated to {payload.copies}.")
