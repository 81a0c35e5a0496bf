"""Wish list API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.database import get_db
from movie_catalog.schemas.collection import WishListItem, WishListResponse
from movie_catalog.schemas.common import ActionResponse
from movie_catalog.schemas.movie import MovieReference
from movie_catalog.services.collection import CollectionService
from movie_catalog.services.result import Err, failure_message
from movie_catalog.utils.security import CurrentUser

router = APIRouter(prefix="/wish-list", tags=["wish list"])


async def _wish_list_response(db: AsyncSession, user_id: int) -> WishListResponse:
    result = await CollectionService(db).wish_list_for(user_id)
    if isinstance(result, Err):
        return WishListResponse(success=False, message=failure_message(result))

    return WishListResponse(
        success=True,
        message="Wish list successfully retrieved.",
        user_id=user_id,
        wish_list=[WishListItem.model_validate(entry) for entry in result.value],
    )


@router.get("", response_model=WishListResponse)
async def get_wish_list(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> WishListResponse:
    """Get the logged-in user's wish list."""
    return await _wish_list_response(db, current_user.user_id)


@router.get("/users/{user_id}", response_model=WishListResponse)
async def visit_wish_list(
    user_id: int,
    db: AsyncSession = Depends(get_db),
) -> WishListResponse:
    """Get any user's wish list. Does not require authentication."""
    return await _wish_list_response(db, user_id)


@router.post("", response_model=ActionResponse)
async def add_to_wish_list(
    current_user: CurrentUser,
    payload: MovieReference,
    db: AsyncSession = Depends(get_db),
) -> ActionResponse:
    """Wish for a movie the user does not own yet."""
    result = await CollectionService(db).add_to_wish_list(current_user, payload)
    if isinstance(result, Err):
        return ActionResponse(success=False, message=failure_message(result))
    return ActionResponse(success=True, message="Movie wished for User.")


@router.delete("/{tmdb_id}", response_model=ActionResponse)
async def remove_from_wish_list(
    tmdb_id: int,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ActionResponse:
    """Remove a movie from the logged-in user's wish list."""
    result = await CollectionService(db).remove_from_wish_list(current_user, tmdb_id)
    if isinstance(result, Err):
        return ActionResponse(success=False, message=failure_message(result))
    return ActionResponse(success=True, message="Movie removed from user's wish list.")
