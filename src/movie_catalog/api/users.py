"""User account API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.database import get_db
from movie_catalog.schemas.common import ActionResponse
from movie_catalog.schemas.user import (
    AccountResponse,
    CurrentUserResponse,
    LoginResponse,
    SessionUser,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from movie_catalog.services.accounts import AccountService
from movie_catalog.services.result import Err, failure_message
from movie_catalog.utils.security import CurrentUser, OptionalUser, create_access_token

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=CurrentUserResponse)
async def get_current_user_info(current_user: OptionalUser) -> CurrentUserResponse:
    """Get the logged-in user's information, if anyone is logged in."""
    if current_user is None:
        return CurrentUserResponse(logged_in=False)

    return CurrentUserResponse(
        logged_in=True,
        user=SessionUser(
            user_id=current_user.user_id,
            username=current_user.username,
            first_name=current_user.first_name,
            last_name=current_user.last_name,
            email=current_user.email,
        ),
    )


@router.post("/register", response_model=AccountResponse)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> AccountResponse:
    """Register a new user.

    The password is securely hashed before storage.
    """
    result = await AccountService(db).register(user_data)
    if isinstance(result, Err):
        return AccountResponse(success=False, message=failure_message(result))

    user = result.value
    return AccountResponse(
        success=True,
        message=f"Account created for user: {user.username}.",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Authenticate a user and return a JWT bearer token."""
    result = await AccountService(db).authenticate(credentials)
    if isinstance(result, Err):
        return LoginResponse(success=False, message=failure_message(result))

    access_token = create_access_token(data={"sub": str(result.value.id)})
    return LoginResponse(success=True, message="User logged in.", access_token=access_token)


@router.post("/logout", response_model=ActionResponse)
async def logout() -> ActionResponse:
    """Log out.

    Tokens are stateless; the client drops its bearer token.
    """
    return ActionResponse(success=True, message="User logged out.")


@router.put("", response_model=AccountResponse)
async def update_user(
    current_user: CurrentUser,
    changes: UserUpdate,
    db: AsyncSession = Depends(get_db),
) -> AccountResponse:
    """Update any of the logged-in user's account fields."""
    result = await AccountService(db).update(current_user, changes)
    if isinstance(result, Err):
        return AccountResponse(success=False, message=failure_message(result))

    return AccountResponse(
        success=True,
        message="User updates were made successfully.",
        user=UserResponse.model_validate(result.value),
    )


@router.delete("", response_model=ActionResponse)
async def delete_user(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ActionResponse:
    """Delete the logged-in user's account, catalog and wish list."""
    result = await AccountService(db).delete(current_user)
    if isinstance(result, Err):
        return ActionResponse(success=False, message=failure_message(result))
    return ActionResponse(success=True, message=f"User was deleted: {current_user.username}.")
