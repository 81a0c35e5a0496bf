"""User account registration, login, update and removal."""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.models.user import User
from movie_catalog.schemas.user import UserCreate, UserLogin, UserUpdate
from movie_catalog.services.result import Err, ErrorCode, Ok
from movie_catalog.services.stores import CatalogStore, WishListStore
from movie_catalog.utils.security import AuthContext, hash_password, verify_password
from movie_catalog.utils.validation import first_invalid_field, valid_password, valid_username

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _find_by_username(self, username: str) -> Ok[User | None] | Err:
        try:
            result = await self.session.execute(select(User).where(User.username == username))
        except SQLAlchemyError:
            logger.exception("User lookup failed for username=%s", username)
            return Err(ErrorCode.LOOKUP_FAILED, "Error querying the database.")
        return Ok(result.scalar_one_or_none())

    async def register(self, data: UserCreate) -> Ok[User] | Err:
        """Create an account after checking every field rule."""
        invalid = first_invalid_field(data.model_dump())
        if invalid:
            return Err(ErrorCode.INVALID_INPUT, invalid)

        existing = await self._find_by_username(data.username)
        if isinstance(existing, Err):
            return existing
        if existing.value is not None:
            return Err(ErrorCode.USERNAME_TAKEN, f"Username: {data.username}, is taken.")

        user = User(
            username=data.username,
            hashed_password=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            created_at=datetime.now(UTC),
        )
        try:
            async with self.session.begin_nested():
                self.session.add(user)
                await self.session.flush()
        except IntegrityError:
            return Err(ErrorCode.USERNAME_TAKEN, f"Username: {data.username}, is taken.")
        except SQLAlchemyError:
            logger.exception("Registering username=%s failed", data.username)
            return Err(ErrorCode.INSERT_FAILED, "Could not create the account.")

        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return Ok(user)

    async def authenticate(self, credentials: UserLogin) -> Ok[User] | Err:
        """Check a username and password pair."""
        if not valid_username(credentials.username):
            return Err(ErrorCode.INVALID_INPUT, "Invalid/Missing username.")
        if not valid_password(credentials.password):
            return Err(ErrorCode.INVALID_INPUT, "Invalid/Missing password.")

        found = await self._find_by_username(credentials.username)
        if isinstance(found, Err):
            return found
        if found.value is None:
            return Err(ErrorCode.USER_NOT_FOUND, "No user with matching username found.")
        if not verify_password(credentials.password, found.value.hashed_password):
            return Err(ErrorCode.INVALID_CREDENTIALS, "Invalid credentials")
        return Ok(found.value)

    async def update(self, auth: AuthContext, changes: UserUpdate) -> Ok[User] | Err:
        """Apply the provided fields to the logged-in user's account."""
        values = changes.model_dump(exclude_none=True)
        if not values:
            return Err(
                ErrorCode.INVALID_INPUT,
                "Missing parameter(s): username, password, first_name, last_name, and/or email",
            )
        invalid = first_invalid_field(values, only_present=True)
        if invalid:
            return Err(ErrorCode.INVALID_INPUT, invalid)

        try:
            user = await self.session.get(User, auth.user_id)
        except SQLAlchemyError:
            logger.exception("User lookup failed for user=%s", auth.user_id)
            return Err(ErrorCode.LOOKUP_FAILED, "Error querying the database.")
        if user is None:
            return Err(ErrorCode.USER_NOT_FOUND, "No user with a matching ID found.")

        if "username" in values and values["username"] != user.username:
            taken = await self._find_by_username(values["username"])
            if isinstance(taken, Err):
                return taken
            if taken.value is not None:
                return Err(ErrorCode.USERNAME_TAKEN, f"Username: {values['username']}, is taken.")

        if "password" in values:
            values["hashed_password"] = hash_password(values.pop("password"))

        try:
            async with self.session.begin_nested():
                for field, value in values.items():
                    setattr(user, field, value)
                await self.session.flush()
        except IntegrityError:
            return Err(ErrorCode.USERNAME_TAKEN, f"Username: {values.get('username')}, is taken.")
        except SQLAlchemyError:
            logger.exception("Updating user=%s failed", auth.user_id)
            return Err(ErrorCode.UPDATE_FAILED, "Could not update user information.")

        logger.info("Updated user id=%s fields=%s", user.id, sorted(values))
        return Ok(user)

    async def delete(self, auth: AuthContext) -> Ok[bool] | Err:
        """Remove the account along with its catalog and wish list."""
        savepoint = await self.session.begin_nested()
        for store in (CatalogStore(self.session), WishListStore(self.session)):
            cleared = await store.delete_all_for_user(auth.user_id)
            if isinstance(cleared, Err):
                await savepoint.rollback()
                return cleared

        try:
            user = await self.session.get(User, auth.user_id)
            if user is not None:
                await self.session.delete(user)
                await self.session.flush()
        except SQLAlchemyError:
            logger.exception("Deleting user=%s failed", auth.user_id)
            await savepoint.rollback()
            return Err(ErrorCode.DELETE_FAILED, "Could not delete the account.")

        await savepoint.commit()
        logger.info("Deleted user id=%s", auth.user_id)
        return Ok(user is not None)
