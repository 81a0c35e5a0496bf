"""Tests for account registration, login, update and removal."""

from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.models.collection import CatalogEntry, WishListEntry
from movie_catalog.models.user import User
from movie_catalog.schemas.movie import MovieReference
from movie_catalog.schemas.user import UserCreate, UserLogin, UserUpdate
from movie_catalog.services.accounts import AccountService
from movie_catalog.services.collection import CollectionService
from movie_catalog.services.result import Err, ErrorCode, Ok
from movie_catalog.utils.security import AuthContext, verify_password

NEW_USER = UserCreate(
    username="cinephile",
    password="Abcdef1!",
    first_name="Ada",
    last_name="Lovelace",
    email="ada@example.com",
)


@pytest.fixture
def accounts(db_session: AsyncSession) -> AccountService:
    return AccountService(db_session)


class TestRegister:
    async def test_register_hashes_password(self, accounts: AccountService) -> None:
        result = await accounts.register(NEW_USER)

        assert isinstance(result, Ok)
        assert result.value.id is not None
        assert result.value.hashed_password != NEW_USER.password
        assert verify_password(NEW_USER.password, result.value.hashed_password)

    async def test_username_taken(self, accounts: AccountService) -> None:
        await accounts.register(NEW_USER)

        result = await accounts.register(NEW_USER.model_copy(update={"email": "b@example.com"}))

        assert isinstance(result, Err)
        assert result.code is ErrorCode.USERNAME_TAKEN
        assert result.message == "Username: cinephile, is taken."

    @pytest.mark.parametrize(
        ("field", "value", "message"),
        [
            ("username", "ab", "Invalid/Missing username."),
            ("username", "has space", "Invalid/Missing username."),
            ("password", "password", "Invalid/Missing password."),
            ("email", "not-an-email", "Invalid/Missing email address."),
            ("first_name", "", "Invalid/Missing first name."),
            ("last_name", "x" * 256, "Invalid/Missing last name."),
        ],
    )
    async def test_field_rules(
        self, accounts: AccountService, field: str, value: str, message: str
    ) -> None:
        result = await accounts.register(NEW_USER.model_copy(update={field: value}))

        assert isinstance(result, Err)
        assert result.code is ErrorCode.INVALID_INPUT
        assert result.message == message


class TestAuthenticate:
    async def test_valid_credentials(
        self, accounts: AccountService, user: User, user_password: str
    ) -> None:
        credentials = UserLogin(username=user.username, password=user_password)
        result = await accounts.authenticate(credentials)

        assert isinstance(result, Ok)
        assert result.value.id == user.id

    async def test_wrong_password(self, accounts: AccountService, user: User) -> None:
        credentials = UserLogin(username=user.username, password="Wrong1!pw")
        result = await accounts.authenticate(credentials)

        assert isinstance(result, Err)
        assert result.code is ErrorCode.INVALID_CREDENTIALS

    async def test_unknown_username(self, accounts: AccountService) -> None:
        result = await accounts.authenticate(UserLogin(username="nobody123", password="Abcdef1!"))

        assert isinstance(result, Err)
        assert result.code is ErrorCode.USER_NOT_FOUND


class TestUpdate:
    async def test_partial_update(
        self, accounts: AccountService, auth: AuthContext, user: User
    ) -> None:
        result = await accounts.update(auth, UserUpdate(first_name="Grace", password="Newpass1!"))

        assert isinstance(result, Ok)
        assert result.value.first_name == "Grace"
        assert result.value.last_name == user.last_name
        assert verify_password("Newpass1!", result.value.hashed_password)

    async def test_empty_update_rejected(self, accounts: AccountService, auth: AuthContext) -> None:
        result = await accounts.update(auth, UserUpdate())

        assert isinstance(result, Err)
        assert result.message.startswith("Missing parameter(s)")

    async def test_invalid_field_rejected(
        self, accounts: AccountService, auth: AuthContext
    ) -> None:
        result = await accounts.update(auth, UserUpdate(email="nope"))

        assert isinstance(result, Err)
        assert result.message == "Invalid/Missing email address."

    async def test_username_must_stay_unique(
        self, accounts: AccountService, auth: AuthContext
    ) -> None:
        await accounts.register(NEW_USER)

        result = await accounts.update(auth, UserUpdate(username=NEW_USER.username))

        assert isinstance(result, Err)
        assert result.code is ErrorCode.USERNAME_TAKEN


class TestDelete:
    async def test_removes_user_and_collections(
        self, db_session: AsyncSession, accounts: AccountService, auth: AuthContext
    ) -> None:
        collection = CollectionService(db_session)
        ref = MovieReference(
            tmdb_id=550, imdb_id="tt0137523", title="Fight Club", poster="p.jpg",
            release_date=date(1999, 10, 15),
        )
        other = MovieReference(tmdb_id=949, imdb_id="tt0113277", title="Heat", poster="h.jpg")
        await collection.add_to_catalog(auth, ref)
        await collection.add_to_wish_list(auth, other)

        result = await accounts.delete(auth)

        assert result == Ok(True)
        for model in (CatalogEntry, WishListEntry, User):
            count = await db_session.execute(select(func.count()).select_from(model))
            assert count.scalar_one() == 0
