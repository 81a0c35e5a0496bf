"""Password hashing, bearer tokens, and the per-request ``AuthContext``.

There is no server-side session: a request is authenticated by a signed JWT whose
``sub`` claim is the user ID, and logging out means the client drops the token.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.config import get_settings
from movie_catalog.database import get_db
from movie_catalog.models.user import User

LOGIN_URL = "/api/users/login"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=LOGIN_URL)
# Same scheme for endpoints that behave differently for anonymous callers
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl=LOGIN_URL, auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """The logged-in user, passed explicitly into every workflow call."""

    user_id: int
    username: str
    first_name: str
    last_name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "AuthContext":
        return cls(
            user_id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign ``data`` as a JWT that expires after ``expires_delta``.

    The lifetime defaults to ``JWT_ACCESS_TOKEN_EXPIRE_MINUTES``. Put the user ID
    in ``sub`` as a string.
    """
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    claims = {**data, "exp": datetime.now(UTC) + lifetime}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Claims of a valid, unexpired token; None for anything else."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def _user_from_token(token: str | None, db: AsyncSession) -> User | None:
    claims = decode_access_token(token) if token else None
    subject = (claims or {}).get("sub")
    if not isinstance(subject, str) or not subject.isdigit():
        return None
    # A deleted account leaves its tokens valid but pointing at nobody
    return await db.get(User, int(subject))


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Resolve the bearer token to its user, or answer 401."""
    user = await _user_from_token(token, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthContext.from_user(user)


async def get_optional_user(
    token: Annotated[str | None, Depends(optional_oauth2_scheme)],
    db: AsyncSession = Depends(get_db),
) -> AuthContext | None:
    user = await _user_from_token(token, db)
    return AuthContext.from_user(user) if user else None


CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
OptionalUser = Annotated[AuthContext | None, Depends(get_optional_user)]
