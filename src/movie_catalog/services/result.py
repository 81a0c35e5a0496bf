"""Explicit success/failure values returned by stores and workflows."""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(StrEnum):
    """Broad failure category, used to decide how a failure is reported."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORE = "store"
    UPSTREAM = "upstream"


class ErrorCode(StrEnum):
    """The specific step or rule that failed."""

    INVALID_INPUT = "invalid_input"
    MOVIE_NOT_FOUND = "movie_not_found"
    USER_NOT_FOUND = "user_not_found"
    USERNAME_TAKEN = "username_taken"
    INVALID_CREDENTIALS = "invalid_credentials"
    ALREADY_CATALOGED = "already_cataloged"
    ALREADY_WISHED = "already_wished"
    ALREADY_OWNED = "already_owned"
    NOT_IN_WISH_LIST = "not_in_wish_list"
    LOOKUP_FAILED = "lookup_failed"
    INSERT_FAILED = "insert_failed"
    UPDATE_FAILED = "update_failed"
    DELETE_FAILED = "delete_failed"
    TRUNCATE_FAILED = "truncate_failed"
    SCRAPE_FAILED = "scrape_failed"
    UPSTREAM_FAILED = "upstream_failed"


_KINDS: dict[ErrorCode, ErrorKind] = {
    ErrorCode.INVALID_INPUT: ErrorKind.VALIDATION,
    ErrorCode.INVALID_CREDENTIALS: ErrorKind.VALIDATION,
    ErrorCode.MOVIE_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.USERNAME_TAKEN: ErrorKind.CONFLICT,
    ErrorCode.ALREADY_CATALOGED: ErrorKind.CONFLICT,
    ErrorCode.ALREADY_WISHED: ErrorKind.CONFLICT,
    ErrorCode.ALREADY_OWNED: ErrorKind.CONFLICT,
    ErrorCode.NOT_IN_WISH_LIST: ErrorKind.CONFLICT,
    ErrorCode.LOOKUP_FAILED: ErrorKind.STORE,
    ErrorCode.INSERT_FAILED: ErrorKind.STORE,
    ErrorCode.UPDATE_FAILED: ErrorKind.STORE,
    ErrorCode.DELETE_FAILED: ErrorKind.STORE,
    ErrorCode.TRUNCATE_FAILED: ErrorKind.STORE,
    ErrorCode.SCRAPE_FAILED: ErrorKind.UPSTREAM,
    ErrorCode.UPSTREAM_FAILED: ErrorKind.UPSTREAM,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful outcome carrying its value."""

    value: T


@dataclass(frozen=True)
class Err:
    """A failed outcome.

    ``message`` is safe to show to an end user; store internals are only logged.
    """

    code: ErrorCode
    message: str

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self.code]


def failure_message(err: Err) -> str:
    """Message for a ``success: false`` response.

    Store and upstream failures are also logged; rule violations are not.
    """
    if err.kind in (ErrorKind.STORE, ErrorKind.UPSTREAM):
        logger.warning("Request failed with %s: %s", err.code, err.message)
    return err.message
