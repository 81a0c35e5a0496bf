"""Account field rules."""

import re

PASSWORD_PATTERN = re.compile(
    r"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z])(?=.*[^a-zA-Z0-9])"
    r"(?=.*[-!$%^&*()_+|~=`{}\[\]:/;<>?,.@#]).{8,32}$"
)


def valid_username(username: str | None) -> bool:
    """6-32 characters, no spaces."""
    return bool(username) and 6 <= len(username) <= 32 and " " not in username


def valid_password(password: str | None) -> bool:
    """8-32 characters with a digit, a lower and upper case letter and a symbol."""
    return bool(password) and PASSWORD_PATTERN.fullmatch(password) is not None


def valid_email(email: str | None) -> bool:
    return bool(email) and "@" in email


def valid_name(name: str | None) -> bool:
    return bool(name) and len(name) <= 255


# Checked in this order; the first failure is reported.
FIELD_RULES = (
    ("username", valid_username, "Invalid/Missing username."),
    ("password", valid_password, "Invalid/Missing password."),
    ("email", valid_email, "Invalid/Missing email address."),
    ("first_name", valid_name, "Invalid/Missing first name."),
    ("last_name", valid_name, "Invalid/Missing last name."),
)


def first_invalid_field(values: dict[str, str | None], only_present: bool = False) -> str | None:
    """Return the message for the first field that breaks its rule.

    With ``only_present`` the fields absent from ``values`` (or None) are skipped,
    which is how partial updates are checked.
    """
    for field, rule, message in FIELD_RULES:
        value = values.get(field)
        if only_present and value is None:
            continue
        if not rule(value):
            return message
    return None
