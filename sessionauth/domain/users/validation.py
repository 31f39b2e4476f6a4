# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Input rules for registration.

Each check raises :class:`ValidationError` naming the first rule that failed.
The email rule is deliberately minimal: a length window and an ``@``.
"""

from __future__ import annotations

import unicodedata

from sessionauth.shared.errors import ValidationError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
EMAIL_MIN_LENGTH = 5
EMAIL_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8


def _fail(rule: str, message: str) -> ValidationError:
    return ValidationError(context={"rule": rule, "message": message})


def _has_category(text: str, *prefixes: str) -> bool:
    # Matched on Unicode general category: Lu, Ll, N*, P* and S*.
    return any(unicodedata.category(char).startswith(prefixes) for char in text)


def validate_username(username: str) -> None:
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise _fail(
            "username_length",
            f"username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters",
        )


def validate_email(email: str) -> None:
    if not EMAIL_MIN_LENGTH <= len(email) <= EMAIL_MAX_LENGTH:
        raise _fail(
            "email_length",
            f"email must be between {EMAIL_MIN_LENGTH} and {EMAIL_MAX_LENGTH} characters",
        )
    if "@" not in email:
        raise _fail("email_format", "invalid email format")


def validate_password(password: str) -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise _fail(
            "password_length",
            f"password must be at least {PASSWORD_MIN_LENGTH} characters long",
        )
    if not _has_category(password, "Lu"):
        raise _fail("password_uppercase", "password must contain at least one uppercase letter")
    if not _has_category(password, "Ll"):
        raise _fail("password_lowercase", "password must contain at least one lowercase letter")
    if not _has_category(password, "N"):
        raise _fail("password_digit", "password must contain at least one number")
    if not _has_category(password, "P", "S"):
        raise _fail("password_symbol", "password must contain at least one special character")


def validate_registration(username: str, email: str, password: str) -> None:
    validate_username(username)
    validate_email(email)
    validate_password(password)


__all__ = [
    "validate_email",
    "validate_password",
    "validate_registration",
    "validate_username",
]
