# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-cases for revoking sessions."""

from __future__ import annotations

from uuid import UUID

from sessionauth.domain.users.repositories import AuthRepository
from sessionauth.shared.errors import ValidationError
from sessionauth.shared.logging import logger


def parse_id(value: UUID | str, field: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(
            context={"rule": f"{field}_format", "message": f"invalid {field.replace('_', ' ')}"}
        ) from None


class LogoutSessionUseCase:
    def __init__(self, *, repository: AuthRepository) -> None:
        self._repository = repository

    def execute(self, user_id: UUID | str, session_id: UUID | str) -> None:
        uid = parse_id(user_id, "user_id")
        sid = parse_id(session_id, "session_id")
        self._repository.delete_session(uid, sid)
        logger.info(f"auth.logout: user_id={uid} session_id={sid}")


class LogoutAllSessionsUseCase:
    def __init__(self, *, repository: AuthRepository) -> None:
        self._repository = repository

    def execute(self, user_id: UUID | str) -> None:
        uid = parse_id(user_id, "user_id")
        self._repository.delete_all_sessions(uid)
        logger.info(f"auth.logout_all: user_id={uid}")
