# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from uuid import UUID, uuid4

from sessionauth.domain.users.repositories import AuthRepository, PasswordHasher
from sessionauth.domain.users.validation import validate_registration
from sessionauth.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        repository: AuthRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._repository = repository
        self._password_hasher = password_hasher

    def execute(self, username: str, email: str, password: str) -> UUID:
        validate_registration(username, email, password)

        hashed = self._password_hasher.hash(password)
        user_id = self._repository.create_user(uuid4(), email, username, hashed)
        logger.info(f"auth.register: created user_id={user_id}")
        return user_id
