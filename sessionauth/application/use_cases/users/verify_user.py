# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from uuid import UUID

from sessionauth.domain.users.repositories import AuthRepository, TokenSigner
from sessionauth.shared.errors import AuthenticationError, NotFoundError
from sessionauth.shared.logging import logger


class VerifyUserUseCase:
    """Authentication gate run once per protected request."""

    def __init__(self, *, repository: AuthRepository, token_signer: TokenSigner) -> None:
        self._repository = repository
        self._token_signer = token_signer

    def execute(self, access_token: str) -> UUID:
        user_id = self._token_signer.verify_access_token(access_token)

        try:
            blocked = self._repository.user_is_blocked(user_id)
        except NotFoundError:
            # Signed for a user that no longer resolves.
            raise AuthenticationError("invalid_token") from None

        if blocked:
            logger.warning(f"auth.verify: blocked user_id={user_id}")
            raise AuthenticationError("user_blocked")
        return user_id
