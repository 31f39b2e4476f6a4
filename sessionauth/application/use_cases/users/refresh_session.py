# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta

from sessionauth.domain.users.repositories import AuthRepository, TokenSigner
from sessionauth.shared.errors import (
    AuthenticationError,
    NotFoundError,
    SessionRotationConflictError,
)
from sessionauth.shared.logging import logger

from .login_user import SESSION_TTL, new_refresh_token


@dataclass(slots=True, frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class RefreshSessionUseCase:
    """Exchange a refresh token for a new token pair, rotating the session.

    Every successful call replaces the stored refresh token, so the value
    presented here can never be used again. Expired sessions are deleted on
    sight; nothing else sweeps them.
    """

    def __init__(
        self,
        *,
        repository: AuthRepository,
        token_signer: TokenSigner,
        session_ttl: timedelta = SESSION_TTL,
    ) -> None:
        self._repository = repository
        self._token_signer = token_signer
        self._session_ttl = session_ttl

    def execute(self, refresh_token: str) -> TokenPair:
        if not refresh_token:
            raise AuthenticationError("invalid_session")

        try:
            session = self._repository.get_session_by_refresh_token(refresh_token)
        except NotFoundError:
            logger.info("auth.refresh: rejected, unknown refresh token")
            raise AuthenticationError("invalid_session") from None

        now = datetime.now(UTC)
        if session.is_expired(now):
            self._repository.delete_session(session.user_id, session.id)
            logger.info(f"auth.refresh: session_id={session.id} expired, deleted")
            raise AuthenticationError("session_expired")

        rotated = replace(
            session,
            refresh_token=new_refresh_token(),
            created_at=now,
            expires_at=now + self._session_ttl,
        )
        try:
            self._repository.refresh_session(rotated, previous_refresh_token=refresh_token)
        except SessionRotationConflictError:
            logger.warning(
                f"auth.refresh: concurrent rotation lost for session_id={session.id}"
            )
            raise AuthenticationError("invalid_session") from None

        access_token = self._token_signer.issue_access_token(session.user_id)
        logger.info(f"auth.refresh: rotated session_id={session.id}")
        return TokenPair(access_token=access_token, refresh_token=rotated.refresh_token)
