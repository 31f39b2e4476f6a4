# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from sessionauth.domain.users.entities import (
    CLIENT_IP_MAX_LENGTH,
    USER_AGENT_MAX_LENGTH,
    Session,
)
from sessionauth.domain.users.repositories import AuthRepository, PasswordHasher, TokenSigner
from sessionauth.shared.errors import AuthenticationError, NotFoundError
from sessionauth.shared.logging import logger

SESSION_TTL = timedelta(days=15)


def new_refresh_token() -> str:
    return secrets.token_urlsafe(32)


@dataclass(slots=True, frozen=True)
class LoginResult:
    user_id: UUID
    access_token: str
    refresh_token: str
    session_id: UUID


class LoginUserUseCase:
    def __init__(
        self,
        *,
        repository: AuthRepository,
        password_hasher: PasswordHasher,
        token_signer: TokenSigner,
        session_ttl: timedelta = SESSION_TTL,
    ) -> None:
        self._repository = repository
        self._password_hasher = password_hasher
        self._token_signer = token_signer
        self._session_ttl = session_ttl
        # Verified against when the login is unknown so both failures cost the same.
        self._dummy_hash = password_hasher.hash(secrets.token_urlsafe(16))

    def execute(
        self,
        login: str,
        password: str,
        user_agent: str = "",
        client_ip: str | None = None,
    ) -> LoginResult:
        try:
            user_id, password_hash = self._repository.get_user_by_login(login)
        except NotFoundError:
            self._password_hasher.verify(password, self._dummy_hash)
            logger.info("auth.login: rejected, unknown login")
            raise AuthenticationError("invalid_credentials") from None

        if not self._password_hasher.verify(password, password_hash):
            logger.info(f"auth.login: rejected, bad password for user_id={user_id}")
            raise AuthenticationError("invalid_credentials")

        access_token = self._token_signer.issue_access_token(user_id)

        now = datetime.now(UTC)
        session = Session(
            id=uuid4(),
            user_id=user_id,
            refresh_token=new_refresh_token(),
            created_at=now,
            expires_at=now + self._session_ttl,
            # Header values are client-controlled; clamp them to the stored width.
            user_agent=user_agent[:USER_AGENT_MAX_LENGTH],
            client_ip=client_ip[:CLIENT_IP_MAX_LENGTH] if client_ip else client_ip,
        )
        self._repository.store_session(user_id, session)

        logger.info(f"auth.login: ok user_id={user_id} session_id={session.id}")
        return LoginResult(
            user_id=user_id,
            access_token=access_token,
            refresh_token=session.refresh_token,
            session_id=session.id,
        )
