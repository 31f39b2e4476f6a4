# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from sessionauth.domain.users.repositories import TokenSigner
from sessionauth.shared.config import TokenConfig
from sessionauth.shared.errors import AuthenticationError


class JwtTokenSigner(TokenSigner):
    """HMAC-signed access tokens carrying the user id as ``sub``."""

    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta = timedelta(minutes=15),
        algorithm: str = "HS256",
        issuer: str | None = None,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._issuer = issuer

    @classmethod
    def from_config(cls, config: TokenConfig) -> "JwtTokenSigner":
        return cls(
            secret=config.secret,
            ttl=timedelta(seconds=config.access_ttl_seconds),
            algorithm=config.algorithm,
            issuer=config.issuer,
        )

    def issue_access_token(self, user_id: UUID) -> str:
        now = datetime.now(UTC)
        claims: dict[str, object] = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + self._ttl,
        }
        if self._issuer:
            claims["iss"] = self._issuer
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> UUID:
        if not token:
            raise AuthenticationError("invalid_token")
        try:
            # Pinning the algorithm list rejects "none" and any algorithm swap.
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["exp", "sub"]},
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("token_expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("invalid_token") from exc

        subject = claims.get("sub")
        if not subject:
            raise AuthenticationError("invalid_token")
        try:
            return UUID(subject)
        except (TypeError, ValueError) as exc:
            raise AuthenticationError("invalid_token") from exc
