# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from .entities import Session


class AuthRepository(Protocol):
    def create_user(
        self, user_id: UUID, email: str, username: str, password_hash: str
    ) -> UUID: ...
    def get_user_by_login(self, login: str) -> tuple[UUID, str]: ...
    def user_is_blocked(self, user_id: UUID) -> bool: ...
    def set_blocked(self, user_id: UUID, blocked: bool) -> None: ...

    def store_session(self, user_id: UUID, session: Session) -> None: ...
    def get_session_by_refresh_token(self, refresh_token: str) -> Session: ...
    def refresh_session(self, session: Session, *, previous_refresh_token: str) -> None: ...
    def delete_session(self, user_id: UUID, session_id: UUID) -> None: ...
    def delete_all_sessions(self, user_id: UUID) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenSigner(Protocol):
    def issue_access_token(self, user_id: UUID) -> str: ...
    def verify_access_token(self, token: str) -> UUID: ...
