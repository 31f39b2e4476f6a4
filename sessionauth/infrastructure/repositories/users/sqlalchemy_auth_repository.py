# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DbSession

from sessionauth.domain.users.entities import Session as DomainSession
from sessionauth.domain.users.repositories import AuthRepository
from sessionauth.infrastructure.db.models import Session, User
from sessionauth.infrastructure.db.session import session_scope
from sessionauth.shared.errors import (
    ConflictError,
    NotFoundError,
    RepositoryError,
    SessionRotationConflictError,
)
from sessionauth.shared.logging import logger


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_domain(row: Session) -> DomainSession:
    return DomainSession(
        id=row.id,
        user_id=row.user_id,
        refresh_token=row.refresh_token,
        created_at=_as_utc(row.created_at),
        expires_at=_as_utc(row.expires_at),
        user_agent=row.user_agent or "",
        client_ip=row.client_ip,
    )


class SqlAlchemyAuthRepository(AuthRepository):
    def __init__(self, session_factory: Callable[[], DbSession] | None = None) -> None:
        self._session_factory = session_factory

    def create_user(
        self, user_id: UUID, email: str, username: str, password_hash: str
    ) -> UUID:
        try:
            with session_scope(self._session_factory) as session:
                # Login matches either column, so a value must be unique across both.
                clash = session.execute(
                    select(User.id)
                    .where(or_(User.username == email, User.email == username))
                    .limit(1)
                ).first()
                if clash is not None:
                    logger.info(f"repo.create_user: login clash for user_id={user_id}")
                    raise ConflictError("user")
                session.add(
                    User(
                        id=user_id,
                        email=email,
                        username=username,
                        password_hash=password_hash,
                        created_at=datetime.now(UTC),
                    )
                )
                session.flush()
        except IntegrityError as exc:
            logger.info(f"repo.create_user: unique constraint hit for user_id={user_id}")
            raise ConflictError("user") from exc
        except SQLAlchemyError as exc:
            logger.error(f"repo.create_user: {type(exc).__name__}")
            raise RepositoryError("create_user") from exc
        return user_id

    def get_user_by_login(self, login: str) -> tuple[UUID, str]:
        try:
            with session_scope(self._session_factory) as session:
                row = session.execute(
                    select(User.id, User.password_hash).where(
                        or_(User.username == login, User.email == login)
                    )
                ).first()
        except SQLAlchemyError as exc:
            logger.error(f"repo.get_user_by_login: {type(exc).__name__}")
            raise RepositoryError("get_user_by_login") from exc
        if row is None:
            raise NotFoundError("user")
        return row.id, row.password_hash

    def user_is_blocked(self, user_id: UUID) -> bool:
        try:
            with session_scope(self._session_factory) as session:
                blocked = session.execute(
                    select(User.is_blocked).where(User.id == user_id)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error(f"repo.user_is_blocked: {type(exc).__name__}")
            raise RepositoryError("user_is_blocked") from exc
        if blocked is None:
            raise NotFoundError("user")
        return bool(blocked)

    def set_blocked(self, user_id: UUID, blocked: bool) -> None:
        try:
            with session_scope(self._session_factory) as session:
                result = session.execute(
                    update(User).where(User.id == user_id).values(is_blocked=blocked)
                )
                affected = result.rowcount
        except SQLAlchemyError as exc:
            logger.error(f"repo.set_blocked: {type(exc).__name__}")
            raise RepositoryError("set_blocked") from exc
        if affected != 1:
            raise NotFoundError("user")

    def store_session(self, user_id: UUID, session: DomainSession) -> None:
        try:
            with session_scope(self._session_factory) as db:
                db.add(
                    Session(
                        id=session.id,
                        user_id=user_id,
                        refresh_token=session.refresh_token,
                        created_at=session.created_at,
                        expires_at=session.expires_at,
                        user_agent=session.user_agent,
                        client_ip=session.client_ip,
                    )
                )
        except SQLAlchemyError as exc:
            logger.error(f"repo.store_session: {type(exc).__name__}")
            raise RepositoryError("store_session") from exc

    def get_session_by_refresh_token(self, refresh_token: str) -> DomainSession:
        try:
            with session_scope(self._session_factory) as db:
                row = db.execute(
                    select(Session).where(Session.refresh_token == refresh_token)
                ).scalar_one_or_none()
                found = _to_domain(row) if row is not None else None
        except SQLAlchemyError as exc:
            logger.error(f"repo.get_session_by_refresh_token: {type(exc).__name__}")
            raise RepositoryError("get_session_by_refresh_token") from exc
        if found is None:
            raise NotFoundError("session")
        return found

    def refresh_session(self, session: DomainSession, *, previous_refresh_token: str) -> None:
        # Compare-and-swap on the stored refresh token: of two concurrent
        # rotations of one session only the first matches the WHERE clause.
        try:
            with session_scope(self._session_factory) as db:
                result = db.execute(
                    update(Session)
                    .where(
                        Session.id == session.id,
                        Session.user_id == session.user_id,
                        Session.refresh_token == previous_refresh_token,
                    )
                    .values(
                        refresh_token=session.refresh_token,
                        created_at=session.created_at,
                        expires_at=session.expires_at,
                    )
                )
                affected = result.rowcount
        except SQLAlchemyError as exc:
            logger.error(f"repo.refresh_session: {type(exc).__name__}")
            raise RepositoryError("refresh_session") from exc
        if affected != 1:
            raise SessionRotationConflictError()

    def delete_session(self, user_id: UUID, session_id: UUID) -> None:
        try:
            with session_scope(self._session_factory) as db:
                db.execute(
                    delete(Session).where(Session.id == session_id, Session.user_id == user_id)
                )
        except SQLAlchemyError as exc:
            logger.error(f"repo.delete_session: {type(exc).__name__}")
            raise RepositoryError("delete_session") from exc

    def delete_all_sessions(self, user_id: UUID) -> None:
        try:
            with session_scope(self._session_factory) as db:
                db.execute(delete(Session).where(Session.user_id == user_id))
        except SQLAlchemyError as exc:
            logger.error(f"repo.delete_all_sessions: {type(exc).__name__}")
            raise RepositoryError("delete_all_sessions") from exc
