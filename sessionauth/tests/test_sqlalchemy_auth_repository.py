from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sessionauth.domain.users.entities import Session
from sessionauth.infrastructure.db import Base, init_db
from sessionauth.infrastructure.repositories.users.sqlalchemy_auth_repository import (
    SqlAlchemyAuthRepository,
)
from sessionauth.shared.errors import (
    ConflictError,
    NotFoundError,
    RepositoryError,
    SessionRotationConflictError,
)


@pytest.fixture()
def repo():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    yield SqlAlchemyAuthRepository(factory)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def _user(repo: SqlAlchemyAuthRepository, username: str = "alice"):
    return repo.create_user(uuid4(), f"{username}@example.com", username, "hash")


def _session(user_id, token: str = "rt-1", *, age: timedelta = timedelta(0)) -> Session:
    created = datetime.now(UTC) - age
    return Session(
        id=uuid4(),
        user_id=user_id,
        refresh_token=token,
        created_at=created,
        expires_at=created + timedelta(days=15),
        user_agent="pytest",
        client_ip="127.0.0.1",
    )


def test_create_and_lookup_by_username_or_email(repo: SqlAlchemyAuthRepository) -> None:
    user_id = _user(repo)

    assert repo.get_user_by_login("alice") == (user_id, "hash")
    assert repo.get_user_by_login("alice@example.com") == (user_id, "hash")
    with pytest.raises(NotFoundError):
        repo.get_user_by_login("ALICE")


def test_duplicate_user_conflicts(repo: SqlAlchemyAuthRepository) -> None:
    _user(repo)

    with pytest.raises(ConflictError):
        repo.create_user(uuid4(), "alice@example.com", "other", "hash")
    with pytest.raises(ConflictError):
        repo.create_user(uuid4(), "other@example.com", "alice", "hash")


def test_username_and_email_cannot_shadow_each_other(repo: SqlAlchemyAuthRepository) -> None:
    squatter = repo.create_user(uuid4(), "mallory@example.com", "bob@example.com", "hash")

    with pytest.raises(ConflictError):
        repo.create_user(uuid4(), "bob@example.com", "bob", "hash")
    with pytest.raises(ConflictError):
        repo.create_user(uuid4(), "carol@example.com", "mallory@example.com", "hash")

    assert repo.get_user_by_login("bob@example.com") == (squatter, "hash")
    with pytest.raises(NotFoundError):
        repo.get_user_by_login("bob")


def test_blocked_flag_polarity(repo: SqlAlchemyAuthRepository) -> None:
    user_id = _user(repo)

    assert repo.user_is_blocked(user_id) is False
    repo.set_blocked(user_id, True)
    assert repo.user_is_blocked(user_id) is True

    with pytest.raises(NotFoundError):
        repo.user_is_blocked(uuid4())
    with pytest.raises(NotFoundError):
        repo.set_blocked(uuid4(), True)


def test_store_and_fetch_session(repo: SqlAlchemyAuthRepository) -> None:
    user_id = _user(repo)
    session = _session(user_id)

    repo.store_session(user_id, session)
    found = repo.get_session_by_refresh_token("rt-1")

    assert found.id == session.id
    assert found.user_id == user_id
    assert found.expires_at.tzinfo is not None
    assert abs(found.expires_at - session.expires_at) < timedelta(seconds=1)
    with pytest.raises(NotFoundError):
        repo.get_session_by_refresh_token("rt")


def test_duplicate_refresh_token_is_repository_error(repo: SqlAlchemyAuthRepository) -> None:
    user_id = _user(repo)
    repo.store_session(user_id, _session(user_id))

    with pytest.raises(RepositoryError):
        repo.store_session(user_id, _session(user_id))


def test_refresh_session_compare_and_swap(repo: SqlAlchemyAuthRepository) -> None:
    user_id = _user(repo)
    session = _session(user_id, age=timedelta(days=1))
    repo.store_session(user_id, session)
    now = datetime.now(UTC)
    winner = Session(
        id=session.id,
        user_id=user_id,
        refresh_token="rt-2",
        created_at=now,
        expires_at=now + timedelta(days=15),
        user_agent=session.user_agent,
        client_ip=session.client_ip,
    )
    loser = Session(
        id=session.id,
        user_id=user_id,
        refresh_token="rt-3",
        created_at=now,
        expires_at=now + timedelta(days=15),
        user_agent=session.user_agent,
        client_ip=session.client_ip,
    )

    repo.refresh_session(winner, previous_refresh_token="rt-1")
    with pytest.raises(SessionRotationConflictError):
        repo.refresh_session(loser, previous_refresh_token="rt-1")

    assert repo.get_session_by_refresh_token("rt-2").id == session.id
    with pytest.raises(NotFoundError):
        repo.get_session_by_refresh_token("rt-1")
    with pytest.raises(NotFoundError):
        repo.get_session_by_refresh_token("rt-3")


def test_delete_session_scoped_to_owner(repo: SqlAlchemyAuthRepository) -> None:
    alice = _user(repo)
    bob = _user(repo, "bob")
    session = _session(alice)
    repo.store_session(alice, session)

    repo.delete_session(bob, session.id)
    assert repo.get_session_by_refresh_token("rt-1").id == session.id

    repo.delete_session(alice, session.id)
    repo.delete_session(alice, session.id)
    with pytest.raises(NotFoundError):
        repo.get_session_by_refresh_token("rt-1")


def test_delete_all_sessions(repo: SqlAlchemyAuthRepository) -> None:
    alice = _user(repo)
    bob = _user(repo, "bob")
    repo.store_session(alice, _session(alice, "a-1"))
    repo.store_session(alice, _session(alice, "a-2"))
    repo.store_session(bob, _session(bob, "b-1"))

    repo.delete_all_sessions(alice)

    for token in ("a-1", "a-2"):
        with pytest.raises(NotFoundError):
            repo.get_session_by_refresh_token(token)
    assert repo.get_session_by_refresh_token("b-1").user_id == bob
