# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from sessionauth.shared.config import DatabaseConfig, load_config
from sessionauth.shared.logging import logger


class Base(DeclarativeBase):
    pass


def build_engine(config: DatabaseConfig) -> Engine:
    url = config.url
    kwargs: dict[str, Any] = {"echo": False, "future": True, "pool_pre_ping": True}

    if url.startswith("sqlite"):
        # SQLite has no statement timeout; the busy timeout bounds lock waits instead.
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": max(config.statement_timeout_ms / 1000.0, 0.001),
        }
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
        if url.startswith("postgresql"):
            kwargs["connect_args"] = {
                "options": f"-c statement_timeout={config.statement_timeout_ms}"
            }

    return create_engine(url, **kwargs)


ENGINE: Engine = build_engine(load_config().database)


SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)
)


@contextmanager
def session_scope(session_factory: Callable[[], Session] | None = None) -> Iterator[Session]:
    session = session_factory() if session_factory is not None else SessionLocal()
    logger.debug("db.session: opened session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed session")
    except Exception:
        logger.debug("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        if session_factory is None:
            SessionLocal.remove()


def init_db(engine: Engine | None = None) -> None:
    # Models must be imported so their tables are registered on Base.metadata.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine or ENGINE)
    logger.info("Database schema ensured")
