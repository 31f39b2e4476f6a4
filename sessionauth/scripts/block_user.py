# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Block or unblock a user by username or email."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from sessionauth.infrastructure.db import init_db
from sessionauth.infrastructure.repositories.users.sqlalchemy_auth_repository import (
    SqlAlchemyAuthRepository,
)
from sessionauth.shared.config import load_config
from sessionauth.shared.errors import NotFoundError
from sessionauth.shared.logging import logger, setup_logging


def set_blocked(repository: SqlAlchemyAuthRepository, login: str, blocked: bool) -> bool:
    try:
        user_id, _ = repository.get_user_by_login(login)
    except NotFoundError:
        logger.error(f"block_user: no user matches login={login!r}")
        return False
    repository.set_blocked(user_id, blocked)
    logger.info(f"block_user: user_id={user_id} blocked={blocked}")
    return True


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Block or unblock a user account")
    parser.add_argument("login", help="Username or email of the account")
    parser.add_argument(
        "--unblock",
        action="store_true",
        help="Clear the blocked flag instead of setting it",
    )
    args = parser.parse_args(argv)

    setup_logging(load_config().log_level)
    init_db()
    ok = set_blocked(SqlAlchemyAuthRepository(), args.login, not args.unblock)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
